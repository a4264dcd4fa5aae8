"""Diff rendering for staged files.

Contains:
- render_diff: Render the minimal edit between two texts
- render_file_diff: Render one staged change into a DiffBlock with its header
"""

import difflib
import logging
from typing import Union

from stagescribe.config import DiffGranularity
from stagescribe.models import DiffBlock, FileChange, FileSnapshot, StagingStatus

logger = logging.getLogger(__name__)

# Markers for line granularity
EQUAL_PREFIX = " "
INSERT_PREFIX = "+"
DELETE_PREFIX = "-"

# Markers for word granularity (same as `git diff --word-diff=plain`)
INSERT_OPEN, INSERT_CLOSE = "{+", "+}"
DELETE_OPEN, DELETE_CLOSE = "[-", "-]"

# Mode reported in synthetic headers; the real file mode is not inspected
FILE_MODE = "100644"


def _opcodes(old, new) -> list[tuple[str, int, int, int, int]]:
    # autojunk would skip frequent lines and make the edit script non-minimal
    matcher = difflib.SequenceMatcher(None, old, new, autojunk=False)
    return matcher.get_opcodes()


def _split_lines(text: str) -> list[str]:
    # Split on "\n" only and keep it, so line endings take part in the comparison
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
        return [line + "\n" for line in lines]
    return [line + "\n" for line in lines[:-1]] + [lines[-1]]


def _strip_newline(line: str) -> str:
    return line[:-1] if line.endswith("\n") else line


def _render_lines(old: str, new: str) -> str:
    old_lines = _split_lines(old)
    new_lines = _split_lines(new)
    out = []

    for tag, i1, i2, j1, j2 in _opcodes(old_lines, new_lines):
        if tag == "equal":
            out.extend(EQUAL_PREFIX + _strip_newline(line) for line in old_lines[i1:i2])
            continue
        if tag in ("delete", "replace"):
            out.extend(DELETE_PREFIX + _strip_newline(line) for line in old_lines[i1:i2])
        if tag in ("insert", "replace"):
            out.extend(INSERT_PREFIX + _strip_newline(line) for line in new_lines[j1:j2])

    return "\n".join(out)


def _render_words(old: str, new: str) -> str:
    out = []

    for tag, i1, i2, j1, j2 in _opcodes(old, new):
        if tag == "equal":
            out.append(old[i1:i2])
            continue
        if tag in ("delete", "replace"):
            out.append(f"{DELETE_OPEN}{old[i1:i2]}{DELETE_CLOSE}")
        if tag in ("insert", "replace"):
            out.append(f"{INSERT_OPEN}{new[j1:j2]}{INSERT_CLOSE}")

    return "".join(out)


def render_diff(
    old: str,
    new: str,
    granularity: Union[DiffGranularity, str] = DiffGranularity.LINE,
) -> str:
    """Render the minimal edit from old to new as text.

    With line granularity every line is prefixed with " " (unchanged),
    "-" (deleted) or "+" (inserted), and a replaced span lists its deletions
    before its insertions. With word granularity the edit is computed per
    character and changed spans are wrapped inline in [-...-] and {+...+}.

    Rendering depends only on the two texts, so identical inputs always give
    identical output.

    Args:
        old: Previous content ("" if the file did not exist).
        new: New content ("" if the file was deleted).
        granularity: DiffGranularity or its string value.

    Returns:
        The rendered diff.

    Example (line granularity, "a\\nb\\n" -> "a\\nc\\n"):
         a
        -b
        +c
    """
    granularity = DiffGranularity(granularity)
    if granularity == DiffGranularity.WORD:
        return _render_words(old, new)
    return _render_lines(old, new)


def _build_header(change: FileChange) -> str:
    lines = [f"diff --git a/{change.old_path} b/{change.path}"]

    if change.status == StagingStatus.ADDED:
        lines.append(f"new file mode {FILE_MODE}")
    elif change.status == StagingStatus.DELETED:
        lines.append(f"deleted file mode {FILE_MODE}")
    elif change.status == StagingStatus.RENAMED:
        lines.append(f"rename from {change.old_path}")
        lines.append(f"rename to {change.path}")
    elif change.status == StagingStatus.COPIED:
        lines.append(f"copy from {change.old_path}")
        lines.append(f"copy to {change.path}")

    return "\n".join(lines)


def render_file_diff(
    change: FileChange,
    snapshot: FileSnapshot,
    granularity: Union[DiffGranularity, str] = DiffGranularity.LINE,
) -> DiffBlock:
    """Render a staged change into a DiffBlock.

    Absent content on either side is rendered as the empty string.
    """
    rendered = render_diff(
        snapshot.committed_content or "",
        snapshot.staged_content or "",
        granularity,
    )
    logger.debug("Rendered %s (%d chars)", change.path, len(rendered))
    return DiffBlock(
        path=change.path,
        rendered_text=rendered,
        header=_build_header(change),
        status=change.status,
        original_path=change.original_path,
    )
