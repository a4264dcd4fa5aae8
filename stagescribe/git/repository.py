"""Repository access used by the commit message pipeline.

Contains:
- RepositoryProvider: The narrow contract the pipeline reads a repository through
- GitRepository: Implementation backed by the git executable
- parse_porcelain_status: Parse `git status --porcelain=v1 -z` output
"""

import logging
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from stagescribe.git.exceptions import ContentReadError, GitError, RepositoryStateError
from stagescribe.git.runner import _run_git_command, _run_git_command_bytes, get_repo_root
from stagescribe.models import FileChange, StagingStatus

logger = logging.getLogger(__name__)

# Index column codes from `git status --porcelain`
INDEX_STATUS_CODES = {
    "A": StagingStatus.ADDED,
    "M": StagingStatus.MODIFIED,
    "T": StagingStatus.MODIFIED,
    "D": StagingStatus.DELETED,
    "R": StagingStatus.RENAMED,
    "C": StagingStatus.COPIED,
}

# Index mode of a submodule entry
GITLINK_MODE = "160000"

# XY pairs git uses for unmerged paths
UNMERGED_CODES = {"DD", "AU", "UD", "UA", "DU", "AA", "UU"}


@runtime_checkable
class RepositoryProvider(Protocol):
    """What the pipeline needs from a repository."""

    root: Path

    def staging_status(self) -> list[FileChange]:
        """Report the staging status of every path that may have changed."""
        ...

    def committed_content(self, path: str) -> Optional[bytes]:
        """Content of path in the last commit, None if the path is not in it."""
        ...

    def staged_content(self, path: str) -> bytes:
        """Content of path in the index."""
        ...


def parse_porcelain_status(output: str) -> list[FileChange]:
    """Parse NUL-separated porcelain v1 status into staged file changes.

    Only the index column is considered: entries whose index column is blank,
    untracked (?) or ignored (!) are not staged and are skipped.

    Args:
        output: Raw output of `git status --porcelain=v1 -z`.

    Returns:
        FileChange entries in the order git reported them.

    Raises:
        RepositoryStateError: If the index has unresolved conflicts or an
            entry cannot be parsed.
    """
    changes = []
    conflicted = []
    tokens = output.split("\0")
    i = 0

    while i < len(tokens):
        entry = tokens[i]
        i += 1
        if not entry:
            continue
        if len(entry) < 4 or entry[2] != " ":
            raise RepositoryStateError(f"Unexpected git status entry: {entry!r}")

        xy = entry[:2]
        path = entry[3:]

        if xy in UNMERGED_CODES:
            conflicted.append(path)
            continue

        index_code = xy[0]
        original_path = None
        if index_code in ("R", "C") or xy[1] in ("R", "C"):
            # -z puts the source path in the following field, for either column
            if i >= len(tokens) or not tokens[i]:
                raise RepositoryStateError(f"Missing source path for {path}")
            original_path = tokens[i]
            i += 1

        if index_code in (" ", "?", "!"):
            continue

        status = INDEX_STATUS_CODES.get(index_code)
        if status is None:
            raise RepositoryStateError(f"Unknown index status {index_code!r} for {path}")

        changes.append(FileChange(path=path, status=status, original_path=original_path))

    if conflicted:
        raise RepositoryStateError(
            "Unresolved merge conflicts in: " + ", ".join(conflicted)
        )

    return changes


def _parse_ls_tree_entry(output: bytes) -> Optional[tuple[str, str]]:
    """Return (object type, object id) from `git ls-tree -z` output, None if empty."""
    entry = output.split(b"\0", 1)[0]
    if not entry:
        return None
    meta, _, _ = entry.partition(b"\t")
    parts = meta.decode("ascii", errors="replace").split()
    if len(parts) != 3:
        raise GitError(f"Unexpected git ls-tree output: {entry!r}")
    _, object_type, object_id = parts
    return object_type, object_id


def _parse_ls_files_entry(output: bytes) -> Optional[tuple[str, str]]:
    """Return (mode, object id) from `git ls-files -s -z` output, None if empty."""
    entry = output.split(b"\0", 1)[0]
    if not entry:
        return None
    meta, _, _ = entry.partition(b"\t")
    parts = meta.decode("ascii", errors="replace").split()
    if len(parts) != 3:
        raise GitError(f"Unexpected git ls-files output: {entry!r}")
    mode, object_id, _ = parts
    return mode, object_id


def _submodule_content(commit_id: str) -> bytes:
    # Same text git diff shows for a gitlink
    return f"Subproject commit {commit_id}\n".encode("ascii")


class GitRepository:
    """Read-only view of a git working copy through the git executable."""

    def __init__(self, root: Path):
        self.root = root

    @classmethod
    def open(cls, path: Optional[Path] = None) -> "GitRepository":
        """Open the repository containing path.

        Raises:
            RepositoryStateError: If path is not inside a git repository.
        """
        try:
            root = get_repo_root(path)
        except GitError as e:
            raise RepositoryStateError(str(e)) from e
        logger.debug("Opened repository at %s", root)
        return cls(root)

    def _git(self, args: list[str]) -> str:
        return _run_git_command(args, cwd=self.root)

    def _git_bytes(self, args: list[str]) -> bytes:
        return _run_git_command_bytes(args, cwd=self.root)

    def has_commits(self) -> bool:
        """Check whether HEAD points at a commit."""
        try:
            self._git(["rev-parse", "--verify", "--quiet", "HEAD^{commit}"])
            return True
        except GitError:
            return False

    def staging_status(self) -> list[FileChange]:
        """Report staged changes relative to HEAD.

        Raises:
            RepositoryStateError: If there is no commit yet or status fails.
        """
        if not self.has_commits():
            raise RepositoryStateError(
                f"Repository at {self.root} has no commits yet; nothing to compare staged changes against."
            )
        try:
            output = self._git_bytes(["status", "--porcelain=v1", "-z", "--untracked-files=no"])
        except GitError as e:
            raise RepositoryStateError(f"Cannot compute staging status: {e}") from e
        return parse_porcelain_status(output.decode("utf-8", errors="surrogateescape"))

    def committed_content(self, path: str) -> Optional[bytes]:
        """Read path from the HEAD tree.

        Returns:
            The blob content, a "Subproject commit <id>" line for a
            submodule, or None if HEAD has no file at path.

        Raises:
            ContentReadError: If the tree or blob cannot be read.
        """
        try:
            entry = _parse_ls_tree_entry(self._git_bytes(["ls-tree", "-z", "HEAD", "--", path]))
            if entry is None:
                return None
            object_type, object_id = entry
            if object_type == "commit":
                return _submodule_content(object_id)
            if object_type != "blob":
                return None
            return self._git_bytes(["cat-file", "blob", object_id])
        except GitError as e:
            raise ContentReadError(path, f"Failed to read {path} from HEAD: {e}") from e

    def staged_content(self, path: str) -> bytes:
        """Read path from the index.

        A submodule is read as its "Subproject commit <id>" line, matching
        committed_content.

        Raises:
            ContentReadError: If the index has no readable entry at path.
        """
        try:
            entry = _parse_ls_files_entry(
                self._git_bytes(["--literal-pathspecs", "ls-files", "-s", "-z", "--", path])
            )
            if entry is None:
                raise GitError(f"{path} is not in the index")
            mode, object_id = entry
            if mode == GITLINK_MODE:
                return _submodule_content(object_id)
            return self._git_bytes(["cat-file", "blob", object_id])
        except GitError as e:
            raise ContentReadError(path, f"Failed to read staged content of {path}: {e}") from e
