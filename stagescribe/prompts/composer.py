"""Fold rendered file diffs into the prompt sent to the model."""

import logging
from typing import Iterable, Optional

from stagescribe.config import DEFAULT_LANGUAGE, DEFAULT_MAX_DIFF_CHARS, Settings
from stagescribe.models import DIFF_PLACEHOLDER, DiffBlock, Prompt, StagingStatus
from stagescribe.prompts.templates import BUILTIN_TEMPLATES

logger = logging.getLogger(__name__)

LANGUAGE_PLACEHOLDER = "{language}"
TRUNCATION_MARKER = "\n...[truncated]\n"
NULL_PATH = "/dev/null"


def resolve_template(template: str) -> str:
    """Return the text of a built-in template, or template itself if it is custom.

    Raises:
        ValueError: If template is neither a built-in name nor contains {diff}.
    """
    if template in BUILTIN_TEMPLATES:
        return BUILTIN_TEMPLATES[template]
    if DIFF_PLACEHOLDER in template:
        return template
    raise ValueError(
        f"Unknown template: {template!r}. Use one of "
        f"{', '.join(sorted(BUILTIN_TEMPLATES))} or a custom text containing {DIFF_PLACEHOLDER}."
    )


class PromptComposer:
    """Build a Prompt from DiffBlocks.

    Args:
        template: Built-in template name or custom template text.
        language: Output language substituted for {language}.
        file_headers: Add "--- a/<path>" / "+++ b/<path>" lines before each file.
        max_diff_chars: Truncate the payload past this many characters.
    """

    def __init__(
        self,
        template: str = "generic",
        language: str = DEFAULT_LANGUAGE,
        file_headers: bool = True,
        max_diff_chars: Optional[int] = DEFAULT_MAX_DIFF_CHARS,
    ):
        self.instruction_text = resolve_template(template).replace(LANGUAGE_PLACEHOLDER, language)
        self.file_headers = file_headers
        self.max_diff_chars = max_diff_chars

    @classmethod
    def from_settings(cls, settings: Settings) -> "PromptComposer":
        return cls(
            template=settings.template,
            language=settings.language,
            file_headers=settings.file_headers,
            max_diff_chars=settings.max_diff_chars,
        )

    def _path_headers(self, block: DiffBlock) -> list[str]:
        old_path = block.original_path or block.path
        old_side = NULL_PATH if block.status == StagingStatus.ADDED else f"a/{old_path}"
        new_side = NULL_PATH if block.status == StagingStatus.DELETED else f"b/{block.path}"
        return [f"--- {old_side}", f"+++ {new_side}"]

    def format_block(self, block: DiffBlock) -> str:
        """Render one block with its headers."""
        lines = []
        if block.header:
            lines.append(block.header)
        if self.file_headers:
            lines.extend(self._path_headers(block))
        if block.rendered_text:
            lines.append(block.rendered_text)
        return "\n".join(lines)

    def compose_payload(self, blocks: Iterable[DiffBlock]) -> str:
        """Concatenate the blocks in order, separated by a blank line."""
        parts = [
            self.format_block(block) for block in blocks
            if block.status != StagingStatus.UNMODIFIED
        ]
        payload = "\n\n".join(parts)

        if self.max_diff_chars and len(payload) > self.max_diff_chars:
            logger.debug("Truncating diff payload from %d to %d chars", len(payload), self.max_diff_chars)
            payload = payload[: self.max_diff_chars] + TRUNCATION_MARKER

        return payload

    def compose(self, blocks: Iterable[DiffBlock]) -> Prompt:
        """Wrap the concatenated blocks in the instruction template."""
        prompt = Prompt(instruction_text=self.instruction_text, diff_payload=self.compose_payload(blocks))
        logger.debug("Composed prompt of %d chars", len(prompt.text))
        return prompt
