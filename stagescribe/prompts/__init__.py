"""Prompt templates and composition.

- templates: Built-in instruction templates (generic, localized)
- composer: PromptComposer, folds per-file diffs into a Prompt
"""

from stagescribe.prompts.templates import (
    BUILTIN_TEMPLATES,
    GENERIC_TEMPLATE,
    LOCALIZED_TEMPLATE,
)
from stagescribe.prompts.composer import (
    TRUNCATION_MARKER,
    PromptComposer,
    resolve_template,
)


__all__ = [
    "BUILTIN_TEMPLATES",
    "GENERIC_TEMPLATE",
    "LOCALIZED_TEMPLATE",
    "TRUNCATION_MARKER",
    "PromptComposer",
    "resolve_template",
]
