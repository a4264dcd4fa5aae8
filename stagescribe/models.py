"""Data carried through one commit message generation run.

Contains:
- StagingStatus: Index state of a path relative to the last commit
- FileChange: A staged path and its status
- FileSnapshot: Committed and staged content of one path
- DiffBlock: Rendered diff of one path
- Prompt: Instruction template plus the concatenated diff payload
- GeneratedMessage: Text returned by a message generator
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


DIFF_PLACEHOLDER = "{diff}"


class StagingStatus(Enum):
    """Staging-area state of a path."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    UNMODIFIED = "unmodified"


@dataclass(frozen=True)
class FileChange:
    """A path whose staged state differs from the last commit.

    Attributes:
        path: Path relative to the repository root.
        status: The staging status of the path.
        original_path: Source path for renames and copies, None otherwise.
    """

    path: str
    status: StagingStatus
    original_path: Optional[str] = None

    @property
    def old_path(self) -> str:
        """Path of the file as it appears in the last commit."""
        return self.original_path or self.path


@dataclass(frozen=True)
class FileSnapshot:
    """Old and new content of one path.

    Attributes:
        path: Path relative to the repository root.
        committed_content: Content in the last commit, None if the file did not exist.
        staged_content: Content in the index, None if the file was deleted.
    """

    path: str
    committed_content: Optional[str]
    staged_content: Optional[str]


@dataclass(frozen=True)
class DiffBlock:
    """Rendered diff for one file."""

    path: str
    rendered_text: str
    header: str = ""
    status: StagingStatus = StagingStatus.MODIFIED
    original_path: Optional[str] = None


@dataclass(frozen=True)
class Prompt:
    """Instruction template wrapped around a diff payload.

    The instruction text keeps a single ``{diff}`` placeholder; everything
    else in it is fixed when the prompt is composed.
    """

    instruction_text: str
    diff_payload: str

    @property
    def text(self) -> str:
        """The prompt as sent to the model."""
        return self.instruction_text.replace(DIFF_PLACEHOLDER, self.diff_payload)


@dataclass(frozen=True)
class GeneratedMessage:
    """Commit message text returned by a generator, always trimmed."""

    text: str
    model: str = ""
    input_tokens: int = 0
    output_tokens: int = 0

    def __post_init__(self):
        object.__setattr__(self, "text", self.text.strip())
