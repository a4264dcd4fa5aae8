"""Git-related exception classes.

Contains all exception classes for repository access:
- GitError: Base exception for git-related errors
- RepositoryStateError: Staged changes cannot be enumerated
- ContentReadError: Old or new content of a path cannot be read
- NoStagedChangesError: Raised when there is nothing staged and the run is skipped
"""

from typing import Optional


class GitError(Exception):
    """Custom exception for git-related errors."""

    pass


class RepositoryStateError(GitError):
    """Raised when the staging status of the repository cannot be computed."""

    pass


class ContentReadError(GitError):
    """Raised when the committed or staged content of a path cannot be read."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        super().__init__(message or f"Failed to read content of {path}")


class NoStagedChangesError(GitError):
    """Raised when there are no staged changes."""

    pass
