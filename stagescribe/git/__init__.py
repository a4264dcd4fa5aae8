"""Git access for stagescribe.

This package provides read-only access to staged changes:
- exceptions: GitError, RepositoryStateError, ContentReadError, NoStagedChangesError
- runner: _run_git_command, _run_git_command_bytes, get_repo_root
- repository: RepositoryProvider, GitRepository, parse_porcelain_status
- status: list_staged_changes, filter_excluded
- content: resolve_snapshot
"""

from stagescribe.git.exceptions import (
    ContentReadError,
    GitError,
    NoStagedChangesError,
    RepositoryStateError,
)
from stagescribe.git.runner import (
    _run_git_command,
    _run_git_command_bytes,
    get_repo_root,
)
from stagescribe.git.repository import (
    GitRepository,
    RepositoryProvider,
    parse_porcelain_status,
)
from stagescribe.git.status import (
    filter_excluded,
    list_staged_changes,
)
from stagescribe.git.content import resolve_snapshot


__all__ = [
    # Exceptions
    "GitError",
    "RepositoryStateError",
    "ContentReadError",
    "NoStagedChangesError",
    # Runner
    "_run_git_command",
    "_run_git_command_bytes",
    "get_repo_root",
    # Repository
    "GitRepository",
    "RepositoryProvider",
    "parse_porcelain_status",
    # Enumeration
    "list_staged_changes",
    "filter_excluded",
    # Content
    "resolve_snapshot",
]
