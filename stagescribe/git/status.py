"""Staged change enumeration.

Contains:
- list_staged_changes: Paths whose staged state differs from the last commit
- filter_excluded: Drop changes matching ignore patterns
- _should_exclude_file: Check if a file should be excluded based on patterns
"""

import fnmatch
import logging
from pathlib import PurePosixPath
from typing import Iterable

from stagescribe.git.repository import RepositoryProvider
from stagescribe.models import FileChange, StagingStatus

logger = logging.getLogger(__name__)


def list_staged_changes(repository: RepositoryProvider) -> list[FileChange]:
    """List every staged path with its status, in provider order.

    Unmodified entries are dropped even if the provider reports them.

    Args:
        repository: The repository to inspect.

    Returns:
        The staged file changes.

    Raises:
        RepositoryStateError: If the staging status cannot be computed.
    """
    changes = [
        change for change in repository.staging_status()
        if change.status != StagingStatus.UNMODIFIED
    ]
    logger.debug("Found %d staged change(s)", len(changes))
    return changes


def _should_exclude_file(filename: str, patterns: Iterable[str]) -> bool:
    """Check if a file should be excluded based on patterns.

    Supports glob patterns like *.lock, build/*, etc. A pattern matches the
    full path or just the basename.
    """
    basename = PurePosixPath(filename).name
    for pattern in patterns:
        if filename == pattern:
            return True
        if fnmatch.fnmatch(filename, pattern):
            return True
        if fnmatch.fnmatch(basename, pattern):
            return True
    return False


def filter_excluded(changes: list[FileChange], patterns: Iterable[str]) -> list[FileChange]:
    """Drop changes whose path matches any of the patterns."""
    patterns = list(patterns)
    if not patterns:
        return list(changes)

    kept = []
    for change in changes:
        if _should_exclude_file(change.path, patterns):
            logger.debug("Excluding %s from the diff", change.path)
            continue
        kept.append(change)
    return kept
