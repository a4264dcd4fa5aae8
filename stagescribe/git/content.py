"""Old and new content lookup for a staged change."""

import logging
from typing import Optional

from stagescribe.git.repository import RepositoryProvider
from stagescribe.models import FileChange, FileSnapshot, StagingStatus

logger = logging.getLogger(__name__)


def _decode(content: Optional[bytes]) -> Optional[str]:
    if content is None:
        return None
    return content.decode("utf-8", errors="replace")


def resolve_snapshot(repository: RepositoryProvider, change: FileChange) -> FileSnapshot:
    """Fetch the committed and staged content of a changed path.

    The committed side is looked up under the original path for renames and
    copies. A path missing from the last commit is not an error; the
    snapshot simply has no committed content. Deleted files have no staged
    content.

    Args:
        repository: The repository to read from.
        change: The staged change to resolve.

    Returns:
        The FileSnapshot for the change.

    Raises:
        ContentReadError: If either side exists but cannot be read.
    """
    committed = repository.committed_content(change.old_path)

    staged = None
    if change.status != StagingStatus.DELETED:
        staged = repository.staged_content(change.path)

    logger.debug(
        "Resolved %s (committed: %s, staged: %s)",
        change.path,
        "absent" if committed is None else f"{len(committed)} bytes",
        "absent" if staged is None else f"{len(staged)} bytes",
    )
    return FileSnapshot(
        path=change.path,
        committed_content=_decode(committed),
        staged_content=_decode(staged),
    )
