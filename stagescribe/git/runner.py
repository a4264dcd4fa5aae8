"""Git command runner and repository utilities.

Contains:
- _run_git_command: Run a git command and return its text output
- _run_git_command_bytes: Run a git command and return its raw output
- get_repo_root: Get the root directory of a git repository
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional

from stagescribe.git.exceptions import GitError

logger = logging.getLogger(__name__)


def _run_git_command_bytes(args: list[str], cwd: Optional[Path] = None) -> bytes:
    """Run a git command and return its stdout unmodified.

    Args:
        args: List of arguments to pass to git.
        cwd: Directory to run git in (defaults to the current directory).

    Returns:
        The raw stdout of the git command.

    Raises:
        GitError: If the command fails.
    """
    logger.debug("Running git %s", " ".join(args))
    try:
        result = subprocess.run(
            ["git"] + args,
            capture_output=True,
            cwd=cwd,
            check=True,
        )
        return result.stdout
    except subprocess.CalledProcessError as e:
        stderr = e.stderr.decode("utf-8", errors="replace") if isinstance(e.stderr, bytes) else (e.stderr or "")
        raise GitError(f"Git command failed: git {' '.join(args)}\n{stderr.strip()}")
    except FileNotFoundError:
        raise GitError("Git is not installed or not in PATH.")


def _run_git_command(args: list[str], cwd: Optional[Path] = None) -> str:
    """Run a git command and return its stripped text output.

    Raises:
        GitError: If the command fails.
    """
    output = _run_git_command_bytes(args, cwd=cwd)
    return output.decode("utf-8", errors="replace").strip()


def get_repo_root(path: Optional[Path] = None) -> Path:
    """Get the root directory of the git repository containing path.

    Args:
        path: Any directory inside the repository (defaults to the current directory).

    Returns:
        Path to the repository root.

    Raises:
        GitError: If path is not inside a git repository.
    """
    try:
        root = _run_git_command(["rev-parse", "--show-toplevel"], cwd=path)
        return Path(root)
    except GitError:
        location = path or Path.cwd()
        raise GitError(f"Not in a git repository: {location}")
