"""Main CLI command for generating commit messages."""

import logging
import threading
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from stagescribe import __version__
from stagescribe.config import (
    CallShape,
    DiffGranularity,
    EmptyStagePolicy,
    LLMProvider,
    load_settings,
)
from stagescribe.git.exceptions import GitError, NoStagedChangesError
from stagescribe.git.repository import GitRepository
from stagescribe.global_config import GlobalConfigError
from stagescribe.llm.exceptions import GenerationError, GenerationErrorKind, LLMError, MissingAPIKeyError
from stagescribe.pipeline import CommitMessagePipeline, generate_commit_message


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"stagescribe {__version__}")
        raise typer.Exit()


def main_command(
    ctx: typer.Context,
    repo: Optional[Path] = typer.Option(
        None,
        "--repo",
        "-C",
        help="Path inside the git repository (defaults to the current directory)",
    ),
    provider: Optional[LLMProvider] = typer.Option(
        None,
        "--provider",
        "-p",
        help="LLM provider (overrides config)",
    ),
    model: Optional[str] = typer.Option(
        None,
        "--model",
        "-m",
        help="Model name (overrides config)",
    ),
    shape: Optional[CallShape] = typer.Option(
        None,
        "--shape",
        help="Call shape: single-prompt completion or chat",
    ),
    max_tokens: Optional[int] = typer.Option(
        None,
        "--max-tokens",
        help="Maximum output tokens",
    ),
    temperature: Optional[float] = typer.Option(
        None,
        "--temperature",
        help="Sampling temperature",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for the model",
    ),
    template: Optional[str] = typer.Option(
        None,
        "--template",
        help="Prompt template: generic, localized, or custom text containing {diff}",
    ),
    language: Optional[str] = typer.Option(
        None,
        "--language",
        help="Output language used by the localized template",
    ),
    file_headers: Optional[bool] = typer.Option(
        None,
        "--file-headers/--no-file-headers",
        help="Prefix each file diff with --- a/ and +++ b/ lines",
    ),
    granularity: Optional[DiffGranularity] = typer.Option(
        None,
        "--granularity",
        help="Render the diff per line or inline per word",
    ),
    on_empty: Optional[EmptyStagePolicy] = typer.Option(
        None,
        "--on-empty",
        help="When nothing is staged: skip, or generate from an empty diff",
    ),
    max_diff_chars: Optional[int] = typer.Option(
        None,
        "--max-diff-chars",
        help="Maximum characters for the staged diff",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Print the prompt that would be sent instead of calling the model",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Generate a commit message for the staged changes of a git repository."""
    # If a subcommand is invoked, don't run the default behavior
    if ctx.invoked_subcommand is not None:
        return

    _configure_logging(verbose)

    try:
        settings = load_settings(
            provider=provider,
            model=model,
            shape=shape,
            max_tokens=max_tokens,
            temperature=temperature,
            timeout=timeout,
            template=template,
            language=language,
            file_headers=file_headers,
            granularity=granularity,
            on_empty=on_empty,
            max_diff_chars=max_diff_chars,
        )

        if dry_run:
            pipeline = CommitMessagePipeline.from_settings(GitRepository.open(repo), settings)
            typer.echo(pipeline.build_prompt().text)
            return

        typer.echo("Generating commit message...", err=True)
        message = generate_commit_message(repo, settings, cancel_event=threading.Event())
        typer.echo(message)

    except NoStagedChangesError:
        typer.echo("nothing to describe (no changes staged for commit)", err=True)
        typer.echo("", err=True)
        typer.echo("Stage your changes first with:", err=True)
        typer.echo("  git add <file>...", err=True)
        raise typer.Exit(1)
    except MissingAPIKeyError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    except GitError as e:
        typer.echo(f"Git error: {e}", err=True)
        raise typer.Exit(1)
    except GenerationError as e:
        if e.kind == GenerationErrorKind.CANCELLED:
            typer.echo("Cancelled.", err=True)
            raise typer.Exit(130)
        typer.echo(f"LLM error ({e.kind.value}): {e}", err=True)
        raise typer.Exit(1)
    except LLMError as e:
        typer.echo(f"LLM error: {e}", err=True)
        raise typer.Exit(1)
    except (GlobalConfigError, ValidationError, ValueError) as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(1)
