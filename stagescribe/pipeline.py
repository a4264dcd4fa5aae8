"""Commit message pipeline.

Sequences the stages of one run:
enumerate staged changes -> resolve content -> render diffs -> compose the
prompt -> generate the message. There is no retry; the first failure ends
the run with the originating error.
"""

import logging
import threading
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from stagescribe.config import DiffGranularity, EmptyStagePolicy, Settings
from stagescribe.credentials import CredentialProvider, EnvironmentCredentials, missing_key_message
from stagescribe.diff import render_file_diff
from stagescribe.git.content import resolve_snapshot
from stagescribe.git.exceptions import NoStagedChangesError
from stagescribe.git.repository import GitRepository, RepositoryProvider
from stagescribe.git.status import filter_excluded, list_staged_changes
from stagescribe.llm import get_generator
from stagescribe.llm.base import BaseMessageGenerator
from stagescribe.llm.exceptions import MissingAPIKeyError
from stagescribe.models import DiffBlock, FileChange, Prompt
from stagescribe.prompts.composer import PromptComposer

logger = logging.getLogger(__name__)

GeneratorFactory = Callable[[Settings, str], BaseMessageGenerator]
RepositoryFactory = Callable[[Optional[Path]], RepositoryProvider]


class CommitMessagePipeline:
    """Turn the staged changes of one repository into a commit message.

    Args:
        repository: Where staged changes are read from.
        generator: Produces the message from the prompt. Not needed to build a prompt.
        composer: Wraps the diffs in the instruction template.
        granularity: Line or word level diff rendering.
        on_empty: Skip (raise NoStagedChangesError) or still call the model when nothing is staged.
        exclude: Glob patterns of paths left out of the diff.
    """

    def __init__(
        self,
        repository: RepositoryProvider,
        generator: Optional[BaseMessageGenerator] = None,
        composer: Optional[PromptComposer] = None,
        granularity: Union[DiffGranularity, str] = DiffGranularity.LINE,
        on_empty: Union[EmptyStagePolicy, str] = EmptyStagePolicy.SKIP,
        exclude: Iterable[str] = (),
    ):
        self.repository = repository
        self.generator = generator
        self.composer = composer or PromptComposer()
        self.granularity = DiffGranularity(granularity)
        self.on_empty = EmptyStagePolicy(on_empty)
        self.exclude = list(exclude)

    @classmethod
    def from_settings(
        cls,
        repository: RepositoryProvider,
        settings: Settings,
        generator: Optional[BaseMessageGenerator] = None,
    ) -> "CommitMessagePipeline":
        return cls(
            repository=repository,
            generator=generator,
            composer=PromptComposer.from_settings(settings),
            granularity=settings.granularity,
            on_empty=settings.on_empty,
            exclude=settings.exclude,
        )

    def collect_changes(self) -> list[FileChange]:
        """Staged changes that will be described, excluded paths removed."""
        return filter_excluded(list_staged_changes(self.repository), self.exclude)

    def render_change(self, change: FileChange) -> DiffBlock:
        """Resolve and render one change."""
        snapshot = resolve_snapshot(self.repository, change)
        return render_file_diff(change, snapshot, self.granularity)

    def collect_blocks(self) -> list[DiffBlock]:
        """Render every staged change, in enumeration order."""
        return [self.render_change(change) for change in self.collect_changes()]

    def build_prompt(self) -> Prompt:
        """Enumerate, resolve and render the staged changes into a prompt."""
        return self.composer.compose(self.collect_blocks())

    def run(self, cancel_event: Optional[threading.Event] = None) -> str:
        """Generate the commit message for the staged changes.

        Returns:
            The trimmed message text.

        Raises:
            RepositoryStateError: If staged changes cannot be enumerated.
            ContentReadError: If a file's content cannot be read.
            NoStagedChangesError: If nothing is staged and the policy is skip.
            GenerationError: If the model call fails.
        """
        if self.generator is None:
            raise ValueError("A message generator is required to run the pipeline")

        prompt = self.build_prompt()

        if not prompt.diff_payload and self.on_empty == EmptyStagePolicy.SKIP:
            raise NoStagedChangesError(
                "No staged changes found. Stage your changes first with: git add <files>"
            )

        message = self.generator.generate(prompt, cancel_event=cancel_event)
        logger.info("Generated commit message with %s", message.model or "model")
        return message.text


def generate_commit_message(
    repo_path: Optional[Path],
    settings: Settings,
    credentials: Optional[CredentialProvider] = None,
    generator_factory: GeneratorFactory = get_generator,
    repository_factory: RepositoryFactory = GitRepository.open,
    cancel_event: Optional[threading.Event] = None,
) -> str:
    """Generate a commit message for the repository at repo_path.

    The API key is checked before anything else runs, so a missing key
    never touches the repository or the model.

    Args:
        repo_path: Directory inside the repository (None for the current directory).
        settings: Run settings.
        credentials: Returns the API key or None. Defaults to environment lookup.
        generator_factory: Builds the generator from settings and key.
        repository_factory: Opens the repository.
        cancel_event: Set it to abort the model call.

    Returns:
        The trimmed commit message.

    Raises:
        MissingAPIKeyError: If no API key is available.
        GitError, GenerationError: Propagated from the pipeline stages.
    """
    credentials = credentials or EnvironmentCredentials(settings.provider)
    api_key = credentials()
    if not api_key:
        raise MissingAPIKeyError(missing_key_message(settings.provider))

    generator = generator_factory(settings, api_key)
    repository = repository_factory(repo_path)
    pipeline = CommitMessagePipeline.from_settings(repository, settings, generator=generator)
    return pipeline.run(cancel_event=cancel_event)
