"""Shared test fixtures and configuration."""

import tempfile
from pathlib import Path
from typing import Optional

import pytest

from stagescribe.git.exceptions import ContentReadError
from stagescribe.llm.base import BaseMessageGenerator
from stagescribe.models import FileChange, GeneratedMessage, StagingStatus


class FakeRepository:
    """In-memory repository provider.

    Args:
        committed: Content of each path in the last commit.
        staged: Content of each path in the index.
        status: Staging status reported for each path, in order.
    """

    def __init__(
        self,
        committed: Optional[dict] = None,
        staged: Optional[dict] = None,
        status: Optional[list] = None,
    ):
        self.root = Path("/fake/repo")
        self.committed = {k: v.encode() for k, v in (committed or {}).items()}
        self.staged = {k: v.encode() for k, v in (staged or {}).items()}
        self.status = status or []
        self.reads = []

    def staging_status(self) -> list[FileChange]:
        return list(self.status)

    def committed_content(self, path: str) -> Optional[bytes]:
        self.reads.append(("HEAD", path))
        return self.committed.get(path)

    def staged_content(self, path: str) -> bytes:
        self.reads.append(("index", path))
        if path not in self.staged:
            raise ContentReadError(path)
        return self.staged[path]


class StubGenerator(BaseMessageGenerator):
    """Generator that returns a canned reply and records its prompts."""

    provider = None
    shape = None
    display_name = "Stub"

    def __init__(self, reply: str = "Update files"):
        self.reply = reply
        self.model = "stub-model"
        self.prompts = []

    def _create_client(self):
        return None

    def _send(self, client, prompt_text):
        return prompt_text

    def _extract_candidates(self, response):
        return [self.reply]

    def generate(self, prompt, cancel_event=None):
        self.prompts.append(prompt)
        return GeneratedMessage(text=self.reply, model=self.model)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config_dir(temp_dir, mocker):
    """Point the global configuration at a temporary directory."""
    mock_dir = temp_dir / ".stagescribe"
    mocker.patch("stagescribe.global_config._CONFIG_DIR", mock_dir)
    return mock_dir


@pytest.fixture
def added_file_repo():
    """Repository with one staged new file hello.txt."""
    return FakeRepository(
        staged={"hello.txt": "hi\n"},
        status=[FileChange("hello.txt", StagingStatus.ADDED)],
    )


@pytest.fixture
def modified_file_repo():
    """Repository with one staged modification of notes.txt."""
    return FakeRepository(
        committed={"notes.txt": "a\nb\n"},
        staged={"notes.txt": "a\nc\n"},
        status=[FileChange("notes.txt", StagingStatus.MODIFIED)],
    )


@pytest.fixture
def empty_repo():
    """Repository with nothing staged."""
    return FakeRepository()


@pytest.fixture
def stub_generator():
    return StubGenerator(reply="  add hello.txt  ")
