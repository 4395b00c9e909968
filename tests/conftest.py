"""Shared fixtures and in-memory fakes for the export pipeline tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from artifact_export.config import get_settings
from artifact_export.errors import ConversationFetchError
from artifact_export.models import ConversationFull, ConversationSummary, ProgressEvent


def artifact_tag(body: str, title: str | None = None, language: str | None = None) -> str:
    """Build an antArtifact block the way assistant messages embed them."""
    attrs = ['identifier="artifact"', 'type="application/vnd.ant.code"']
    if title is not None:
        attrs.append(f'title="{title}"')
    if language is not None:
        attrs.append(f'language="{language}"')
    return f"<antArtifact {' '.join(attrs)}>\n{body}\n</antArtifact>"


def conversation_payload(uuid: str, name: str | None, *assistant_texts: str) -> dict:
    """Build an API conversation object with one user/assistant exchange per text."""
    messages = []
    for text in assistant_texts:
        messages.append({"sender": "human", "content": [{"type": "text", "text": "please"}]})
        messages.append({"sender": "assistant", "content": [{"type": "text", "text": text}]})
    return {"uuid": uuid, "name": name, "chat_messages": messages}


class FakeSource:
    """In-memory conversation source.

    ``failures`` maps conversation ids to the exception fetch_full raises.
    """

    def __init__(
        self,
        payloads: list[dict],
        failures: dict[str, Exception] | None = None,
        index_error: Exception | None = None,
    ) -> None:
        self.payloads = {p["uuid"]: p for p in payloads}
        self.order = [p["uuid"] for p in payloads]
        self.failures = failures or {}
        self.index_error = index_error
        self.fetched: list[str] = []

    async def fetch_index(self) -> list[ConversationSummary]:
        if self.index_error is not None:
            raise self.index_error
        return [ConversationSummary.from_api(self.payloads[i]) for i in self.order]

    async def fetch_full(self, conversation_id: str) -> ConversationFull:
        self.fetched.append(conversation_id)
        if conversation_id in self.failures:
            raise self.failures[conversation_id]
        return ConversationFull.from_api(self.payloads[conversation_id])


class RecordingSink:
    """Progress sink that remembers every event."""

    def __init__(self) -> None:
        self.events: list[ProgressEvent] = []

    def notify(self, event: ProgressEvent) -> None:
        self.events.append(event)


class MemoryDownloader:
    """Downloader that keeps delivered archives in memory."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.delivered: list[tuple[bytes, str]] = []

    def deliver(self, data: bytes, filename: str) -> str:
        if self.error is not None:
            raise self.error
        self.delivered.append((data, filename))
        return filename


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def downloader() -> MemoryDownloader:
    return MemoryDownloader()


@pytest.fixture
def fetch_error() -> ConversationFetchError:
    return ConversationFetchError("Failed to fetch conversation: 500", status=500)


@pytest.fixture
def clean_settings(monkeypatch, tmp_path: Path):
    """Isolate settings from the developer's environment and .env file."""
    monkeypatch.chdir(tmp_path)
    for key in [
        "ARTIFACT_EXPORT_ORG_ID",
        "ARTIFACT_EXPORT_SESSION_KEY",
        "ARTIFACT_EXPORT_BASE_URL",
        "ARTIFACT_EXPORT_PACING_INTERVAL",
        "ARTIFACT_EXPORT_OUTPUT_DIR",
        "ARTIFACT_EXPORT_LOG_FORMAT",
    ]:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("ARTIFACT_EXPORT_LOG_LEVEL", "CRITICAL")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
