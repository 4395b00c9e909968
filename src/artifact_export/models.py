"""Core types for the artifact export pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


def _display_name(data: dict) -> str | None:
    """Conversation name as text; exports occasionally carry numbers here."""
    name = data.get("name")
    return str(name) if name else None


class Sender(Enum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"

    @classmethod
    def from_api(cls, value: Any) -> Sender | None:
        """Map an API sender string to a Sender ("human" is the user)."""
        if value in ("human", "user"):
            return cls.USER
        if value == "assistant":
            return cls.ASSISTANT
        return None


@dataclass(frozen=True)
class ConversationSummary:
    """One entry of the conversation index."""

    id: str
    display_name: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> ConversationSummary:
        return cls(
            id=str(data.get("uuid") or data.get("id") or ""),
            display_name=_display_name(data),
        )

    @property
    def label(self) -> str:
        """Name shown in progress events."""
        return self.display_name or "Untitled"


@dataclass
class Message:
    """A single chat message.

    The body arrives in one of three historical shapes: a plain string in
    ``content``, a list of content blocks in ``content``, or a legacy
    direct ``text`` field.
    """

    sender: Sender | None
    content: Any = None
    text: Any = None

    @classmethod
    def from_api(cls, data: dict) -> Message:
        return cls(
            sender=Sender.from_api(data.get("sender")),
            content=data.get("content"),
            text=data.get("text"),
        )


@dataclass
class ConversationFull:
    """A conversation with its messages.

    ``messages`` is None when the payload carried no message list.
    """

    id: str
    display_name: str | None = None
    messages: list[Message] | None = None

    @classmethod
    def from_api(cls, data: dict) -> ConversationFull:
        raw_messages = data.get("chat_messages")
        messages = None
        if isinstance(raw_messages, list):
            messages = [Message.from_api(m) for m in raw_messages if isinstance(m, dict)]

        return cls(
            id=str(data.get("uuid") or data.get("id") or ""),
            display_name=_display_name(data),
            messages=messages,
        )


@dataclass(frozen=True)
class Artifact:
    """A titled, typed content block extracted from an assistant message."""

    title: str
    language: str
    content: str


class ArchivePathRegistry:
    """Set of archive paths already handed out during one export job.

    Grows monotonically; paths are never removed.
    """

    def __init__(self) -> None:
        self._paths: set[str] = set()

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self):
        return iter(sorted(self._paths))

    def add(self, path: str) -> None:
        self._paths.add(path)


@dataclass(frozen=True)
class ProgressEvent:
    """Progress notification emitted before each conversation fetch."""

    current: int
    total: int
    conversation_name: str


@dataclass
class ConversationOutcome:
    """Result of exporting a single conversation."""

    summary: ConversationSummary
    artifact_count: int = 0
    error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class ExportResult:
    """Terminal outcome of an export job."""

    succeeded: bool
    artifact_count: int = 0
    conversations_with_artifacts: int = 0
    total_conversations: int = 0
    error_message: str | None = None
    filename: str | None = None
    failed_conversations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"success": self.succeeded}
        if self.succeeded:
            data.update(
                {
                    "artifact_count": self.artifact_count,
                    "conversation_count": self.conversations_with_artifacts,
                    "total_conversations": self.total_conversations,
                    "filename": self.filename,
                    "failed_conversations": self.failed_conversations,
                }
            )
        else:
            data["error"] = self.error_message
        return data
