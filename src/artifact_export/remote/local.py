"""Conversation source backed by a local Claude data export.

Accepts the ``conversations.json`` file from a Claude data export, the
export ZIP itself, or a single conversation JSON object saved from the API.
"""

from __future__ import annotations

import zipfile
from pathlib import Path

import orjson

from artifact_export.errors import ConversationFetchError, IndexFetchError
from artifact_export.logging import get_logger
from artifact_export.models import ConversationFull, ConversationSummary

logger = get_logger("artifact_export.local")


def _conversation_list(data: dict | list) -> list[dict]:
    """Pull conversation objects out of the supported JSON layouts."""
    if isinstance(data, list):
        # users.json and projects.json entries carry no messages
        return [c for c in data if isinstance(c, dict) and "chat_messages" in c]

    if isinstance(data, dict):
        if "chat_messages" in data:
            return [data]
        for key in ["conversations", "chats"]:
            if isinstance(data.get(key), list):
                return [c for c in data[key] if isinstance(c, dict) and "chat_messages" in c]

    return []


class ExportFileSource:
    """Serves conversations from a local export file.

    Satisfies the same interface as ClaudeClient, so an offline export runs
    through the regular orchestrator.
    """

    def __init__(self, filepath: str | Path) -> None:
        self.filepath = Path(filepath)
        self._conversations: dict[str, dict] | None = None

    def _read(self) -> list[dict]:
        if self.filepath.suffix == ".zip":
            conversations: list[dict] = []
            with zipfile.ZipFile(self.filepath, "r") as zf:
                for name in zf.namelist():
                    if not name.endswith(".json"):
                        continue
                    try:
                        conversations.extend(_conversation_list(orjson.loads(zf.read(name))))
                    except orjson.JSONDecodeError as e:
                        logger.warning("export_member_skipped", member=name, error=str(e))
            return conversations

        return _conversation_list(orjson.loads(self.filepath.read_bytes()))

    def _load(self) -> dict[str, dict]:
        if self._conversations is None:
            try:
                raw = self._read()
            except (OSError, zipfile.BadZipFile, orjson.JSONDecodeError) as e:
                raise IndexFetchError(f"Failed to read {self.filepath}: {e}") from e

            self._conversations = {}
            for i, conv in enumerate(raw):
                conv_id = str(conv.get("uuid") or conv.get("id") or f"{self.filepath.stem}_{i}")
                self._conversations[conv_id] = conv
        return self._conversations

    async def fetch_index(self) -> list[ConversationSummary]:
        return [
            ConversationSummary.from_api({**conv, "uuid": conv_id})
            for conv_id, conv in self._load().items()
        ]

    async def fetch_full(self, conversation_id: str) -> ConversationFull:
        conv = self._load().get(conversation_id)
        if conv is None:
            raise ConversationFetchError(f"Conversation not found: {conversation_id}")
        conversation = ConversationFull.from_api(conv)
        if not conversation.id:
            conversation.id = conversation_id
        return conversation
