"""Conversation sources: the remote API and local export files."""

from artifact_export.remote.client import CONVERSATION_PARAMS, ClaudeClient, RemoteSource
from artifact_export.remote.local import ExportFileSource

__all__ = ["CONVERSATION_PARAMS", "ClaudeClient", "ExportFileSource", "RemoteSource"]
