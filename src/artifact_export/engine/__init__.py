"""Engine module for export orchestration."""

from artifact_export.engine.orchestrator import ExportOrchestrator, ExportState, ProgressSink
from artifact_export.engine.processor import ConversationProcessor

__all__ = ["ConversationProcessor", "ExportOrchestrator", "ExportState", "ProgressSink"]
