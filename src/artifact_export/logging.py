"""Structured logging for artifact export.

Uses structlog for contextual JSON logging with per-job tracking and
typed audit events for the export lifecycle.

Usage:
    from artifact_export.logging import setup_logging, get_logger

    setup_logging("INFO")
    log = get_logger("artifact_export.engine")
    log.info("export_started", org_id="org-123")
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar

import structlog
from structlog.types import EventDict, Processor

# Context variable for the active export job
_job_id_var: ContextVar[str | None] = ContextVar("job_id", default=None)


def get_job_id() -> str | None:
    """Get the current job ID from context."""
    return _job_id_var.get()


def set_job_id(job_id: str | None) -> None:
    """Set the job ID in context."""
    _job_id_var.set(job_id)


def _add_job_id(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add job ID to log event if available."""
    job_id = get_job_id()
    if job_id:
        event_dict["job_id"] = job_id
    return event_dict


def _add_log_level(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add log level to event dict."""
    event_dict["level"] = method_name.upper()
    return event_dict


def _add_timestamp(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add ISO 8601 timestamp to event dict."""
    from datetime import datetime, timezone

    event_dict["timestamp"] = datetime.now(tz=timezone.utc).isoformat()
    return event_dict


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Configure structlog with JSON or console rendering.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        fmt: Renderer, "json" or "console"
    """
    shared_processors: list[Processor] = [
        structlog.stdlib.add_logger_name,
        _add_timestamp,
        _add_log_level,
        _add_job_id,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if fmt == "console":
        renderer: Processor = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = structlog.processors.JSONRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    # stderr keeps stdout free for --json results
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level.upper())

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a bound logger with optional name.

    Args:
        name: Optional logger name (e.g., 'artifact_export.remote')

    Returns:
        Bound structlog logger instance
    """
    if name:
        return structlog.get_logger(name)
    return structlog.get_logger()


# --- Audit Event Functions ---
# Typed interfaces for export lifecycle events


def log_export_started(
    logger: structlog.stdlib.BoundLogger,
    org_id: str,
    total_conversations: int,
) -> None:
    """Log the start of conversation iteration.

    Args:
        logger: Logger instance
        org_id: Organization being exported
        total_conversations: Number of entries in the index
    """
    logger.info(
        "export_started",
        org_id=org_id,
        total_conversations=total_conversations,
    )


def log_conversation_processed(
    logger: structlog.stdlib.BoundLogger,
    conversation_id: str,
    artifact_count: int,
) -> None:
    """Log a conversation that was fetched and scanned.

    Args:
        logger: Logger instance
        conversation_id: Conversation identifier
        artifact_count: Artifacts written for this conversation
    """
    logger.info(
        "conversation_processed",
        conversation_id=conversation_id,
        artifact_count=artifact_count,
    )


def log_conversation_failed(
    logger: structlog.stdlib.BoundLogger,
    conversation_id: str,
    error_type: str,
    message: str,
    status: int | None = None,
) -> None:
    """Log a conversation that could not be exported.

    Args:
        logger: Logger instance
        conversation_id: Conversation identifier
        error_type: Exception class name
        message: Error message (no credentials)
        status: HTTP status code when the failure came from the API
    """
    logger.warning(
        "conversation_failed",
        conversation_id=conversation_id,
        error_type=error_type,
        message=message,
        status=status,
    )


def log_export_finished(
    logger: structlog.stdlib.BoundLogger,
    succeeded: bool,
    artifact_count: int,
    conversations_with_artifacts: int,
    total_conversations: int,
    error: str | None = None,
) -> None:
    """Log the terminal outcome of an export job.

    Args:
        logger: Logger instance
        succeeded: Whether an archive was delivered
        artifact_count: Total artifacts written
        conversations_with_artifacts: Conversations yielding at least one artifact
        total_conversations: Entries in the index
        error: Failure message, if any
    """
    log_method = logger.info if succeeded else logger.error
    log_method(
        "export_finished",
        succeeded=succeeded,
        artifact_count=artifact_count,
        conversations_with_artifacts=conversations_with_artifacts,
        total_conversations=total_conversations,
        error=error,
    )
