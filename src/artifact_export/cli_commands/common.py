"""Helpers shared by the export and scan commands."""

import asyncio
import json

import typer

from artifact_export.engine import ExportOrchestrator
from artifact_export.models import ExportResult, ProgressEvent


class EchoProgressSink:
    """Prints one line per conversation: [current/total] name."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled

    def notify(self, event: ProgressEvent) -> None:
        if self.enabled:
            typer.echo(f"[{event.current}/{event.total}] {event.conversation_name}")


def output(data: dict, as_json: bool, human_message: str) -> None:
    """Output data as JSON or human-readable format."""
    if as_json:
        typer.echo(json.dumps(data))
    else:
        typer.echo(human_message)


def describe(result: ExportResult) -> str:
    """Human-readable summary of an export result."""
    if not result.succeeded:
        return f"Export failed: {result.error_message}"

    message = (
        f"Exported {result.artifact_count} artifact(s) from "
        f"{result.conversations_with_artifacts} of {result.total_conversations} "
        f"conversation(s) to {result.filename}"
    )
    if result.failed_conversations:
        message += f"\n{len(result.failed_conversations)} conversation(s) could not be exported."
    return message


def finish(result: ExportResult, as_json: bool) -> None:
    """Print an export result and exit with its status."""
    output(result.to_dict(), as_json, describe(result))
    raise typer.Exit(0 if result.succeeded else 1)


def report(orchestrator: ExportOrchestrator, as_json: bool) -> None:
    """Run the orchestrator, then finish with its result."""
    finish(asyncio.run(orchestrator.run()), as_json)
