"""Export command: fetch conversations from the API and archive their artifacts."""

import asyncio
from pathlib import Path

import typer

from artifact_export.cli_commands.common import EchoProgressSink, finish, output
from artifact_export.config import get_settings
from artifact_export.engine import ExportOrchestrator
from artifact_export.logging import setup_logging
from artifact_export.models import ExportResult
from artifact_export.packaging import DirectoryDownloader
from artifact_export.remote import ClaudeClient


async def _run_export(
    org_id: str,
    session_key: str | None,
    base_url: str,
    timeout: float,
    output_dir: Path,
    pacing: float,
    progress: EchoProgressSink,
) -> ExportResult:
    async with ClaudeClient(
        org_id,
        base_url=base_url,
        session_key=session_key,
        timeout=timeout,
    ) as client:
        orchestrator = ExportOrchestrator(
            source=client,
            downloader=DirectoryDownloader(output_dir),
            progress=progress,
            pacing_interval=pacing,
            org_id=org_id,
        )
        return await orchestrator.run()


def export_command(
    org_id: str = typer.Option(
        None,
        "--org-id",
        help="Organization ID (default: ARTIFACT_EXPORT_ORG_ID)",
    ),
    session_key: str = typer.Option(
        None,
        "--session-key",
        help="sessionKey cookie value (default: ARTIFACT_EXPORT_SESSION_KEY)",
    ),
    output_dir: Path = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory to save the archive in (default: from config)",
    ),
    pacing: float = typer.Option(
        None,
        "--pacing",
        min=0.0,
        help="Seconds to wait between conversations (default: from config)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Do not print per-conversation progress",
    ),
    output_json: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output in JSON format",
    ),
) -> None:
    """Export every artifact in the organization's conversations.

    Fetches conversations one at a time, extracts artifacts from assistant
    messages and saves them as claude-artifacts-<date>.zip.
    """
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    org = org_id or settings.org_id
    if not org:
        output(
            {"success": False, "error": "Missing organization ID"},
            output_json,
            "Missing organization ID. Pass --org-id or set ARTIFACT_EXPORT_ORG_ID.",
        )
        raise typer.Exit(1)

    result = asyncio.run(
        _run_export(
            org_id=org,
            session_key=session_key or settings.session_cookie,
            base_url=settings.base_url,
            timeout=settings.request_timeout,
            output_dir=(output_dir or settings.output_path).expanduser(),
            pacing=settings.pacing_interval if pacing is None else pacing,
            progress=EchoProgressSink(enabled=not (quiet or output_json)),
        )
    )

    finish(result, output_json)
