"""Scan command: archive artifacts from a local Claude data export."""

from pathlib import Path

import typer

from artifact_export.cli_commands.common import EchoProgressSink, report
from artifact_export.config import get_settings
from artifact_export.engine import ExportOrchestrator
from artifact_export.logging import setup_logging
from artifact_export.packaging import DirectoryDownloader
from artifact_export.remote import ExportFileSource


def scan_command(
    export_file: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="conversations.json, a Claude export ZIP, or a saved conversation",
    ),
    output_dir: Path = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory to save the archive in (default: from config)",
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
    """Extract artifacts from conversations already on disk.

    No network access and no pacing; produces the same archive layout as
    the export command.
    """
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    orchestrator = ExportOrchestrator(
        source=ExportFileSource(export_file),
        downloader=DirectoryDownloader((output_dir or settings.output_path).expanduser()),
        progress=EchoProgressSink(enabled=not (quiet or output_json)),
        pacing_interval=0.0,
    )
    report(orchestrator, output_json)
