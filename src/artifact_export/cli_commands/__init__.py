"""CLI command modules for Artifact Export."""

from artifact_export.cli_commands.export import export_command
from artifact_export.cli_commands.scan import scan_command

__all__ = ["export_command", "scan_command"]
