"""Artifact Export CLI - Command-line interface for exporting artifacts."""

import typer

from artifact_export import __version__
from artifact_export.cli_commands.export import export_command
from artifact_export.cli_commands.scan import scan_command

app = typer.Typer(
    name="artifact-export",
    help="Artifact Export - Bulk-export artifacts from Claude conversations into a ZIP archive.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"artifact-export {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Artifact Export - Bulk-export artifacts from Claude conversations."""
    pass


app.command(name="export")(export_command)
app.command(name="scan")(scan_command)


if __name__ == "__main__":
    app()
