"""Delivery of the finished archive."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Protocol, runtime_checkable

from artifact_export.errors import TransferError
from artifact_export.logging import get_logger

logger = get_logger("artifact_export.delivery")


def archive_filename(day: date) -> str:
    """Return the archive name for a given day: claude-artifacts-YYYY-MM-DD.zip."""
    return f"claude-artifacts-{day.isoformat()}.zip"


@runtime_checkable
class Downloader(Protocol):
    """Receives the finished archive bytes."""

    def deliver(self, data: bytes, filename: str) -> Path | str: ...


class DirectoryDownloader:
    """Saves archives into a local directory.

    Existing files are kept: a clashing name gets a numeric suffix
    (``name_1.zip``) unless ``overwrite`` is set.
    """

    def __init__(self, output_dir: Path, overwrite: bool = False) -> None:
        self.output_dir = Path(output_dir)
        self.overwrite = overwrite

    def _target(self, filename: str) -> Path:
        target = self.output_dir / filename
        if self.overwrite:
            return target

        counter = 1
        while target.exists():
            target = self.output_dir / f"{Path(filename).stem}_{counter}{Path(filename).suffix}"
            counter += 1
        return target

    def deliver(self, data: bytes, filename: str) -> Path:
        """Write the archive and return its path.

        Raises:
            TransferError: If the file cannot be written
        """
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            target = self._target(filename)
            target.write_bytes(data)
        except OSError as e:
            raise TransferError(f"Failed to save {filename}: {e}") from e

        logger.info("archive_saved", path=str(target), size=len(data))
        return target
