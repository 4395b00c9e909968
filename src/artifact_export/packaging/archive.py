"""In-memory ZIP archive for exported artifacts."""

from __future__ import annotations

import io
import zipfile
from typing import Protocol, runtime_checkable

from artifact_export.errors import ArchiveFinalizationError


@runtime_checkable
class Archive(Protocol):
    """Destination for archive entries."""

    def put(self, path: str, data: bytes) -> None: ...

    def discard(self, path: str) -> None: ...

    def finalize(self) -> bytes: ...

    def __len__(self) -> int: ...


class ZipArchive:
    """Collects entries in memory and serializes them as a ZIP file.

    Entries keep insertion order. Paths are expected to be unique; the
    path allocator guarantees this for one export job.
    """

    def __init__(self, compression: int = zipfile.ZIP_DEFLATED) -> None:
        self.compression = compression
        self._entries: dict[str, bytes] = {}

    def put(self, path: str, data: bytes | str) -> None:
        """Add an entry. Text is stored as UTF-8."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        if path in self._entries:
            raise ValueError(f"Duplicate archive entry: {path}")
        self._entries[path] = data

    def discard(self, path: str) -> None:
        """Remove an entry if present."""
        self._entries.pop(path, None)

    def finalize(self) -> bytes:
        """Serialize all entries into ZIP bytes.

        Raises:
            ArchiveFinalizationError: If the ZIP file cannot be written
        """
        buffer = io.BytesIO()
        try:
            with zipfile.ZipFile(buffer, "w", compression=self.compression) as zf:
                for path, data in self._entries.items():
                    zf.writestr(path, data)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, ValueError) as e:
            raise ArchiveFinalizationError(f"Failed to build ZIP archive: {e}") from e
        return buffer.getvalue()

    @property
    def paths(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
