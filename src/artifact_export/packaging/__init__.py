"""Packaging of artifacts into an archive and its delivery."""

from artifact_export.packaging.archive import Archive, ZipArchive
from artifact_export.packaging.delivery import DirectoryDownloader, Downloader, archive_filename
from artifact_export.packaging.paths import (
    allocate,
    base_path,
    file_extension,
    sanitize_namespace,
    sanitize_title,
)

__all__ = [
    "Archive",
    "DirectoryDownloader",
    "Downloader",
    "ZipArchive",
    "allocate",
    "archive_filename",
    "base_path",
    "file_extension",
    "sanitize_namespace",
    "sanitize_title",
]
