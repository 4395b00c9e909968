"""Archive path allocation for extracted artifacts.

Every artifact lands at ``<namespace>/[<subdir>/]<stem><ext>``, where the
namespace is the sanitized conversation name. Collisions within one export
job are resolved with a numeric suffix before the extension:
``app.py``, ``app_1.py``, ``app_2.py``, ...
"""

from __future__ import annotations

import re
from typing import Final

from artifact_export.models import ArchivePathRegistry

DEFAULT_NAME: Final[str] = "Untitled"
DEFAULT_EXTENSION: Final[str] = ".txt"

LANGUAGE_EXTENSIONS: Final[dict[str, str]] = {
    "javascript": ".js",
    "html": ".html",
    "css": ".css",
    "python": ".py",
    "java": ".java",
    "c": ".c",
    "cpp": ".cpp",
    "ruby": ".rb",
    "php": ".php",
    "swift": ".swift",
    "go": ".go",
    "rust": ".rs",
    "typescript": ".ts",
    "shell": ".sh",
    "sql": ".sql",
    "kotlin": ".kt",
    "scala": ".scala",
    "r": ".r",
    "matlab": ".m",
    "json": ".json",
    "xml": ".xml",
    "yaml": ".yaml",
    "markdown": ".md",
    "text": ".txt",
}

# Titles may carry "/" to describe nested files; namespaces may not
UNSAFE_TITLE_CHARS: Final[re.Pattern[str]] = re.compile(r"[^A-Za-z0-9_.\-/]+")
UNSAFE_NAMESPACE_CHARS: Final[re.Pattern[str]] = re.compile(r"[^A-Za-z0-9_.\-]+")

# Segments that would escape or collapse the namespace directory
_SKIPPED_SEGMENTS: Final[frozenset[str]] = frozenset({"", ".", ".."})


def file_extension(language: str | None) -> str:
    """Map a language name (case-insensitive) to a file extension."""
    if not language:
        return DEFAULT_EXTENSION
    return LANGUAGE_EXTENSIONS.get(language.lower(), DEFAULT_EXTENSION)


def sanitize_title(title: str) -> str:
    """Replace every run of characters outside [A-Za-z0-9_.-/] with "_"."""
    return UNSAFE_TITLE_CHARS.sub("_", title)


def sanitize_namespace(display_name: str | None) -> str:
    """Turn a conversation name into a single archive directory name."""
    if not display_name:
        return DEFAULT_NAME
    namespace = UNSAFE_NAMESPACE_CHARS.sub("_", display_name)
    if namespace in _SKIPPED_SEGMENTS:
        return DEFAULT_NAME
    return namespace


def base_path(title: str, namespace: str) -> str:
    """Build the extension-less archive path for a title.

    Args:
        title: Raw artifact title, possibly path-like ("src/app.js")
        namespace: Already sanitized namespace directory

    Returns:
        "namespace/[subdir/]stem"
    """
    segments = sanitize_title(title).split("/")
    stem = segments.pop()
    if stem in _SKIPPED_SEGMENTS:
        stem = DEFAULT_NAME

    subdirs = [s for s in segments if s not in _SKIPPED_SEGMENTS]
    return "/".join([namespace, *subdirs, stem])


def allocate(
    title: str,
    language: str,
    namespace: str,
    registry: ArchivePathRegistry,
) -> str:
    """Allocate a unique archive path and record it in the registry.

    Deterministic for a given registry state. A returned path is never
    handed out again by the same registry.

    Args:
        title: Artifact title
        language: Artifact language, used for the extension
        namespace: Sanitized conversation namespace
        registry: Paths already allocated in this export job

    Returns:
        The allocated path
    """
    base = base_path(title, namespace)
    extension = file_extension(language)

    path = f"{base}{extension}"
    counter = 1
    while path in registry:
        path = f"{base}_{counter}{extension}"
        counter += 1

    registry.add(path)
    return path
