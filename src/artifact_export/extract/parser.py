"""Artifact tag parser.

Artifacts are embedded in assistant messages as:

    <antArtifact identifier="..." type="..." title="app.py" language="python">
    ...body...
    </antArtifact>

Matching is non-recursive: the first closing marker after an opening tag
ends the artifact, so a nested opening tag is treated as plain body text.
Unterminated tags produce nothing.
"""

from __future__ import annotations

import re
from typing import Final

from artifact_export.models import Artifact

OPEN_MARKER: Final[str] = "<antArtifact"
CLOSE_MARKER: Final[str] = "</antArtifact>"

DEFAULT_TITLE: Final[str] = "Untitled"
DEFAULT_LANGUAGE: Final[str] = "txt"

# Value runs to the next quote, or to the end of the opening tag
TITLE_PATTERN: Final[re.Pattern[str]] = re.compile(r'(?<![\w-])title="([^"]*)')
LANGUAGE_PATTERN: Final[re.Pattern[str]] = re.compile(r'(?<![\w-])language="([^"]*)')


def _attribute(opening_tag: str, pattern: re.Pattern[str], default: str) -> str:
    match = pattern.search(opening_tag)
    return match.group(1) if match else default


def extract(text: str) -> list[Artifact]:
    """Extract artifacts from text, in order of appearance.

    Pure function: the scan position is local to each call, so repeated
    calls on the same text return equal results.

    Args:
        text: Plain text of one message

    Returns:
        List of Artifact with stripped content
    """
    artifacts: list[Artifact] = []
    if not text:
        return artifacts

    cursor = 0
    while True:
        start = text.find(OPEN_MARKER, cursor)
        if start == -1:
            break

        tag_end = text.find(">", start + len(OPEN_MARKER))
        if tag_end == -1:
            break

        close = text.find(CLOSE_MARKER, tag_end + 1)
        if close == -1:
            break

        opening_tag = text[start : tag_end + 1]
        body = text[tag_end + 1 : close]

        artifacts.append(
            Artifact(
                title=_attribute(opening_tag, TITLE_PATTERN, DEFAULT_TITLE),
                language=_attribute(opening_tag, LANGUAGE_PATTERN, DEFAULT_LANGUAGE),
                content=body.strip(),
            )
        )
        cursor = close + len(CLOSE_MARKER)

    return artifacts
