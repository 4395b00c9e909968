"""Flatten the historical message body shapes into plain text."""

from typing import Any

from artifact_export.models import Message


def _block_text(block: Any) -> str:
    if isinstance(block, dict):
        text = block.get("text")
        if isinstance(text, str):
            return text
    return ""


def normalize(message: Message | dict) -> str:
    """Return the text of a message body.

    Handles, in order of precedence:
    - a list of content blocks (text fragments concatenated in order)
    - a plain string ``content``
    - the legacy direct ``text`` field

    Returns an empty string when the message carries no text. Never raises.
    """
    if isinstance(message, dict):
        message = Message.from_api(message)

    content = message.content
    if isinstance(content, list):
        return "".join(_block_text(block) for block in content)

    if isinstance(content, str) and content:
        return content

    if isinstance(message.text, str):
        return message.text

    return ""
