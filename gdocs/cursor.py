"""
Insertion cursor rules.

The Docs API addresses content by UTF-16 code unit offsets, so every length
that feeds an index is measured with `utf16_len`. After a block has been
converted, the next insertion index is the location of the block's last
insertText plus the length of its text; style, bullet and table requests never
move the cursor.
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)


def utf16_len(text: str) -> int:
    """Length of `text` in UTF-16 code units (characters outside the BMP count as 2)."""
    return len(text.encode("utf-16-le")) // 2


def last_insert_text(requests: list[dict[str, Any]]) -> dict[str, Any] | None:
    """Return the body of the last insertText request, or None if there is none."""
    for request in reversed(requests):
        if "insertText" in request:
            return request["insertText"]
    return None


def next_index(requests: list[dict[str, Any]], current_index: int) -> int:
    """
    Compute the insertion index that follows a block's requests.

    Args:
        requests: Requests emitted for one block, in order.
        current_index: Index the block was converted at.

    Returns:
        Location of the last insertText plus its text length, or
        `current_index` when the block inserted no text.
    """
    insert = last_insert_text(requests)
    if insert is None:
        return current_index
    return insert["location"]["index"] + utf16_len(insert["text"])


def insert_text_spans(requests: list[dict[str, Any]]) -> list[tuple[int, str]]:
    """(index, text) for every insertText request, in request order."""
    return [
        (request["insertText"]["location"]["index"], request["insertText"]["text"])
        for request in requests
        if "insertText" in request
    ]
