"""
Inline Formatter

Flattens a run of inline nodes into plain text plus the formatting ranges that
apply to it. Ranges are relative to the start of the run text and measured in
UTF-16 code units; callers add the absolute insertion index when they emit the
matching updateTextStyle requests.

Example:
    >>> paragraph = parse_blocks("**bold** and *italic*")[0]
    >>> text, ranges = format_inline(paragraph.children)
    >>> text
    'bold and italic'
    >>> [(r.start, r.end, r.kind) for r in ranges]
    [(0, 4, 'bold'), (9, 15, 'italic')]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any

from gdocs.blocks import (
    MARKUP_BOLD,
    MARKUP_CODE,
    MARKUP_ITALIC,
    MARKUP_LINK,
    MARKUP_STRIKETHROUGH,
    InlineNode,
    LineBreak,
    MarkupNode,
    SoftBreak,
    TextNode,
)
from gdocs.cursor import utf16_len
from gdocs.docs_helpers import create_format_text_request, create_text_style_request, rgb_color

logger = logging.getLogger(__name__)

# Inline code and code block styling
CODE_FONT_FAMILY = "Courier New"
CODE_BACKGROUND_COLOR = {"red": 0.95, "green": 0.95, "blue": 0.95}


@dataclass(frozen=True)
class FormatRange:
    """Half-open [start, end) span of a run carrying one kind of formatting."""

    start: int
    end: int
    kind: str
    url: str | None = None

    def shifted(self, delta: int) -> FormatRange:
        return replace(self, start=self.start + delta, end=self.end + delta)


def format_inline(nodes: list[InlineNode]) -> tuple[str, list[FormatRange]]:
    """
    Walk inline nodes depth-first and return (plain_text, ranges).

    - Text concatenates as-is, soft breaks become a space, hard breaks "\\n".
    - Each markup node pushes one range over exactly the text its subtree
      contributed; nested ranges are pushed before their parent.
    - Empty spans and links without a URL produce no range.
    - Images and checkbox markers contribute no text.
    """
    ranges: list[FormatRange] = []
    text, _ = _walk(nodes, ranges, 0)
    return text, ranges


def _walk(nodes: list[InlineNode], ranges: list[FormatRange], offset: int) -> tuple[str, int]:
    parts: list[str] = []
    length = 0

    for node in nodes:
        if isinstance(node, TextNode):
            parts.append(node.text)
            length += utf16_len(node.text)
        elif isinstance(node, SoftBreak):
            # Soft breaks join lines with a space rather than keeping the source newline
            parts.append(" ")
            length += 1
        elif isinstance(node, LineBreak):
            parts.append("\n")
            length += 1
        elif isinstance(node, MarkupNode):
            child_text, child_length = _walk(node.children, ranges, offset + length)
            if child_length > 0 and (node.kind != MARKUP_LINK or node.url):
                start = offset + length
                ranges.append(FormatRange(start, start + child_length, node.kind, node.url))
            parts.append(child_text)
            length += child_length

    return "".join(parts), length


# ---------------------------------------------------------------------------
# Run helpers
# ---------------------------------------------------------------------------


def slice_ranges(ranges: list[FormatRange], start: int, end: int) -> list[FormatRange]:
    """Clip ranges to [start, end) and rebase them so `start` becomes 0."""
    result: list[FormatRange] = []
    for fmt in ranges:
        clipped_start = max(fmt.start, start)
        clipped_end = min(fmt.end, end)
        if clipped_start < clipped_end:
            result.append(replace(fmt, start=clipped_start - start, end=clipped_end - start))
    return result


def split_run(text: str, ranges: list[FormatRange]) -> list[tuple[str, list[FormatRange]]]:
    """Split a run on newlines, giving each line its own rebased ranges."""
    pieces: list[tuple[str, list[FormatRange]]] = []
    offset = 0
    for line in text.split("\n"):
        line_length = utf16_len(line)
        pieces.append((line, slice_ranges(ranges, offset, offset + line_length)))
        offset += line_length + 1
    return pieces


def strip_run(text: str, ranges: list[FormatRange]) -> tuple[str, list[FormatRange]]:
    """Trim surrounding whitespace and shift/clamp the ranges to match."""
    stripped = text.strip()
    leading = utf16_len(text) - utf16_len(text.lstrip())
    return stripped, slice_ranges(ranges, leading, leading + utf16_len(stripped))


# ---------------------------------------------------------------------------
# Request emission
# ---------------------------------------------------------------------------


# Keyword styles for create_format_text_request, by range kind
RANGE_STYLE_KWARGS: dict[str, dict[str, Any]] = {
    MARKUP_BOLD: {"bold": True},
    MARKUP_ITALIC: {"italic": True},
    MARKUP_STRIKETHROUGH: {"strikethrough": True},
}


def create_range_style_request(fmt: FormatRange, base_index: int) -> dict[str, Any] | None:
    """Build the updateTextStyle request for one range of a run inserted at `base_index`."""
    if fmt.start >= fmt.end:
        return None
    start, end = base_index + fmt.start, base_index + fmt.end

    if fmt.kind == MARKUP_CODE:
        # Code background is a fixed light grey, not a #RRGGBB string
        return create_text_style_request(
            start,
            end,
            {
                "weightedFontFamily": {"fontFamily": CODE_FONT_FAMILY},
                "backgroundColor": rgb_color(CODE_BACKGROUND_COLOR),
            },
            "weightedFontFamily,backgroundColor",
        )
    if fmt.kind == MARKUP_LINK and fmt.url:
        return create_format_text_request(start, end, link_url=fmt.url)
    if fmt.kind in RANGE_STYLE_KWARGS:
        return create_format_text_request(start, end, **RANGE_STYLE_KWARGS[fmt.kind])

    logger.debug(f"No text style for range kind={fmt.kind}")
    return None


def style_requests_for_run(ranges: list[FormatRange], base_index: int) -> list[dict[str, Any]]:
    """updateTextStyle requests for every range of a run inserted at `base_index`."""
    requests: list[dict[str, Any]] = []
    for fmt in ranges:
        request = create_range_style_request(fmt, base_index)
        if request is not None:
            requests.append(request)
    return requests
