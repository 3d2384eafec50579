"""
Block Converters

One function per simple block kind. Each takes a parsed block and the current
insertion index and returns the batchUpdate requests for that block; the
caller derives the next index from the returned requests (see `gdocs.cursor`).

Lists, tables and images have their own modules (`gdocs/lists.py`,
`gdocs/tables.py`, `gdocs/images.py`).
"""

from __future__ import annotations

import logging
from typing import Any

from gdocs.blocks import (
    Block,
    BlockquoteBlock,
    CodeBlock,
    HeadingBlock,
    HtmlBlock,
    ImageNode,
    InlineNode,
    ListBlock,
    MarkupNode,
    ParagraphBlock,
    RuleBlock,
    TableBlock,
    contains_image,
    has_inline_formatting,
    plain_text,
)
from gdocs.cursor import next_index, utf16_len
from gdocs.docs_helpers import (
    create_border_style,
    create_insert_text_request,
    create_named_style_request,
    create_paragraph_spacing_request,
    create_paragraph_style_request,
    create_text_style_request,
    pt,
    rgb_color,
)
from gdocs.images import convert_image
from gdocs.inline_formatter import (
    CODE_BACKGROUND_COLOR,
    CODE_FONT_FAMILY,
    FormatRange,
    format_inline,
    style_requests_for_run,
)

logger = logging.getLogger(__name__)

# Named style mappings for headings (1 -> HEADING_1, etc.)
HEADING_STYLE_MAP: dict[int, str] = {
    1: "HEADING_1",
    2: "HEADING_2",
    3: "HEADING_3",
    4: "HEADING_4",
    5: "HEADING_5",
    6: "HEADING_6",
}

# Vertical spacing around lists and blockquotes
BLOCK_SPACING_PT = 6

# Blockquote styling constants
BLOCKQUOTE_INDENT_PT = 36
BLOCKQUOTE_BORDER_WIDTH_PT = 3
BLOCKQUOTE_BORDER_PADDING_PT = 8
BLOCKQUOTE_BORDER_COLOR = {"red": 0.8, "green": 0.8, "blue": 0.8}

# Horizontal rule styling constants
# Docs has no native HR, so an empty paragraph with a bottom border stands in for one
HR_BORDER_WIDTH_PT = 1
HR_BORDER_PADDING_PT = 6
HR_BORDER_COLOR = {"red": 0.5, "green": 0.5, "blue": 0.5}
HR_SPACING_PT = 6


# ---------------------------------------------------------------------------
# Headings
# ---------------------------------------------------------------------------


def convert_heading(block: HeadingBlock, index: int) -> list[dict[str, Any]]:
    """
    Insert the heading text and apply HEADING_<level> to it.

    The style range ends at the last heading character; the trailing newline is
    left out. Inline formatting inside the heading is applied afterwards.
    """
    text, ranges = format_inline(block.children)
    requests = [create_insert_text_request(index, text + "\n")]

    if not text:
        logger.debug(f"Empty heading at {index}, no style applied")
        return requests

    named_style = HEADING_STYLE_MAP.get(block.level, "NORMAL_TEXT")
    requests.append(create_named_style_request(index, index + utf16_len(text), named_style))
    requests.extend(style_requests_for_run(ranges, index))
    logger.debug(f"Heading {named_style} at [{index}, {index + utf16_len(text)})")
    return requests


# ---------------------------------------------------------------------------
# Paragraphs
# ---------------------------------------------------------------------------


def convert_paragraph(block: ParagraphBlock, index: int) -> list[dict[str, Any]]:
    """
    Convert a paragraph.

    Plain text becomes a single insertText, formatted text adds one style
    request per range, and paragraphs holding images are split into text runs
    and images inserted one after another.
    """
    if contains_image(block.children):
        return convert_mixed_content(block.children, index)

    if not has_inline_formatting(block.children):
        text = plain_text(block.children)
        if not text.strip():
            return []
        return [create_insert_text_request(index, text + "\n")]

    text, ranges = format_inline(block.children)
    if not text.strip():
        return []
    return [create_insert_text_request(index, text + "\n"), *style_requests_for_run(ranges, index)]


def split_mixed_content(nodes: list[InlineNode]) -> list[list[InlineNode] | ImageNode]:
    """
    Split inline content into text runs and images, in document order.

    Markup that wraps an image (a linked image, for example) is split around
    it so the surrounding text keeps its formatting.
    """
    pieces: list[list[InlineNode] | ImageNode] = []
    run: list[InlineNode] = []

    for node in nodes:
        if isinstance(node, ImageNode):
            if run:
                pieces.append(run)
                run = []
            pieces.append(node)
        elif isinstance(node, MarkupNode) and contains_image(node.children):
            for piece in split_mixed_content(node.children):
                if isinstance(piece, ImageNode):
                    if run:
                        pieces.append(run)
                        run = []
                    pieces.append(piece)
                else:
                    run.append(MarkupNode(kind=node.kind, children=piece, url=node.url))
        else:
            run.append(node)

    if run:
        pieces.append(run)
    return pieces


def convert_mixed_content(nodes: list[InlineNode], index: int) -> list[dict[str, Any]]:
    """Insert text runs and images one after another, then close the paragraph."""
    requests: list[dict[str, Any]] = []
    cursor = index

    for piece in split_mixed_content(nodes):
        if isinstance(piece, ImageNode):
            image_requests = convert_image(piece, cursor)
            requests.extend(image_requests)
            cursor = next_index(image_requests, cursor)
            continue

        text, ranges = format_inline(piece)
        if not text.strip():
            continue
        requests.append(create_insert_text_request(cursor, text))
        requests.extend(style_requests_for_run(ranges, cursor))
        cursor += utf16_len(text)

    requests.append(create_insert_text_request(cursor, "\n"))
    return requests


# ---------------------------------------------------------------------------
# Blockquotes
# ---------------------------------------------------------------------------


def _join_runs(runs: list[tuple[str, list[FormatRange]]]) -> tuple[str, list[FormatRange]]:
    """Join runs with newlines, rebasing each run's ranges onto the joined text."""
    parts: list[str] = []
    ranges: list[FormatRange] = []
    offset = 0
    for text, run_ranges in runs:
        if parts:
            offset += 1
        parts.append(text)
        ranges.extend(fmt.shifted(offset) for fmt in run_ranges)
        offset += utf16_len(text)
    return "\n".join(parts), ranges


def _block_run(block: Block) -> tuple[str, list[FormatRange]] | None:
    """Text and ranges a block contributes when rendered as quoted text."""
    if isinstance(block, (ParagraphBlock, HeadingBlock)):
        return format_inline(block.children)
    if isinstance(block, BlockquoteBlock):
        return quote_text(block)
    if isinstance(block, ListBlock):
        return _join_runs([_join_runs(_child_runs(item.children)) for item in block.items])
    if isinstance(block, CodeBlock):
        return block.content.rstrip("\n"), []
    if isinstance(block, TableBlock):
        return "\n".join(", ".join(plain_text(cell.children) for cell in row) for row in block.rows), []
    if isinstance(block, HtmlBlock):
        return block.content.strip(), []
    return None


def quote_text(block: BlockquoteBlock) -> tuple[str, list[FormatRange]]:
    """Flatten a blockquote (nested quotes and lists included) into one formatted run."""
    return _join_runs(_child_runs(block.children))


def _child_runs(blocks: list[Block]) -> list[tuple[str, list[FormatRange]]]:
    runs = []
    for child in blocks:
        run = _block_run(child)
        if run is not None:
            runs.append(run)
    return runs


def convert_blockquote(block: BlockquoteBlock, index: int) -> list[dict[str, Any]]:
    """
    Insert the quoted text as indented paragraphs with a gray left border.

    The first physical line gets spaceAbove and the last one spaceBelow.
    """
    text, ranges = quote_text(block)
    if not text.strip():
        return []

    full_text = text + "\n"
    requests = [create_insert_text_request(index, full_text)]
    requests.extend(style_requests_for_run(ranges, index))
    requests.append(
        create_paragraph_style_request(
            index,
            index + utf16_len(full_text) - 1,
            {
                "indentStart": pt(BLOCKQUOTE_INDENT_PT),
                "borderLeft": create_border_style(
                    BLOCKQUOTE_BORDER_COLOR, BLOCKQUOTE_BORDER_WIDTH_PT, BLOCKQUOTE_BORDER_PADDING_PT
                ),
            },
            "indentStart,borderLeft",
        )
    )

    lines = text.split("\n")
    first_end = index + utf16_len(lines[0]) + 1
    last_start = index + utf16_len(text) - utf16_len(lines[-1])
    requests.append(create_paragraph_spacing_request(index, first_end, space_above=BLOCK_SPACING_PT))
    requests.append(
        create_paragraph_spacing_request(
            last_start, last_start + utf16_len(lines[-1]) + 1, space_below=BLOCK_SPACING_PT
        )
    )
    return requests


# ---------------------------------------------------------------------------
# Code, rules, raw HTML
# ---------------------------------------------------------------------------


def convert_code_block(block: CodeBlock, index: int) -> list[dict[str, Any]]:
    """Insert the code text and style it monospace on a light gray background."""
    code = block.content[:-1] if block.content.endswith("\n") else block.content
    requests = [create_insert_text_request(index, code + "\n")]

    if code:
        requests.append(
            create_text_style_request(
                index,
                index + utf16_len(code),
                {
                    "weightedFontFamily": {"fontFamily": CODE_FONT_FAMILY},
                    "backgroundColor": rgb_color(CODE_BACKGROUND_COLOR),
                },
                "weightedFontFamily,backgroundColor",
            )
        )
    return requests


def convert_horizontal_rule(block: RuleBlock, index: int) -> list[dict[str, Any]]:
    """
    Simulate a horizontal rule with a bottom-bordered empty paragraph.

    Emits insertText("\\n"), the border style, then a second insertText("\\n")
    at index + 1.
    """
    return [
        create_insert_text_request(index, "\n"),
        create_paragraph_style_request(
            index,
            index + 1,
            {
                "borderBottom": create_border_style(HR_BORDER_COLOR, HR_BORDER_WIDTH_PT, HR_BORDER_PADDING_PT),
                "spaceAbove": pt(HR_SPACING_PT),
                "spaceBelow": pt(HR_SPACING_PT),
            },
            "borderBottom,spaceAbove,spaceBelow",
        ),
        create_insert_text_request(index + 1, "\n"),
    ]


def convert_html_block(block: HtmlBlock, index: int) -> list[dict[str, Any]]:
    """Raw HTML is kept as plain text so comment markers survive for page breaks."""
    text = block.content.strip()
    if not text:
        return []
    return [create_insert_text_request(index, text + "\n")]
