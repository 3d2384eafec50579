"""
Markdown to Google Docs Converter

This module provides the `MarkdownToDocsConverter` class that translates Markdown
syntax into Google Docs API `batchUpdate` requests: headings, paragraphs with
inline formatting, nested and task lists, tables, blockquotes, code blocks,
horizontal rules, images and page breaks.

The converter threads one insertion index through the document. Each block is
converted at the current index, and the next index is derived from the block's
last insertText (see `gdocs/cursor.py`), so later requests are computed as if
every earlier request in the list had already been applied.

Example:
    >>> converter = MarkdownToDocsConverter()
    >>> requests = converter.convert("# Title\\n\\nHello **world**.")
    >>> [next(iter(r)) for r in requests]
    ['insertText', 'updateParagraphStyle', 'insertText', 'updateTextStyle']

See Also:
    - `gdocs/output.py` for the packaged conversion entry point
    - `gdocs/writing.py` for submitting the requests to a document
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from core.config import DEFAULT_PAGE_BREAK_MARKER, PAGE_BREAK_STRATEGIES
from core.errors import ValidationError
from core.utils import validate_choice, validate_positive_int
from gdocs.block_converters import (
    convert_blockquote,
    convert_code_block,
    convert_heading,
    convert_horizontal_rule,
    convert_html_block,
    convert_paragraph,
)
from gdocs.blocks import (
    Block,
    BlockquoteBlock,
    CodeBlock,
    HeadingBlock,
    HtmlBlock,
    ListBlock,
    ParagraphBlock,
    RuleBlock,
    TableBlock,
    create_markdown_parser,
    parse_blocks,
)
from gdocs.cursor import next_index
from gdocs.docs_helpers import create_insert_page_break_request
from gdocs.lists import convert_list
from gdocs.page_breaks import (
    HEADING_STRATEGIES,
    PAGE_BREAK_WIDTH,
    STRATEGY_CUSTOM,
    inject_marker_page_breaks,
    plan_heading_breaks,
)
from gdocs.tables import convert_table

logger = logging.getLogger(__name__)

BlockConverter = Callable[[Any, int], list[dict[str, Any]]]

# One converter per block variant
BLOCK_CONVERTERS: dict[type, BlockConverter] = {
    HeadingBlock: convert_heading,
    ParagraphBlock: convert_paragraph,
    ListBlock: convert_list,
    TableBlock: convert_table,
    BlockquoteBlock: convert_blockquote,
    CodeBlock: convert_code_block,
    RuleBlock: convert_horizontal_rule,
    HtmlBlock: convert_html_block,
}


class MarkdownToDocsConverter:
    """
    Converts Markdown text into Google Docs API batchUpdate requests.

    The parser is created once per instance; everything else (cursor and
    accumulated requests) lives only for the duration of one `convert` call,
    so one instance can be reused and independent instances share nothing.

    Attributes:
        md: The markdown-it parser instance (CommonMark + tables,
            strikethrough and task lists).

    Example:
        >>> converter = MarkdownToDocsConverter()
        >>> requests = converter.convert("# Title\\n\\n**Bold** text")
        >>> len(requests)  # insertText + updateParagraphStyle + insertText + updateTextStyle
        4
    """

    def __init__(self) -> None:
        self.md = create_markdown_parser()

    def convert(
        self,
        markdown_text: str,
        start_index: int = 1,
        page_break_strategy: str | None = None,
        page_break_marker: str | None = None,
    ) -> list[dict]:
        """
        Convert Markdown text to Google Docs API requests.

        Args:
            markdown_text: The Markdown string to convert.
            start_index: The starting index in the document (1-based).
                         Defaults to 1 (start of document body).
            page_break_strategy: Optional "h1" (before every H1 but the first),
                                 "h2" (before every H2) or "custom" (replace a marker).
            page_break_marker: Marker text for the "custom" strategy.
                               Defaults to "<!-- pagebreak -->".

        Returns:
            A list of Google Docs API request dictionaries ready for batchUpdate.

        Raises:
            ValidationError: If start_index, the strategy or the marker is invalid.
        """
        start_index = validate_positive_int(start_index, "start_index")
        if page_break_strategy is not None:
            page_break_strategy = validate_choice(page_break_strategy, "page_break_strategy", PAGE_BREAK_STRATEGIES)
        if page_break_strategy == STRATEGY_CUSTOM:
            if page_break_marker is None:
                page_break_marker = DEFAULT_PAGE_BREAK_MARKER
            if not page_break_marker:
                raise ValidationError("page_break_marker cannot be empty when using the custom strategy")

        blocks = parse_blocks(markdown_text or "", self.md)
        logger.debug(f"Parsed {len(blocks)} block(s), start_index={start_index}, strategy={page_break_strategy}")

        break_positions: set[int] = set()
        if page_break_strategy in HEADING_STRATEGIES:
            break_positions = plan_heading_breaks(blocks, page_break_strategy)

        requests: list[dict] = []
        cursor_index = start_index

        for position, block in enumerate(blocks):
            if position in break_positions:
                requests.append(create_insert_page_break_request(cursor_index))
                cursor_index += PAGE_BREAK_WIDTH

            block_requests = self.convert_block(block, cursor_index)
            requests.extend(block_requests)
            cursor_index = next_index(block_requests, cursor_index)
            logger.debug(f"{type(block).__name__}: {len(block_requests)} request(s), cursor={cursor_index}")

        if page_break_strategy == STRATEGY_CUSTOM:
            requests = inject_marker_page_breaks(requests, page_break_marker)

        return requests

    def convert_block(self, block: Block, index: int) -> list[dict]:
        """Dispatch one block to the converter for its variant."""
        converter = BLOCK_CONVERTERS.get(type(block))
        if converter is None:
            logger.warning(f"No converter for block type {type(block).__name__}; skipped")
            return []
        return converter(block, index)
