"""
Page Break Injector

Two kinds of strategy:

- Heading strategies ("h1", "h2") run before conversion: they pick the blocks
  that get an insertPageBreak spliced in front of them. A page break occupies
  two index positions (the break and the paragraph it ends), so the cursor
  advances by 2 before the heading is converted.
- The "custom" strategy runs after conversion: every occurrence of the marker
  in the generated insertText requests is replaced by a page break, working
  from the last occurrence to the first so earlier offsets stay valid.
  Offsets inside nested list text discount the TABs that bulleting strips.
"""

import logging
import re
from typing import Any

from gdocs.blocks import Block, HeadingBlock
from gdocs.cursor import insert_text_spans, utf16_len
from gdocs.docs_helpers import create_delete_range_request, create_insert_page_break_request

logger = logging.getLogger(__name__)

STRATEGY_H1 = "h1"
STRATEGY_H2 = "h2"
STRATEGY_CUSTOM = "custom"
HEADING_STRATEGIES = (STRATEGY_H1, STRATEGY_H2)

PAGE_BREAK_WIDTH = 2


def plan_heading_breaks(blocks: list[Block], strategy: str) -> set[int]:
    """
    Positions of the blocks that get a page break before them.

    "h1" breaks before every level 1 heading except the first one,
    "h2" breaks before every level 2 heading.
    """
    positions: set[int] = set()
    seen_h1 = False

    for position, block in enumerate(blocks):
        if not isinstance(block, HeadingBlock):
            continue
        if strategy == STRATEGY_H1 and block.level == 1:
            if seen_h1:
                positions.add(position)
            seen_h1 = True
        elif strategy == STRATEGY_H2 and block.level == 2:
            positions.add(position)

    logger.debug(f"Page break strategy {strategy}: {len(positions)} break(s) planned")
    return positions


def _bulleted_starts(requests: list[dict[str, Any]]) -> set[int]:
    return {
        request["createParagraphBullets"]["range"]["startIndex"]
        for request in requests
        if "createParagraphBullets" in request
    }


def _leading_tabs_before(text: str, end: int) -> int:
    """TABs at the start of each line of text[:end]; bulleting strips them."""
    removed = 0
    at_line_start = True
    for char in text[:end]:
        if char == "\t" and at_line_start:
            removed += 1
            continue
        at_line_start = char == "\n"
    return removed


def find_marker_offsets(requests: list[dict[str, Any]], marker: str) -> list[tuple[int, int]]:
    """
    Absolute [start, end) offsets of every marker occurrence in inserted text.

    Offsets are taken in the document as it stands after the batch, so inside
    bulleted list text the nesting TABs removed by createParagraphBullets are
    not counted.
    """
    pattern = re.compile(re.escape(marker))
    bulleted = _bulleted_starts(requests)
    occurrences: list[tuple[int, int]] = []

    for index, text in insert_text_spans(requests):
        for match in pattern.finditer(text):
            start = index + utf16_len(text[: match.start()])
            if index in bulleted:
                start -= _leading_tabs_before(text, match.start())
            occurrences.append((start, start + utf16_len(match.group(0))))

    return occurrences


def inject_marker_page_breaks(requests: list[dict[str, Any]], marker: str) -> list[dict[str, Any]]:
    """
    Append deleteContentRange + insertPageBreak for each marker occurrence.

    Occurrences are handled last to first; the input list is not modified.
    """
    occurrences = find_marker_offsets(requests, marker)
    if not occurrences:
        logger.debug(f"No page break marker {marker!r} found")
        return list(requests)

    result = list(requests)
    for start, end in sorted(occurrences, reverse=True):
        result.append(create_delete_range_request(start, end))
        result.append(create_insert_page_break_request(start))

    logger.debug(f"Replaced {len(occurrences)} page break marker(s)")
    return result
