"""
List conversion.

Nested lists are inserted as one block of text whose primary lines carry one
leading TAB per nesting level, then bulleted with a single
createParagraphBullets over the whole block. The API reads the TABs as nesting
depth and deletes them, so every offset computed against the inserted text has
to be corrected afterwards:

1. Flatten the list tree into items of (level, lines).
2. Lay the lines out at their naive offsets (TABs included).
3. Walk the lines again, subtracting the TABs removed by earlier primary lines,
   and emit the text styles and secondary-line fixes at the corrected offsets.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from gdocs.block_converters import BLOCK_SPACING_PT, quote_text
from gdocs.blocks import (
    Block,
    BlockquoteBlock,
    CheckboxNode,
    CodeBlock,
    HeadingBlock,
    HtmlBlock,
    ListBlock,
    ParagraphBlock,
    contains_checkbox,
)
from gdocs.cursor import utf16_len
from gdocs.docs_helpers import (
    create_bullet_list_request,
    create_delete_bullets_request,
    create_insert_text_request,
    create_paragraph_spacing_request,
    create_paragraph_style_request,
    pt,
)
from gdocs.inline_formatter import FormatRange, format_inline, split_run, strip_run, style_requests_for_run

logger = logging.getLogger(__name__)

# Bullet list presets for the Google Docs API
BULLET_PRESET_UNORDERED = "BULLET_DISC_CIRCLE_SQUARE"
BULLET_PRESET_ORDERED = "NUMBERED_DECIMAL_ALPHA_ROMAN"
BULLET_PRESET_CHECKBOX = "BULLET_CHECKBOX"

# Task list item prefixes
CHECKBOX_CHECKED_PREFIX = "✅ "
CHECKBOX_UNCHECKED_PREFIX = "❌ "

# Manual indentation per nesting level for secondary lines
LIST_INDENT_PT = 36


@dataclass
class ListLine:
    text: str
    is_primary: bool
    format_ranges: list[FormatRange] = field(default_factory=list)


@dataclass
class ListItemLines:
    level: int
    lines: list[ListLine] = field(default_factory=list)


@dataclass
class LinePlacement:
    """Where one list line lands before and after TAB removal."""

    level: int
    line: ListLine
    naive_start: int
    corrected_start: int = 0

    @property
    def paragraph_end(self) -> int:
        """End of the line's paragraph (its newline included) at corrected offsets."""
        return self.corrected_start + utf16_len(self.line.text) + 1


def bullet_preset_for(block: ListBlock) -> str:
    """Preset chosen by the top-level list."""
    if block.ordered:
        return BULLET_PRESET_ORDERED
    if contains_checkbox(block):
        return BULLET_PRESET_CHECKBOX
    return BULLET_PRESET_UNORDERED


# ---------------------------------------------------------------------------
# Flattening
# ---------------------------------------------------------------------------


def _item_checkbox(children: list[Block]) -> CheckboxNode | None:
    for child in children:
        if isinstance(child, ParagraphBlock):
            for node in child.children:
                if isinstance(node, CheckboxNode):
                    return node
            return None
    return None


def _item_run(block: Block) -> tuple[str, list[FormatRange]] | None:
    if isinstance(block, (ParagraphBlock, HeadingBlock)):
        return format_inline(block.children)
    if isinstance(block, BlockquoteBlock):
        return quote_text(block)
    if isinstance(block, CodeBlock):
        return block.content.rstrip("\n"), []
    if isinstance(block, HtmlBlock):
        return block.content.strip(), []

    logger.debug(f"List item child {type(block).__name__} has no text line")
    return None


def _item_lines(children: list[Block]) -> list[ListLine]:
    """Lines of one item's own content; nested lists are handled by the caller."""
    lines: list[ListLine] = []
    for child in children:
        if isinstance(child, ListBlock):
            continue
        run = _item_run(child)
        if run is None:
            continue
        for piece_text, piece_ranges in split_run(*run):
            text, ranges = strip_run(piece_text, piece_ranges)
            if text:
                lines.append(ListLine(text=text, is_primary=not lines, format_ranges=ranges))

    if not lines:
        # Empty items still produce an (empty) bullet line
        lines.append(ListLine(text="", is_primary=True))
    return lines


def flatten_list(block: ListBlock, level: int = 0, checkbox_list: bool | None = None) -> list[ListItemLines]:
    """
    Flatten a list tree depth-first into (level, lines) items.

    Nested lists follow their parent item's lines and precede its siblings.
    In a checkbox list, task items get a ✅/❌ prefix on their first line and
    that line's ranges move right by the prefix length.
    """
    if checkbox_list is None:
        checkbox_list = not block.ordered and contains_checkbox(block)

    items: list[ListItemLines] = []
    for item in block.items:
        lines = _item_lines(item.children)

        checkbox = _item_checkbox(item.children) if checkbox_list else None
        if checkbox is not None:
            prefix = CHECKBOX_CHECKED_PREFIX if checkbox.checked else CHECKBOX_UNCHECKED_PREFIX
            shift = utf16_len(prefix)
            first = lines[0]
            lines[0] = ListLine(
                text=prefix + first.text,
                is_primary=first.is_primary,
                format_ranges=[fmt.shifted(shift) for fmt in first.format_ranges],
            )

        items.append(ListItemLines(level=level, lines=lines))

        for child in item.children:
            if isinstance(child, ListBlock):
                items.extend(flatten_list(child, level + 1, checkbox_list))

    return items


# ---------------------------------------------------------------------------
# Layout and TAB correction
# ---------------------------------------------------------------------------


def layout_list_lines(items: list[ListItemLines], list_start: int) -> tuple[str, list[LinePlacement]]:
    """
    First pass: build the inserted text and each line's naive start offset.

    Primary lines are prefixed with `level` TABs; every line ends with "\\n".
    """
    parts: list[str] = []
    placements: list[LinePlacement] = []
    cursor = list_start

    for item in items:
        for line in item.lines:
            tabs = "\t" * item.level if line.is_primary else ""
            line_text = f"{tabs}{line.text}\n"
            placements.append(LinePlacement(level=item.level, line=line, naive_start=cursor))
            parts.append(line_text)
            cursor += utf16_len(line_text)

    return "".join(parts), placements


def apply_tab_correction(placements: list[LinePlacement]) -> int:
    """
    Second pass: shift each line left by the TABs removed before it.

    Only primary lines carry TABs, so the running total grows by `level` after
    each primary line. Returns the total number of TABs removed.
    """
    tabs_removed = 0
    for placement in placements:
        placement.corrected_start = placement.naive_start - tabs_removed
        if placement.line.is_primary:
            tabs_removed += placement.level
    return tabs_removed


def convert_list(block: ListBlock, index: int) -> list[dict[str, Any]]:
    """Convert a top-level list (and everything nested in it) at `index`."""
    items = flatten_list(block)
    if not items:
        return []

    preset = bullet_preset_for(block)
    list_start = index + 1
    full_text, placements = layout_list_lines(items, list_start)
    list_end = list_start + utf16_len(full_text) - 1

    requests: list[dict[str, Any]] = [
        create_insert_text_request(index, "\n"),
        create_insert_text_request(list_start, full_text),
        create_bullet_list_request(list_start, list_end, preset),
    ]
    logger.debug(f"List of {len(placements)} line(s) at [{list_start}, {list_end}), preset={preset}")

    tabs_removed = apply_tab_correction(placements)

    for placement in placements:
        start = placement.corrected_start
        requests.extend(style_requests_for_run(placement.line.format_ranges, start))

        if not placement.line.is_primary:
            end = placement.paragraph_end
            indent = pt(LIST_INDENT_PT * (placement.level + 1))
            requests.append(create_delete_bullets_request(start, end))
            requests.append(
                create_paragraph_style_request(
                    start,
                    end,
                    {"indentStart": indent, "indentFirstLine": indent},
                    "indentStart,indentFirstLine",
                )
            )

    first, last = placements[0], placements[-1]
    requests.append(
        create_paragraph_spacing_request(first.corrected_start, first.paragraph_end, space_above=BLOCK_SPACING_PT)
    )
    requests.append(
        create_paragraph_spacing_request(last.corrected_start, last.paragraph_end, space_below=BLOCK_SPACING_PT)
    )

    # Closing newline at the end of the TAB-stripped list keeps the cursor rule exact
    requests.append(create_insert_text_request(list_end - tabs_removed + 1, "\n"))
    logger.debug(f"List removed {tabs_removed} TAB(s), next index {list_end - tabs_removed + 2}")
    return requests
