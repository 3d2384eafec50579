"""
Table conversion.

A Markdown table becomes one insertTable followed by insertText requests that
fill the cells in row-major order. If the grid cannot be laid out, the table
is inserted as a plain text summary instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from core.errors import TableConstructionError
from gdocs.blocks import TableBlock, TableCellSource
from gdocs.cursor import utf16_len
from gdocs.docs_helpers import (
    create_format_text_request,
    create_insert_table_request,
    create_insert_text_request,
    create_paragraph_style_request,
)
from gdocs.inline_formatter import FormatRange, format_inline, strip_run, style_requests_for_run

logger = logging.getLogger(__name__)

# Offset from the insertTable location to the first cell boundary
FIRST_CELL_OFFSET = 3
# Boundary advance after an empty cell, and on top of the text for a filled one
CELL_BOUNDARY_STEP = 2
ROW_END_STEP = 1


@dataclass
class TableCell:
    content: str
    format_ranges: list[FormatRange] = field(default_factory=list)
    is_header: bool = False


def build_table_grid(block: TableBlock) -> list[list[TableCell]]:
    """
    Turn a parsed table into a grid of cells.

    The first row, and any header-tagged cell, is a header cell.

    Raises:
        TableConstructionError: when a row's width differs from the first row.
    """
    grid: list[list[TableCell]] = []
    for row_index, row in enumerate(block.rows):
        cells = []
        for source in row:
            text, ranges = strip_run(*format_inline(source.children))
            cells.append(TableCell(content=text, format_ranges=ranges, is_header=source.is_header or row_index == 0))
        grid.append(cells)

    if grid:
        columns = len(grid[0])
        for row_index, cells in enumerate(grid):
            if len(cells) != columns:
                raise TableConstructionError(
                    f"row {row_index} has {len(cells)} cells, expected {columns}",
                    rows=len(grid),
                    columns=columns,
                )
    return grid


def convert_table(block: TableBlock, index: int) -> list[dict[str, Any]]:
    """
    Convert a table at `index`, degrading to text if the grid is inconsistent.

    Cell index math against the freshly inserted table:
    - The first cell boundary sits at `index + 3`; cell text goes at boundary + 1
    - After a cell with text, the boundary moves by len(text) + 2
    - An empty cell gets a bare "\\n" and the boundary moves by 2
    - Each row end adds 1
    - A closing "\\n" is inserted at the final boundary
    """
    try:
        grid = build_table_grid(block)
        return _convert_grid(grid, index)
    except TableConstructionError as e:
        logger.warning(f"Table inserted as text: {e}")
        return convert_table_as_text(
            [[cell_text(source) for source in row] for row in block.rows],
            index,
        )


def cell_text(source: TableCellSource) -> str:
    text, _ = format_inline(source.children)
    return text.strip()


def _convert_grid(grid: list[list[TableCell]], index: int) -> list[dict[str, Any]]:
    if not grid or not grid[0]:
        logger.debug("Empty table skipped")
        return []

    rows, columns = len(grid), len(grid[0])
    requests: list[dict[str, Any]] = [create_insert_table_request(index, rows, columns)]
    logger.debug(f"Table {rows}x{columns} at index {index}")

    boundary = index + FIRST_CELL_OFFSET
    for row_index, row in enumerate(grid):
        for column_index, cell in enumerate(row):
            text_position = boundary + 1

            if not cell.content:
                requests.append(create_insert_text_request(text_position, "\n"))
                boundary += CELL_BOUNDARY_STEP
                continue

            content_end = text_position + utf16_len(cell.content)
            requests.append(create_insert_text_request(text_position, cell.content))
            requests.extend(style_requests_for_run(cell.format_ranges, text_position))

            if cell.is_header:
                requests.append(create_format_text_request(text_position, content_end, bold=True))
                requests.append(
                    create_paragraph_style_request(text_position, content_end, {"alignment": "CENTER"}, "alignment")
                )

            logger.debug(f"Table cell ({row_index},{column_index}) at [{text_position}, {content_end})")
            boundary += utf16_len(cell.content) + CELL_BOUNDARY_STEP

        boundary += ROW_END_STEP

    requests.append(create_insert_text_request(boundary, "\n"))
    return requests


def table_fallback_text(rows: list[list[str]]) -> str:
    """Plain text summary: a header line followed by numbered rows."""
    text = "\n[Table Content]\n"
    if rows:
        text += f"Headers: {', '.join(rows[0])}\n"
        for row_number, row in enumerate(rows[1:], start=1):
            text += f"Row {row_number}: {', '.join(row)}\n"
    return text + "\n"


def convert_table_as_text(rows: list[list[str]], index: int) -> list[dict[str, Any]]:
    return [create_insert_text_request(index, table_fallback_text(rows))]
