"""
Google Docs Request Builders

Small pure functions that build Google Docs API `batchUpdate` request
dictionaries. Every converter emits requests through these helpers so the
exact API field names live in one place.
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)

# Paragraph/text dimension unit used for every magnitude we emit
UNIT_PT = "PT"


def _normalize_color(color: str | None, param_name: str) -> dict[str, float] | None:
    """
    Convert a "#RRGGBB" hex string into the API's 0-1 rgbColor fractions.

    Returns None when no color is given. Raises ValueError for malformed input.
    """
    if color is None:
        return None

    if not isinstance(color, str) or len(color) != 7 or not color.startswith("#"):
        raise ValueError(f"{param_name} must be a hex string like '#RRGGBB'")

    try:
        red = int(color[1:3], 16)
        green = int(color[3:5], 16)
        blue = int(color[5:7], 16)
    except ValueError as e:
        raise ValueError(f"{param_name} must be a hex string like '#RRGGBB'") from e

    return {"red": red / 255, "green": green / 255, "blue": blue / 255}


def pt(magnitude: float) -> dict[str, Any]:
    """Dimension in points."""
    return {"magnitude": magnitude, "unit": UNIT_PT}


def rgb_color(rgb: dict[str, float]) -> dict[str, Any]:
    """Wrap an rgbColor dict in the OptionalColor shape used by styles and borders."""
    return {"color": {"rgbColor": dict(rgb)}}


def build_text_style(
    bold: bool = None,
    italic: bool = None,
    underline: bool = None,
    strikethrough: bool = None,
    font_size: int = None,
    font_family: str = None,
    text_color: str = None,
    background_color: str = None,
    link_url: str = None,
) -> tuple[dict[str, Any], list[str]]:
    """
    Build a textStyle dict and its matching fields list.

    Only the properties that are explicitly set end up in the style.

    Returns:
        Tuple of (text_style, fields)
    """
    text_style: dict[str, Any] = {}
    fields: list[str] = []

    if bold is not None:
        text_style["bold"] = bold
        fields.append("bold")

    if italic is not None:
        text_style["italic"] = italic
        fields.append("italic")

    if underline is not None:
        text_style["underline"] = underline
        fields.append("underline")

    if strikethrough is not None:
        text_style["strikethrough"] = strikethrough
        fields.append("strikethrough")

    if font_size is not None:
        text_style["fontSize"] = pt(font_size)
        fields.append("fontSize")

    if font_family is not None:
        text_style["weightedFontFamily"] = {"fontFamily": font_family}
        fields.append("weightedFontFamily")

    if text_color is not None:
        text_style["foregroundColor"] = rgb_color(_normalize_color(text_color, "text_color"))
        fields.append("foregroundColor")

    if background_color is not None:
        text_style["backgroundColor"] = rgb_color(_normalize_color(background_color, "background_color"))
        fields.append("backgroundColor")

    if link_url is not None:
        text_style["link"] = {"url": link_url}
        fields.append("link")

    return text_style, fields


def create_insert_text_request(index: int, text: str) -> dict[str, Any]:
    """Create an insertText request at an absolute index."""
    return {"insertText": {"location": {"index": index}, "text": text}}


def create_delete_range_request(start_index: int, end_index: int) -> dict[str, Any]:
    """Create a deleteContentRange request for [start_index, end_index)."""
    return {"deleteContentRange": {"range": {"startIndex": start_index, "endIndex": end_index}}}


def create_text_style_request(
    start_index: int, end_index: int, text_style: dict[str, Any], fields: str
) -> dict[str, Any]:
    """Create an updateTextStyle request from an already built textStyle."""
    return {
        "updateTextStyle": {
            "range": {"startIndex": start_index, "endIndex": end_index},
            "textStyle": text_style,
            "fields": fields,
        }
    }


def create_format_text_request(start_index: int, end_index: int, **style_kwargs: Any) -> dict[str, Any] | None:
    """
    Create an updateTextStyle request from keyword style properties.

    Accepts the same keywords as `build_text_style`. Returns None when no
    property is set.
    """
    text_style, fields = build_text_style(**style_kwargs)
    if not text_style:
        return None
    return create_text_style_request(start_index, end_index, text_style, ",".join(fields))


def create_paragraph_style_request(
    start_index: int, end_index: int, paragraph_style: dict[str, Any], fields: str
) -> dict[str, Any]:
    """Create an updateParagraphStyle request."""
    return {
        "updateParagraphStyle": {
            "range": {"startIndex": start_index, "endIndex": end_index},
            "paragraphStyle": paragraph_style,
            "fields": fields,
        }
    }


def create_named_style_request(start_index: int, end_index: int, named_style_type: str) -> dict[str, Any]:
    """Create an updateParagraphStyle request that applies a named style (HEADING_1 etc.)."""
    return create_paragraph_style_request(
        start_index, end_index, {"namedStyleType": named_style_type}, "namedStyleType"
    )


def create_paragraph_spacing_request(
    start_index: int, end_index: int, space_above: float = None, space_below: float = None
) -> dict[str, Any] | None:
    """Create an updateParagraphStyle request setting spaceAbove and/or spaceBelow in points."""
    paragraph_style: dict[str, Any] = {}
    fields: list[str] = []

    if space_above is not None:
        paragraph_style["spaceAbove"] = pt(space_above)
        fields.append("spaceAbove")

    if space_below is not None:
        paragraph_style["spaceBelow"] = pt(space_below)
        fields.append("spaceBelow")

    if not paragraph_style:
        return None
    return create_paragraph_style_request(start_index, end_index, paragraph_style, ",".join(fields))


def create_border_style(rgb: dict[str, float], width: float, padding: float, dash_style: str = "SOLID") -> dict:
    """ParagraphBorder dict (color, width, dash style, padding)."""
    return {
        "color": rgb_color(rgb),
        "width": pt(width),
        "dashStyle": dash_style,
        "padding": pt(padding),
    }


def create_bullet_list_request(start_index: int, end_index: int, bullet_preset: str) -> dict[str, Any]:
    """Create a createParagraphBullets request."""
    return {
        "createParagraphBullets": {
            "range": {"startIndex": start_index, "endIndex": end_index},
            "bulletPreset": bullet_preset,
        }
    }


def create_delete_bullets_request(start_index: int, end_index: int) -> dict[str, Any]:
    """Create a deleteParagraphBullets request."""
    return {"deleteParagraphBullets": {"range": {"startIndex": start_index, "endIndex": end_index}}}


def create_insert_table_request(index: int, rows: int, columns: int) -> dict[str, Any]:
    """Create an insertTable request."""
    return {"insertTable": {"location": {"index": index}, "rows": rows, "columns": columns}}


def create_insert_page_break_request(index: int) -> dict[str, Any]:
    """Create an insertPageBreak request."""
    return {"insertPageBreak": {"location": {"index": index}}}


def create_insert_image_request(
    index: int, uri: str, width: float | None = None, height: float | None = None
) -> dict[str, Any]:
    """
    Create an insertInlineImage request.

    Width and height are in points; an objectSize is only attached when at
    least one of them is given.
    """
    request: dict[str, Any] = {"insertInlineImage": {"location": {"index": index}, "uri": uri}}

    object_size: dict[str, Any] = {}
    if width is not None:
        object_size["width"] = pt(width)
    if height is not None:
        object_size["height"] = pt(height)
    if object_size:
        request["insertInlineImage"]["objectSize"] = object_size

    return request


def create_find_replace_request(find_text: str, replace_text: str, match_case: bool = False) -> dict[str, Any]:
    """Create a replaceAllText request."""
    return {
        "replaceAllText": {
            "containsText": {"text": find_text, "matchCase": match_case},
            "replaceText": replace_text,
        }
    }


def create_update_table_cell_style_request(
    table_start_index: int,
    row_index: int,
    column_index: int,
    table_cell_style: dict[str, Any],
    fields: str,
    row_span: int = 1,
    column_span: int = 1,
) -> dict[str, Any]:
    """Create an updateTableCellStyle request addressing a cell range by its table start."""
    return {
        "updateTableCellStyle": {
            "tableRange": {
                "tableCellLocation": {
                    "tableStartLocation": {"index": table_start_index},
                    "rowIndex": row_index,
                    "columnIndex": column_index,
                },
                "rowSpan": row_span,
                "columnSpan": column_span,
            },
            "tableCellStyle": table_cell_style,
            "fields": fields,
        }
    }
