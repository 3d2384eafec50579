"""
Image conversion.

A valid image becomes a padded insertInlineImage; anything the Docs API would
refuse to fetch is replaced by a styled text placeholder so that one bad image
never aborts the whole conversion.
"""

import logging
import re
from typing import Any
from urllib.parse import urlparse

from core.errors import ImageValidationError
from gdocs.blocks import ImageNode
from gdocs.cursor import utf16_len
from gdocs.docs_helpers import (
    create_format_text_request,
    create_insert_image_request,
    create_insert_text_request,
    create_text_style_request,
    rgb_color,
)

logger = logging.getLogger(__name__)

# Docs rejects image URIs longer than this
MAX_IMAGE_URL_LENGTH = 2000

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".svg")
IMAGE_SERVICE_HOST_RE = re.compile(r"\.(googleapis|imgur|cloudinary|unsplash|pexels)\.")

# 1px = 0.75pt
PX_TO_PT = 0.75

DEFAULT_ALT_TEXT = "Image"
FALLBACK_BACKGROUND_COLOR = {"red": 0.9, "green": 0.95, "blue": 1.0}
FALLBACK_SOURCE_FONT_SIZE_PT = 9

_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?|\.\d+")


def validate_image_source(src: str) -> str:
    """
    Check that `src` is an image URL the Docs API can fetch.

    Raises:
        ImageValidationError: with the reason the source was rejected.
    """
    if not src:
        raise ImageValidationError(src, "empty source")
    if len(src) > MAX_IMAGE_URL_LENGTH:
        raise ImageValidationError(src, f"URL longer than {MAX_IMAGE_URL_LENGTH} characters")

    try:
        parsed = urlparse(src)
        hostname = parsed.hostname or ""
    except ValueError as e:
        raise ImageValidationError(src, f"unparseable URL ({e})") from e

    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ImageValidationError(src, "only http and https URLs are supported")

    has_image_extension = parsed.path.lower().endswith(IMAGE_EXTENSIONS)
    is_image_service = IMAGE_SERVICE_HOST_RE.search(hostname) is not None
    if not (has_image_extension or is_image_service):
        raise ImageValidationError(src, "no image extension and not a known image host")

    return src


def parse_image_dimension(dimension: str | None) -> float | None:
    """
    Parse a width/height attribute into points.

    Values with a `px` unit are converted at 0.75pt per pixel, anything else is
    taken as points. Returns None for missing, unparseable or non-positive values.
    """
    if not dimension:
        return None

    cleaned = re.sub(r"[^\d.]", "", dimension)
    match = _NUMBER_RE.match(cleaned)
    if not match:
        return None

    value = float(match.group(0))
    if value <= 0:
        return None

    if "px" in dimension.lower():
        return value * PX_TO_PT
    return value


def convert_image(image: ImageNode, index: int) -> list[dict[str, Any]]:
    """
    Convert one image at `index`.

    Valid:   insertText("\\n") at i, insertInlineImage at i + 1, insertText("\\n") at i + 2
    Invalid: styled placeholder text (see `convert_image_fallback`)
    """
    try:
        validate_image_source(image.src)
    except ImageValidationError as e:
        logger.warning(f"Image replaced by text placeholder: {e}")
        return convert_image_fallback(image.alt, image.src, index)

    width = parse_image_dimension(image.width)
    height = parse_image_dimension(image.height)
    logger.debug(f"Inline image at {index + 1}: src={image.src!r}, width={width}, height={height}")

    return [
        create_insert_text_request(index, "\n"),
        create_insert_image_request(index + 1, image.src, width=width, height=height),
        create_insert_text_request(index + 2, "\n"),
    ]


def convert_image_fallback(alt: str, src: str, index: int) -> list[dict[str, Any]]:
    """
    Placeholder block for an image that cannot be inserted.

    The display line is bold on a light blue background, the optional source
    line is italic and small.
    """
    display_text = f"📷 {alt or DEFAULT_ALT_TEXT} invalid source address!"
    source_text = f"\nSource: {src}" if src else ""
    full_text = f"{display_text}{source_text}\n\n"

    display_end = index + utf16_len(display_text)
    requests = [
        create_insert_text_request(index, full_text),
        create_text_style_request(
            index,
            display_end,
            {"bold": True, "backgroundColor": rgb_color(FALLBACK_BACKGROUND_COLOR)},
            "bold,backgroundColor",
        ),
    ]

    if source_text:
        requests.append(
            create_format_text_request(
                display_end + 1,
                display_end + utf16_len(source_text),
                italic=True,
                font_size=FALLBACK_SOURCE_FONT_SIZE_PT,
            )
        )

    return requests
