"""
Conversion entry point and output packaging.

`convert_markdown_to_api_requests` converts Markdown and wraps the requests
for the consumer that creates the document and submits the batch. Arguments
left as None fall back to the environment configuration (`core/config.py`).
"""

import logging
from typing import Any

from core.config import OUTPUT_FORMATS, PAGE_BREAK_STRATEGIES, get_converter_config
from core.utils import validate_choice, validate_positive_int
from gdocs.markdown_parser import MarkdownToDocsConverter

logger = logging.getLogger(__name__)

OUTPUT_FORMAT_SINGLE = "single"
OUTPUT_FORMAT_MULTIPLE = "multiple"


def package_requests(requests: list[dict[str, Any]], document_title: str, output_format: str) -> dict[str, Any]:
    """
    Wrap requests in the conversion result shape.

    "single" yields the batch only; "multiple" also lists every request with a
    1-based requestId. The operations are the same either way.
    """
    result: dict[str, Any] = {
        "documentTitle": document_title,
        "createDocumentRequest": {"title": document_title},
        "batchUpdateRequest": {"requests": requests},
    }
    if output_format == OUTPUT_FORMAT_MULTIPLE:
        result["requests"] = [
            {"requestId": request_id, "request": request} for request_id, request in enumerate(requests, start=1)
        ]
    return result


def convert_markdown_to_api_requests(
    markdown: str,
    document_title: str,
    output_format: str | None = None,
    start_index: int | None = None,
    page_break_strategy: str | None = None,
    page_break_marker: str | None = None,
) -> dict[str, Any]:
    """
    Convert Markdown into a packaged set of Google Docs API requests.

    Args:
        markdown: Markdown source text.
        document_title: Title for the document to create.
        output_format: "single" (one batch) or "multiple" (batch plus numbered requests).
        start_index: 1-based index where content is inserted.
        page_break_strategy: "h1", "h2" or "custom".
        page_break_marker: Marker replaced by page breaks with the "custom" strategy.

    Returns:
        dict with documentTitle, createDocumentRequest, batchUpdateRequest and,
        for "multiple", requests.

    Raises:
        ValidationError: On an unknown output format or strategy, a start index
            below 1 or an empty custom marker.
    """
    config = get_converter_config()

    output_format = validate_choice(
        output_format if output_format is not None else config.output_format, "output_format", OUTPUT_FORMATS
    )
    start_index = validate_positive_int(start_index if start_index is not None else config.start_index, "start_index")
    if page_break_strategy is None:
        page_break_strategy = config.page_break_strategy
    if page_break_strategy is not None:
        page_break_strategy = validate_choice(page_break_strategy, "page_break_strategy", PAGE_BREAK_STRATEGIES)
    if page_break_marker is None:
        page_break_marker = config.page_break_marker

    requests = MarkdownToDocsConverter().convert(
        markdown,
        start_index=start_index,
        page_break_strategy=page_break_strategy,
        page_break_marker=page_break_marker,
    )
    logger.debug(f"Converted '{document_title}': {len(requests)} request(s), output_format={output_format}")
    return package_requests(requests, document_title, output_format)
