"""
Google Docs Writing

Submits converted Markdown to Google Docs through a googleapiclient Docs
service. Credentials, retries and service construction belong to the caller;
blocking client calls run in a worker thread.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from core.utils import handle_http_errors, validate_non_empty_string
from gdocs.output import convert_markdown_to_api_requests

logger = logging.getLogger(__name__)

DOCUMENT_URL_TEMPLATE = "https://docs.google.com/document/d/{document_id}/edit"


def document_url(document_id: str) -> str:
    return DOCUMENT_URL_TEMPLATE.format(document_id=document_id)


@dataclass
class DocumentCreationResult:
    success: bool
    document_id: str
    document_url: str
    title: str
    request_count: int
    message: str


@handle_http_errors("create_doc_from_markdown")
async def create_doc_from_markdown(
    service: Any,
    title: str,
    markdown: str,
    page_break_strategy: str = None,
    page_break_marker: str = None,
) -> DocumentCreationResult:
    """
    Creates a new Google Doc and fills it with converted Markdown.

    The Markdown is converted before the document is created, so invalid
    arguments never leave an empty document behind.

    Args:
        service: Authenticated Google Docs API service
        title: Title of the new document
        markdown: Markdown content for the document body
        page_break_strategy: Optional "h1", "h2" or "custom"
        page_break_marker: Marker text for the "custom" strategy

    Returns:
        DocumentCreationResult: IDs, link and the number of requests applied
    """
    title = validate_non_empty_string(title, "title")
    logger.info(f"[create_doc_from_markdown] Title='{title}', markdown_length={len(markdown or '')}")

    conversion = convert_markdown_to_api_requests(
        markdown,
        title,
        start_index=1,
        page_break_strategy=page_break_strategy,
        page_break_marker=page_break_marker,
    )
    requests = conversion["batchUpdateRequest"]["requests"]

    doc = await asyncio.to_thread(service.documents().create(body=conversion["createDocumentRequest"]).execute)
    doc_id = doc.get("documentId")

    if requests:
        await asyncio.to_thread(service.documents().batchUpdate(documentId=doc_id, body={"requests": requests}).execute)

    link = document_url(doc_id)
    msg = f"Created Google Doc '{title}' (ID: {doc_id}) with {len(requests)} request(s). Link: {link}"
    logger.info(f"Successfully created Google Doc '{title}' (ID: {doc_id}). Link: {link}")
    return DocumentCreationResult(
        success=True,
        document_id=doc_id,
        document_url=link,
        title=title,
        request_count=len(requests),
        message=msg,
    )


@handle_http_errors("insert_markdown")
async def insert_markdown(
    service: Any,
    document_id: str,
    markdown: str,
    start_index: int = 1,
    page_break_strategy: str = None,
    page_break_marker: str = None,
) -> str:
    """
    Converts Markdown and inserts it into an existing Google Doc.

    Args:
        service: Authenticated Google Docs API service
        document_id: ID of the document to update
        markdown: Markdown content to insert
        start_index: 1-based index where the content starts (e.g. a placeholder position)
        page_break_strategy: Optional "h1", "h2" or "custom"
        page_break_marker: Marker text for the "custom" strategy

    Returns:
        str: Confirmation message with request count and link
    """
    document_id = validate_non_empty_string(document_id, "document_id")
    logger.info(f"[insert_markdown] Doc={document_id}, start_index={start_index}")

    conversion = convert_markdown_to_api_requests(
        markdown,
        "",
        start_index=start_index,
        page_break_strategy=page_break_strategy,
        page_break_marker=page_break_marker,
    )
    requests = conversion["batchUpdateRequest"]["requests"]
    link = document_url(document_id)

    if not requests:
        return f"No content to insert into document {document_id}. Link: {link}"

    await asyncio.to_thread(
        service.documents().batchUpdate(documentId=document_id, body={"requests": requests}).execute
    )

    logger.info(f"[insert_markdown] Applied {len(requests)} request(s) to {document_id}")
    return f"Inserted Markdown ({len(requests)} request(s)) at index {start_index} in document {document_id}. Link: {link}"
