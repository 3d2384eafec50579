"""
Markdown to Google Docs

This package converts Markdown into Google Docs API batchUpdate requests and
submits them through a googleapiclient Docs service.
"""

from gdocs.markdown_parser import MarkdownToDocsConverter
from gdocs.output import convert_markdown_to_api_requests
from gdocs.writing import DocumentCreationResult, create_doc_from_markdown, insert_markdown

__all__ = [
    "MarkdownToDocsConverter",
    "convert_markdown_to_api_requests",
    "create_doc_from_markdown",
    "insert_markdown",
    "DocumentCreationResult",
]
