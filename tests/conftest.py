"""Shared pytest fixtures for markdown-gdocs tests."""

from unittest.mock import MagicMock

import pytest

from core.config import reload_converter_config
from gdocs.markdown_parser import MarkdownToDocsConverter

CONFIG_ENV_VARS = (
    "MD2DOCS_OUTPUT_FORMAT",
    "MD2DOCS_PAGE_BREAK_STRATEGY",
    "MD2DOCS_PAGE_BREAK_MARKER",
    "MD2DOCS_START_INDEX",
    "MD2DOCS_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_converter_config(monkeypatch):
    """Run every test against the default configuration."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reload_converter_config()
    yield
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reload_converter_config()


@pytest.fixture
def converter():
    """Create a fresh MarkdownToDocsConverter instance."""
    return MarkdownToDocsConverter()


@pytest.fixture
def mock_docs_service():
    """Create a mock Google Docs service."""
    service = MagicMock()
    service.documents.return_value.create.return_value.execute.return_value = {
        "documentId": "doc123",
        "title": "Test Doc",
    }
    service.documents.return_value.batchUpdate.return_value.execute.return_value = {
        "documentId": "doc123",
        "replies": [],
    }
    return service


@pytest.fixture
def env_override(monkeypatch):
    """Helper to override environment variables."""

    def _override(**kwargs):
        for key, value in kwargs.items():
            if value is None:
                monkeypatch.delenv(key, raising=False)
            else:
                monkeypatch.setenv(key, value)

    return _override
