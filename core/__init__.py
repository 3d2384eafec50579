"""Core utilities for Markdown to Google Docs conversion."""

from core.config import ConverterConfig, get_converter_config, reload_converter_config
from core.errors import (
    APIError,
    AuthenticationError,
    ConversionError,
    ImageValidationError,
    MarkdownDocsError,
    PermissionDeniedError,
    RateLimitError,
    ResourceNotFoundError,
    TableConstructionError,
    ValidationError,
)
from core.utils import handle_http_errors, validate_choice, validate_non_empty_string, validate_positive_int

__all__ = [
    "APIError",
    "AuthenticationError",
    "ConversionError",
    "ConverterConfig",
    "get_converter_config",
    "handle_http_errors",
    "ImageValidationError",
    "MarkdownDocsError",
    "PermissionDeniedError",
    "RateLimitError",
    "reload_converter_config",
    "ResourceNotFoundError",
    "TableConstructionError",
    "validate_choice",
    "validate_non_empty_string",
    "validate_positive_int",
    "ValidationError",
]
