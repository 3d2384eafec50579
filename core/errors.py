"""
Custom error types for Markdown to Google Docs conversion.

Provides a small exception hierarchy for input validation, local conversion
failures and remote API errors surfaced by the submission adapter.
"""

# =============================================================================
# Base Exception Hierarchy
# =============================================================================


class MarkdownDocsError(Exception):
    """Base exception for all Markdown to Google Docs errors."""

    pass


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(MarkdownDocsError):
    """Raised when input validation fails."""

    pass


# =============================================================================
# Conversion Errors
# =============================================================================


class ConversionError(MarkdownDocsError):
    """Raised when a block cannot be converted into Docs requests."""

    pass


class TableConstructionError(ConversionError):
    """Raised when a table grid cannot be laid out with the cell index scheme."""

    def __init__(self, reason: str, rows: int = 0, columns: int = 0):
        super().__init__(f"Cannot build {rows}x{columns} table: {reason}")
        self.reason = reason
        self.rows = rows
        self.columns = columns


class ImageValidationError(ConversionError):
    """Raised when an image source cannot be inserted as an inline image."""

    def __init__(self, src: str, reason: str):
        super().__init__(f"Invalid image source {src!r}: {reason}")
        self.src = src
        self.reason = reason


# =============================================================================
# API Errors
# =============================================================================


class APIError(MarkdownDocsError):
    """Raised for general Google API errors."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(APIError):
    """Raised when credentials are rejected by the API (401)."""

    pass


class PermissionDeniedError(APIError):
    """Raised when the user lacks permission for an operation (403)."""

    pass


class ResourceNotFoundError(APIError):
    """Raised when a requested resource doesn't exist (404)."""

    pass


class RateLimitError(APIError):
    """Raised when API rate limits are exceeded (429)."""

    pass
