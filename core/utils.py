import functools
import logging

from googleapiclient.errors import HttpError

from core.errors import (
    APIError,
    AuthenticationError,
    MarkdownDocsError,
    PermissionDeniedError,
    RateLimitError,
    ResourceNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Remediation hints shown with remote API failures, keyed by HTTP status
REMEDIATION_HINTS: dict[int, str] = {
    400: "The request batch was rejected. Check the generated requests for invalid indices.",
    401: "Please reconnect your Google OAuth2 credentials or check if they have expired.",
    403: (
        "Check that the Google Docs API is enabled and that the credentials carry the "
        "https://www.googleapis.com/auth/documents scope."
    ),
    404: "The document may not exist or you don't have access to it.",
    429: "Rate limit exceeded. Please wait and try again.",
}

_STATUS_ERRORS: dict[int, type[APIError]] = {
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: ResourceNotFoundError,
    429: RateLimitError,
}


def validate_positive_int(value: int, param_name: str, max_value: int | None = None) -> int:
    """Validate a positive integer."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"{param_name} must be a positive integer")

    if max_value is not None and value > max_value:
        raise ValidationError(f"{param_name} cannot exceed {max_value}")

    return value


def validate_choice(value: str, param_name: str, choices: tuple[str, ...]) -> str:
    """Validate that a string is one of the allowed choices (case-insensitive)."""
    if not isinstance(value, str):
        raise ValidationError(f"{param_name} must be a string")

    normalized = value.strip().lower()
    if normalized not in choices:
        raise ValidationError(f"{param_name} must be one of {', '.join(choices)}; got '{value}'")

    return normalized


def validate_non_empty_string(value: str, param_name: str) -> str:
    """Validate a required, non-blank string without altering it."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{param_name} is required")

    return value


def format_api_error(operation: str, status_code: int | None, detail: str) -> str:
    """Build the single user-facing message for a failed API call."""
    message = f"API error in {operation}: {detail} (Status: {status_code if status_code is not None else 'Unknown'})"
    hint = REMEDIATION_HINTS.get(status_code) if status_code is not None else None
    if hint:
        message = f"{message}. {hint}"
    return message


def handle_http_errors(operation: str):
    """
    A decorator to handle Google API HttpErrors in a standardized way.

    It wraps an async submission function, catches HttpError, logs a detailed
    error message and raises an APIError subclass carrying the HTTP status code
    and a remediation hint. Library errors (MarkdownDocsError) pass through.

    Args:
        operation (str): The name of the operation being decorated (e.g., 'insert_markdown').
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except HttpError as error:
                status_code = getattr(error.resp, "status", None)
                try:
                    status_code = int(status_code) if status_code is not None else None
                except (TypeError, ValueError):
                    status_code = None

                message = format_api_error(operation, status_code, str(error))
                logger.error(f"API error in {operation}: {error}", exc_info=True)
                error_cls = _STATUS_ERRORS.get(status_code, APIError)
                raise error_cls(message, status_code=status_code) from error
            except MarkdownDocsError:
                raise
            except Exception as e:
                message = f"An unexpected error occurred in {operation}: {e}"
                logger.exception(message)
                raise APIError(message) from e

        return wrapper

    return decorator
