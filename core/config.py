"""
Converter Configuration Management.

Provides a single source of truth for conversion defaults that the hosting
environment may override through environment variables:

- MD2DOCS_OUTPUT_FORMAT: default packaging mode ("single" or "multiple")
- MD2DOCS_PAGE_BREAK_STRATEGY: default page break strategy ("h1", "h2", "custom")
- MD2DOCS_PAGE_BREAK_MARKER: default marker for the "custom" strategy
- MD2DOCS_START_INDEX: default insertion index (1-based)
- MD2DOCS_LOG_LEVEL: log level applied to the `gdocs` logger
"""

import logging
import os

OUTPUT_FORMATS = ("single", "multiple")
PAGE_BREAK_STRATEGIES = ("h1", "h2", "custom")
DEFAULT_PAGE_BREAK_MARKER = "<!-- pagebreak -->"


class ConverterConfig:
    """
    Centralized conversion configuration.

    Values are read once from the environment when the instance is created.
    Use `reload_converter_config()` after changing environment variables.
    """

    def __init__(self):
        self.output_format = os.getenv("MD2DOCS_OUTPUT_FORMAT", "single").strip().lower()
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"MD2DOCS_OUTPUT_FORMAT must be one of {OUTPUT_FORMATS}, got '{self.output_format}'")

        strategy = os.getenv("MD2DOCS_PAGE_BREAK_STRATEGY", "").strip().lower()
        self.page_break_strategy = strategy or None
        if self.page_break_strategy is not None and self.page_break_strategy not in PAGE_BREAK_STRATEGIES:
            raise ValueError(
                f"MD2DOCS_PAGE_BREAK_STRATEGY must be one of {PAGE_BREAK_STRATEGIES}, got '{self.page_break_strategy}'"
            )

        self.page_break_marker = os.getenv("MD2DOCS_PAGE_BREAK_MARKER") or DEFAULT_PAGE_BREAK_MARKER

        raw_start_index = os.getenv("MD2DOCS_START_INDEX", "1")
        try:
            self.start_index = int(raw_start_index)
        except ValueError as e:
            raise ValueError(f"MD2DOCS_START_INDEX must be an integer, got '{raw_start_index}'") from e
        if self.start_index < 1:
            raise ValueError("MD2DOCS_START_INDEX must be >= 1")

        self.log_level = os.getenv("MD2DOCS_LOG_LEVEL", "").strip().upper() or None
        if self.log_level is not None and not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"MD2DOCS_LOG_LEVEL is not a valid logging level: '{self.log_level}'")

    def apply_log_level(self) -> None:
        """Apply the configured log level to the `gdocs` logger, if one is set."""
        if self.log_level:
            logging.getLogger("gdocs").setLevel(self.log_level)

    def to_dict(self) -> dict:
        return {
            "output_format": self.output_format,
            "page_break_strategy": self.page_break_strategy,
            "page_break_marker": self.page_break_marker,
            "start_index": self.start_index,
            "log_level": self.log_level,
        }


_converter_config: ConverterConfig | None = None


def get_converter_config() -> ConverterConfig:
    """
    Get the global converter configuration instance.

    Returns:
        The singleton converter configuration instance
    """
    global _converter_config
    if _converter_config is None:
        _converter_config = ConverterConfig()
        _converter_config.apply_log_level()
    return _converter_config


def reload_converter_config() -> ConverterConfig:
    """
    Reload the converter configuration from environment variables.

    This is useful for testing or when environment variables change.

    Returns:
        The reloaded converter configuration instance
    """
    global _converter_config
    _converter_config = ConverterConfig()
    _converter_config.apply_log_level()
    return _converter_config
