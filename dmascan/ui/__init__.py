"""User interface modules.

This package contains the command-line interface with its formatters
and command handlers.
"""

from .cli import (
    JsonFormatter,
    OutputFormatter,
    TextFormatter,
    format_device_list,
    format_report,
)

__all__ = [
    # CLI Formatters
    "OutputFormatter",
    "TextFormatter",
    "JsonFormatter",
    "format_report",
    "format_device_list",
]
