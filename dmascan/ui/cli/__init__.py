"""CLI module for DMA Scan."""

from .commands import (
    EXIT_CLEAN,
    EXIT_ENUMERATION_FAILED,
    EXIT_ERROR,
    EXIT_SUSPICIOUS,
    ask_consent,
    run_config_command,
    run_devices_command,
    run_scan_command,
    run_signatures_command,
)
from .formatters import (
    JsonFormatter,
    OutputFormatter,
    TextFormatter,
    format_device_list,
    format_report,
    get_formatter,
)

__all__ = [
    # Formatters
    "OutputFormatter",
    "TextFormatter",
    "JsonFormatter",
    "get_formatter",
    "format_report",
    "format_device_list",
    # Commands
    "ask_consent",
    "run_scan_command",
    "run_devices_command",
    "run_signatures_command",
    "run_config_command",
    "EXIT_CLEAN",
    "EXIT_SUSPICIOUS",
    "EXIT_ERROR",
    "EXIT_ENUMERATION_FAILED",
]
