"""Output formatters for CLI output.

This module provides formatters for displaying scan reports, device
inventories and the signature catalog as text or JSON.
"""

import json
import sys
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from dmascan.classification.signatures import SignatureCatalog
from dmascan.core.models import ClassificationResult, DeviceRecord, ScanReport

RULE = "-" * 40

BANNER = " DMA Scanning Application"


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    # Status colors
    SUCCESS = "\033[92m"  # Green
    FAILURE = "\033[91m"  # Red
    WARNING = "\033[93m"  # Yellow
    INFO = "\033[94m"  # Blue

    @classmethod
    def is_supported(cls) -> bool:
        """Check if terminal supports colors."""
        return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def colorize(text: str, color: str, force: bool = False) -> str:
    """Apply color to text if supported.

    Args:
        text: Text to colorize
        color: ANSI color code
        force: Force color even if not supported

    Returns:
        Colored text or plain text
    """
    if force or Colors.is_supported():
        return f"{color}{text}{Colors.RESET}"
    return text


class OutputFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def format_result(self, result: ClassificationResult) -> str:
        """Format a single suspicious device."""
        pass

    @abstractmethod
    def format_report(self, report: ScanReport) -> str:
        """Format a complete scan report."""
        pass

    @abstractmethod
    def format_device_list(self, devices: list[DeviceRecord]) -> str:
        """Format an enumerated device inventory."""
        pass

    @abstractmethod
    def format_catalog(self, catalog: SignatureCatalog) -> str:
        """Format the signature catalog."""
        pass


class TextFormatter(OutputFormatter):
    """Plain text formatter with optional colors."""

    def __init__(self, use_colors: bool = True, verbose: bool = False):
        """Initialize the text formatter.

        Args:
            use_colors: Whether to use ANSI colors
            verbose: Whether to show matched pattern and instance path
        """
        self.use_colors = use_colors and Colors.is_supported()
        self.verbose = verbose

    def _colorize(self, text: str, color: str) -> str:
        """Apply color if enabled."""
        if self.use_colors:
            return colorize(text, color, force=True)
        return text

    def format_result(self, result: ClassificationResult) -> str:
        """Format a single suspicious device."""
        device = result.device
        lines = [
            f"Device: {device.description}",
            f"Reason: {self._colorize(result.reason_text, Colors.WARNING)}",
            f"Hardware IDs: {device.joined_hardware_ids}",
        ]

        if self.verbose:
            lines.append(f"Matched: {result.matched_pattern} ({result.matched_field.value})")
            if device.instance_id:
                lines.append(f"Instance: {device.instance_id}")

        return "\n".join(lines)

    def format_report(self, report: ScanReport) -> str:
        """Format a complete scan report."""
        if report.enumeration_failed:
            message = f"Device enumeration failed: {report.error}"
            return "\n".join([
                self._colorize(message, Colors.FAILURE),
                "The scan could not run; no devices were checked.",
            ])

        lines = [
            "Scan completed.",
            f"Found {report.suspicious_count} suspicious devices:",
            RULE,
        ]

        for result in report.results:
            lines.append(self.format_result(result))
            lines.append(RULE)

        if report.is_clean:
            lines.append(self._colorize("No suspicious devices detected.", Colors.SUCCESS))

        if self.verbose:
            lines.append(
                f"Scanned {report.devices_scanned} devices in {report.scan_time_ms:.1f}ms"
            )

        return "\n".join(lines)

    def format_device_list(self, devices: list[DeviceRecord]) -> str:
        """Format an enumerated device inventory."""
        if not devices:
            return "No devices found."

        lines = []
        for device in devices:
            lines.append(self._colorize(device.description or "<no description>", Colors.BOLD))
            lines.append(f"  Hardware IDs: {device.joined_hardware_ids or '<none>'}")
            if device.instance_id:
                lines.append(f"  Instance: {device.instance_id}")

        lines.append(RULE)
        lines.append(f"Total: {len(devices)} devices")
        return "\n".join(lines)

    def format_catalog(self, catalog: SignatureCatalog) -> str:
        """Format the signature catalog in priority order."""
        lines = [f"Signature catalog version {catalog.version}", RULE]

        for priority, category in enumerate(catalog.categories(), start=1):
            title = self._colorize(f"{priority}. {category.name}", Colors.BOLD)
            lines.append(title)
            if category.description:
                lines.append(f"  {category.description}")
            lines.append(f"  Reason: {category.reason}")
            for pattern in category.patterns:
                lines.append(f"    {pattern}")

        lines.append(RULE)
        lines.append(f"Total: {len(catalog)} categories, {catalog.pattern_count} patterns")
        return "\n".join(lines)


class JsonFormatter(OutputFormatter):
    """JSON output formatter."""

    def __init__(self, indent: int = 2, compact: bool = False):
        """Initialize the JSON formatter.

        Args:
            indent: Indentation level
            compact: Whether to use compact output
        """
        self.indent = None if compact else indent

    def _serialize(self, obj: Any) -> Any:
        """Serialize an object for JSON output."""
        if isinstance(obj, datetime):
            return obj.isoformat()
        if hasattr(obj, "value"):  # Enum
            return obj.value
        return str(obj)

    def _dumps(self, data: Any) -> str:
        return json.dumps(data, indent=self.indent, default=self._serialize)

    def format_result(self, result: ClassificationResult) -> str:
        """Format a single suspicious device as JSON."""
        return self._dumps(result.to_dict())

    def format_report(self, report: ScanReport) -> str:
        """Format a complete scan report as JSON."""
        return self._dumps(report.to_dict())

    def format_device_list(self, devices: list[DeviceRecord]) -> str:
        """Format a device inventory as JSON, readable by JsonDeviceSource."""
        data = {
            "count": len(devices),
            "devices": [d.to_dict() for d in devices],
        }
        return self._dumps(data)

    def format_catalog(self, catalog: SignatureCatalog) -> str:
        """Format the signature catalog as JSON."""
        return self._dumps(catalog.to_dict())


def get_formatter(as_json: bool = False, use_colors: bool = True, verbose: bool = False) -> OutputFormatter:
    """Get the formatter for the requested output mode."""
    if as_json:
        return JsonFormatter()
    return TextFormatter(use_colors=use_colors, verbose=verbose)


def format_report(report: ScanReport, as_json: bool = False) -> str:
    """Format a scan report.

    Args:
        report: Report to format
        as_json: Whether to output JSON

    Returns:
        Formatted string
    """
    return get_formatter(as_json).format_report(report)


def format_device_list(devices: list[DeviceRecord], as_json: bool = False) -> str:
    """Format a device inventory.

    Args:
        devices: Devices to format
        as_json: Whether to output JSON

    Returns:
        Formatted string
    """
    return get_formatter(as_json).format_device_list(devices)
