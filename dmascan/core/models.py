"""Core data models for DMA Scan.

This module defines the device records produced by device sources, the
signature categories held by the catalog, and the results produced by
classification and scanning.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

logger = logging.getLogger("dmascan.core.models")


class MatchField(Enum):
    """Which part of a device's identifying text produced a match."""

    HARDWARE_ID = "hardware_id"
    DESCRIPTION = "description"


@dataclass(frozen=True)
class DeviceRecord:
    """A single enumerated device.

    Attributes:
        hardware_ids: Ordered platform hardware ID strings (may be empty)
        description: Human-readable device description (may be empty)
        instance_id: Platform device instance path, for display only
    """

    hardware_ids: tuple[str, ...] = ()
    description: str = ""
    instance_id: str = ""

    @property
    def joined_hardware_ids(self) -> str:
        """Hardware IDs joined with semicolons, as shown in reports."""
        return ";".join(self.hardware_ids)

    @property
    def is_empty(self) -> bool:
        """Check whether the device carries no identifying text at all."""
        return not self.joined_hardware_ids and not self.description

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "hardware_ids": list(self.hardware_ids),
            "description": self.description,
            "instance_id": self.instance_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeviceRecord":
        """Create a device record from a dictionary.

        Missing, null or mistyped fields become empty. Hardware IDs may be
        given as a list or as a single semicolon-joined string.
        """
        raw_ids = data.get("hardware_ids") or ()
        if isinstance(raw_ids, str):
            raw_ids = raw_ids.split(";")
        elif not isinstance(raw_ids, (list, tuple)):
            logger.debug(f"Ignoring hardware_ids of type {type(raw_ids).__name__}")
            raw_ids = ()
        hardware_ids = tuple(hw_id for hw_id in raw_ids if isinstance(hw_id, str) and hw_id)

        return cls(
            hardware_ids=hardware_ids,
            description=_text_field(data, "description"),
            instance_id=_text_field(data, "instance_id"),
        )


def _text_field(data: dict[str, Any], name: str) -> str:
    value = data.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        logger.debug(f"Ignoring {name} of type {type(value).__name__}")
        return ""
    return value


@dataclass(frozen=True)
class SignatureCategory:
    """A named group of patterns sharing one detection reason.

    Attributes:
        name: Stable category identifier (e.g. "KMBOX-pattern")
        patterns: Substrings matched case-insensitively against device text
        reason: Human-facing explanation reported for matching devices
        description: What kind of hardware the category covers
    """

    name: str
    patterns: tuple[str, ...] = ()
    reason: str = ""
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "patterns": list(self.patterns),
            "reason": self.reason,
            "description": self.description,
        }


@dataclass(frozen=True)
class ClassificationResult:
    """A suspicious verdict for one device.

    Attributes:
        device: The device that matched
        category: The first catalog category that matched
        reason_text: Explanation taken from the category
        matched_field: Whether the hardware IDs or the description matched
        matched_pattern: The catalog pattern that was found
    """

    device: DeviceRecord
    category: SignatureCategory
    reason_text: str
    matched_field: MatchField
    matched_pattern: str

    @property
    def category_name(self) -> str:
        """Name of the matched category."""
        return self.category.name

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "device": self.device.to_dict(),
            "category": self.category.name,
            "reason": self.reason_text,
            "matched_field": self.matched_field.value,
            "matched_pattern": self.matched_pattern,
        }


@dataclass
class ScanReport:
    """Result of a complete device scan.

    Attributes:
        results: Suspicious devices, in enumeration order
        enumeration_failed: Whether the device source could not be enumerated
        error: Failure message when enumeration failed
        devices_scanned: Number of devices pulled from the source
        scan_time_ms: Total scan duration in milliseconds
        started_at: Scan start timestamp
        completed_at: Scan completion timestamp
    """

    results: list[ClassificationResult] = field(default_factory=list)
    enumeration_failed: bool = False
    error: str | None = None
    devices_scanned: int = 0
    scan_time_ms: float = 0.0
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: datetime | None = None

    @property
    def suspicious_count(self) -> int:
        """Get number of suspicious devices."""
        return len(self.results)

    @property
    def is_clean(self) -> bool:
        """True only when the scan ran and nothing matched."""
        return not self.enumeration_failed and not self.results

    def get_by_category(self, category_name: str) -> list[ClassificationResult]:
        """Get results for a specific category."""
        return [r for r in self.results if r.category_name == category_name]

    def get_summary(self) -> dict[str, int]:
        """Get count summary by category name."""
        summary: dict[str, int] = {}
        for result in self.results:
            summary[result.category_name] = summary.get(result.category_name, 0) + 1
        return summary

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "enumeration_failed": self.enumeration_failed,
            "error": self.error,
            "devices_scanned": self.devices_scanned,
            "suspicious_count": self.suspicious_count,
            "scan_time_ms": self.scan_time_ms,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "summary": self.get_summary(),
            "results": [r.to_dict() for r in self.results],
        }
