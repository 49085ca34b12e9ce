"""Signature Catalog - Ordered device signature categories.

This module builds the catalog of signature categories used to classify
enumerated devices. Categories are tried in catalog order and the first
match wins, so device-specific categories come before generic bus/class
categories.
"""

import json
import logging
from collections.abc import Iterable, Iterator
from datetime import datetime
from pathlib import Path
from typing import Any

from dmascan.core.models import SignatureCategory

logger = logging.getLogger("dmascan.classification.signatures")

CATALOG_VERSION = "1.0.0"

# Default catalog, highest priority first
DEFAULT_SIGNATURES: list[dict[str, Any]] = [
    {
        "name": "KMBOX-pattern",
        "description": "Hardware keyboard/mouse injection box",
        "reason": "[$] KMBox pattern detected",
        "patterns": [
            "VID_1A2C&PID_2124",
            "VID_1A2C&PID_21",
            "VID_1A86&PID_E026",
            "KMBOX",
            "KEYBOARD_MOUSE_BOX",
        ],
    },
    {
        "name": "Fuzer-pattern",
        "description": "Flashable microcontroller board posing as a HID device",
        "reason": "[$] Fuzer pattern detected",
        "patterns": [
            "VID_0483&PID_5750",
            "VID_0483&PID_5740",
            "FUZER",
            "STM32",
            "DFU_INTERFACE",
        ],
    },
    {
        "name": "DMA-capable",
        "description": "generic DMA/PCI class",
        "reason": "[$] DMA-capable device detected",
        "patterns": [
            "PCI\\CC_0800",
            "PCI\\CC_0880",
            "THUNDERBOLT",
            "PCIEXPRESS",
            "FPGA",
            "ACCELE",
            "SYSTEM_PERIPHERAL",
        ],
    },
]


def parse_category(data: dict[str, Any]) -> SignatureCategory:
    """Parse a category dictionary into a SignatureCategory.

    Args:
        data: Raw category data.

    Returns:
        Parsed SignatureCategory.

    Raises:
        ValueError: If the category has no name or malformed patterns.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Category must be an object, got {type(data).__name__}")

    name = data.get("name", "")
    if not isinstance(name, str) or not name.strip():
        raise ValueError("Category is missing a name")

    patterns = data.get("patterns", [])
    if isinstance(patterns, str) or not isinstance(patterns, list):
        raise ValueError(f"Category '{name}': patterns must be a list of strings")
    if not all(isinstance(p, str) for p in patterns):
        raise ValueError(f"Category '{name}': patterns must be a list of strings")

    return SignatureCategory(
        name=name.strip(),
        patterns=tuple(p for p in patterns if p),
        reason=data.get("reason") or f"[$] {name.strip()} detected",
        description=data.get("description", "") or "",
    )


class SignatureCatalog:
    """Ordered, read-only collection of signature categories.

    Example:
        catalog = create_default_catalog()
        for category in catalog.categories():
            print(category.name, len(category.patterns))
    """

    def __init__(
        self,
        categories: Iterable[SignatureCategory] = (),
        version: str = CATALOG_VERSION,
    ) -> None:
        """Initialize the catalog.

        Args:
            categories: Categories in priority order.
            version: Catalog version string.

        Raises:
            ValueError: If two categories share a name.
        """
        self._categories = tuple(categories)
        self.version = version

        names = [c.name for c in self._categories]
        duplicates = {n for n in names if names.count(n) > 1}
        if duplicates:
            raise ValueError(f"Duplicate category names: {sorted(duplicates)}")

    def categories(self) -> tuple[SignatureCategory, ...]:
        """Get all categories in priority order."""
        return self._categories

    def get_category(self, name: str) -> SignatureCategory | None:
        """Get a category by name.

        Args:
            name: Category name.

        Returns:
            SignatureCategory if found, None otherwise.
        """
        for category in self._categories:
            if category.name == name:
                return category
        return None

    def merged_with(self, other: "SignatureCatalog") -> "SignatureCatalog":
        """Create a new catalog with another catalog's categories applied.

        Categories whose name already exists replace the existing entry in
        place, keeping its priority. New categories are appended after all
        existing ones.

        Args:
            other: Catalog to merge on top of this one.

        Returns:
            The merged catalog. Neither input is modified.
        """
        merged = list(self._categories)
        positions = {c.name: i for i, c in enumerate(merged)}

        for category in other.categories():
            if category.name in positions:
                merged[positions[category.name]] = category
            else:
                positions[category.name] = len(merged)
                merged.append(category)

        return SignatureCatalog(merged, version=other.version or self.version)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | list[Any]) -> "SignatureCatalog":
        """Create a catalog from parsed JSON data.

        Accepts either a bare list of categories or an object with a
        ``categories`` key and an optional ``version``.

        Raises:
            ValueError: If the data is not a valid catalog.
        """
        if isinstance(data, list):
            categories_data = data
            version = CATALOG_VERSION
        elif isinstance(data, dict):
            categories_data = data.get("categories", [])
            version = str(data.get("version", CATALOG_VERSION))
            if not isinstance(categories_data, list):
                raise ValueError("'categories' must be a list")
        else:
            raise ValueError("Invalid signature catalog format")

        return cls([parse_category(c) for c in categories_data], version=version)

    def to_dict(self) -> dict[str, Any]:
        """Convert the catalog to a dictionary for JSON serialization."""
        return {
            "version": self.version,
            "categories": [c.to_dict() for c in self._categories],
        }

    def export_to_file(self, file_path: Path) -> None:
        """Export the catalog to a JSON file.

        Args:
            file_path: Path to write to.
        """
        output = self.to_dict()
        output["generated"] = datetime.now().isoformat()

        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(json.dumps(output, indent=2), encoding="utf-8")

    @property
    def pattern_count(self) -> int:
        """Get total number of patterns across all categories."""
        return sum(len(c.patterns) for c in self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def __iter__(self) -> Iterator[SignatureCategory]:
        return iter(self._categories)


def create_default_catalog() -> SignatureCatalog:
    """Build the built-in signature catalog.

    Returns:
        SignatureCatalog with the default categories.
    """
    return SignatureCatalog.from_dict({"version": CATALOG_VERSION, "categories": DEFAULT_SIGNATURES})


def load_catalog_file(file_path: Path) -> SignatureCatalog:
    """Load a signature catalog from a JSON file.

    Args:
        file_path: Path to the catalog JSON file.

    Returns:
        The loaded SignatureCatalog.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If the file is not valid JSON or not a valid catalog.
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Signature file not found: {file_path}")

    content = file_path.read_text(encoding="utf-8")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in signature file: {e}") from e

    try:
        catalog = SignatureCatalog.from_dict(data)
    except ValueError as e:
        raise ValueError(f"Invalid signature file {file_path}: {e}") from e

    logger.info(
        f"Loaded {len(catalog)} categories ({catalog.pattern_count} patterns) "
        f"from {file_path} (version: {catalog.version})"
    )
    return catalog


def load_catalog(
    paths: Iterable[Path] = (),
    base: SignatureCatalog | None = None,
) -> SignatureCatalog:
    """Build a catalog from the defaults plus any extra catalog files.

    Args:
        paths: Catalog files or directories of ``*.json`` files, applied in order.
        base: Catalog to start from. Defaults to the built-in catalog.

    Returns:
        The merged catalog.

    Raises:
        FileNotFoundError: If a listed file doesn't exist.
        ValueError: If a listed file is invalid.
    """
    catalog = base if base is not None else create_default_catalog()

    for path in paths:
        files = sorted(path.glob("*.json")) if path.is_dir() else [path]
        for file_path in files:
            catalog = catalog.merged_with(load_catalog_file(file_path))

    logger.debug(f"Signature catalog ready: {[c.name for c in catalog]}")
    return catalog
