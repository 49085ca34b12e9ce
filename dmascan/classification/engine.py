"""Classification Engine - Per-device signature evaluation.

A device is evaluated against the catalog categories in priority order.
The first category whose patterns appear in either the joined hardware IDs
or the description decides the verdict, so a device is reported under one
category only.
"""

import logging
from collections.abc import Iterable

from dmascan.classification.matching import find_match
from dmascan.classification.signatures import SignatureCatalog, create_default_catalog
from dmascan.core.models import (
    ClassificationResult,
    DeviceRecord,
    MatchField,
    SignatureCategory,
)

logger = logging.getLogger("dmascan.classification.engine")


def classify(
    device: DeviceRecord,
    catalog: Iterable[SignatureCategory],
) -> ClassificationResult | None:
    """Classify a single device.

    Args:
        device: Device to evaluate.
        catalog: Categories in priority order (a SignatureCatalog or any
            ordered iterable of categories).

    Returns:
        ClassificationResult for the first matching category, or None if
        the device matches nothing.
    """
    if device.is_empty:
        return None

    hardware_text = device.joined_hardware_ids

    for category in catalog:
        pattern = find_match(hardware_text, category.patterns)
        matched_field = MatchField.HARDWARE_ID

        if pattern is None:
            pattern = find_match(device.description, category.patterns)
            matched_field = MatchField.DESCRIPTION

        if pattern is not None:
            return ClassificationResult(
                device=device,
                category=category,
                reason_text=category.reason,
                matched_field=matched_field,
                matched_pattern=pattern,
            )

    return None


class Classifier:
    """Classifier bound to one signature catalog.

    Example:
        classifier = Classifier(create_default_catalog())
        result = classifier.classify(device)
        if result:
            print(f"{result.reason_text}: {device.description}")
    """

    def __init__(self, catalog: SignatureCatalog | None = None) -> None:
        """Initialize the classifier.

        Args:
            catalog: Catalog to classify against. Defaults to the built-in catalog.
        """
        self.catalog = catalog if catalog is not None else create_default_catalog()

    def classify(self, device: DeviceRecord) -> ClassificationResult | None:
        """Classify a device against this classifier's catalog."""
        result = classify(device, self.catalog.categories())
        if result is not None:
            logger.debug(
                f"{device.description or device.joined_hardware_ids!r} matched "
                f"{result.category_name} on {result.matched_field.value} "
                f"pattern {result.matched_pattern!r}"
            )
        return result

    def classify_batch(self, devices: Iterable[DeviceRecord]) -> list[ClassificationResult]:
        """Classify multiple devices.

        Args:
            devices: Devices to classify.

        Returns:
            Results for the suspicious devices, in input order.
        """
        results = []
        for device in devices:
            result = self.classify(device)
            if result is not None:
                results.append(result)
        return results
