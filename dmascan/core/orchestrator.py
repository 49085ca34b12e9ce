"""Scan Orchestrator - drives a device source through the classifier.

The orchestrator is responsible for:
- Opening, draining and closing the device source
- Classifying every enumerated device
- Assembling results in enumeration order
- Reporting enumeration failures separately from clean scans
"""

import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

from dmascan.classification.engine import classify
from dmascan.classification.signatures import SignatureCatalog, load_catalog
from dmascan.discovery import BaseDeviceSource, create_default_source

from .config import Config
from .logging_config import get_logger, log_detection, log_enumeration_failure, log_scan_result
from .models import ClassificationResult, DeviceRecord, ScanReport, SignatureCategory

logger = get_logger("orchestrator")


def scan(
    source: BaseDeviceSource,
    catalog: SignatureCatalog,
    max_workers: int = 1,
) -> ScanReport:
    """Scan every device from a source against a catalog.

    The source is drained on the calling thread. With ``max_workers`` above
    one, classification runs on a thread pool; results still come back in
    enumeration order.

    Args:
        source: Device source to enumerate.
        catalog: Signature catalog to classify against.
        max_workers: Number of classification threads.

    Returns:
        ScanReport with suspicious devices in enumeration order, or with
        ``enumeration_failed`` set and no results if the source failed.
    """
    report = ScanReport(started_at=datetime.now())
    start_time = time.perf_counter()
    source_name = source.get_source_name()

    try:
        with source.enumerate() as device_iter:
            devices = list(device_iter)
    except OSError as e:
        # EnumerationUnavailable, or a platform PermissionError/OSError
        logger.error(f"Device enumeration failed ({source_name}): {e}")
        log_enumeration_failure(source_name, str(e))
        report.enumeration_failed = True
        report.error = str(e) or "Device enumeration failed"
        report.scan_time_ms = (time.perf_counter() - start_time) * 1000
        report.completed_at = datetime.now()
        return report

    categories = catalog.categories()
    logger.info(f"Classifying {len(devices)} devices against {len(categories)} categories")

    report.results = _classify_all(devices, categories, max_workers)
    report.devices_scanned = len(devices)
    report.scan_time_ms = (time.perf_counter() - start_time) * 1000
    report.completed_at = datetime.now()

    for result in report.results:
        log_detection(result)
    log_scan_result(
        source.get_source_name(),
        report.devices_scanned,
        report.suspicious_count,
        report.scan_time_ms,
    )

    return report


def _classify_all(
    devices: list[DeviceRecord],
    categories: tuple[SignatureCategory, ...],
    max_workers: int,
) -> list[ClassificationResult]:
    if max_workers > 1 and len(devices) > 1:
        # Executor.map yields in input order regardless of completion order
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            verdicts = list(executor.map(lambda d: classify(d, categories), devices))
    else:
        verdicts = [classify(device, categories) for device in devices]

    return [v for v in verdicts if v is not None]


class ScanOrchestrator:
    """Builds the device source and catalog from configuration and runs scans.

    Example:
        orchestrator = ScanOrchestrator(config)
        report = orchestrator.run_scan()
        if report.enumeration_failed:
            print(f"Scan could not run: {report.error}")
        else:
            print(f"Found {report.suspicious_count} suspicious devices")
    """

    def __init__(
        self,
        config: Config,
        source: BaseDeviceSource | None = None,
        catalog: SignatureCatalog | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            config: Application configuration.
            source: Device source. Defaults to the platform source from config.
            catalog: Signature catalog. Defaults to the built-in catalog merged
                with the configured signature files.

        Raises:
            FileNotFoundError: If a configured signature file is missing.
            ValueError: If a signature file or the source name is invalid.
        """
        self.config = config
        self.source = source if source is not None else self._create_source()
        self.catalog = catalog if catalog is not None else load_catalog(config.signature_paths())

    def _create_source(self) -> BaseDeviceSource:
        scan_config = self.config.scan
        return create_default_source(
            source=scan_config.source,
            command_timeout_seconds=scan_config.command_timeout_seconds,
            include_usb=scan_config.include_usb,
            include_pci=scan_config.include_pci,
        )

    def run_scan(self) -> ScanReport:
        """Run one complete scan.

        Returns:
            ScanReport for this run.
        """
        logger.info(f"Starting device scan via {self.source.get_source_name()}")
        report = scan(self.source, self.catalog, max_workers=self.config.scan.max_workers)

        if not report.enumeration_failed:
            logger.info(
                f"Scan complete: {report.suspicious_count} suspicious of "
                f"{report.devices_scanned} devices in {report.scan_time_ms:.1f}ms"
            )
        return report

    def list_devices(self) -> list[DeviceRecord]:
        """Enumerate every device without classifying.

        Returns:
            All devices in enumeration order.

        Raises:
            EnumerationUnavailable: If the source cannot be enumerated.
        """
        with self.source.enumerate() as device_iter:
            return list(device_iter)
