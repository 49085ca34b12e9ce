"""Logging configuration for DMA Scan.

This module sets up logging with file rotation and a separate scan log
that records every scan summary and detection.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models import ClassificationResult

# Log format constants
DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DETAILED_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(filename)s:%(lineno)d | %(message)s"
SIMPLE_FORMAT = "%(levelname)s: %(message)s"
SCAN_FORMAT = "%(asctime)s | %(levelname)-8s | SCAN | %(message)s"

# Default settings
DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
DEFAULT_BACKUP_COUNT = 5


class DMAScanLogger:
    """Centralized logger management for DMA Scan.

    Manages two log files:
        - main.log: General application logging
        - scan.log: Scan summaries and detections
    """

    _instance: Optional["DMAScanLogger"] = None
    _initialized: bool = False

    def __new__(cls) -> "DMAScanLogger":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if self._initialized:
            return

        self.logs_dir: Path | None = None
        self.log_level: int = DEFAULT_LOG_LEVEL
        self.loggers: dict[str, logging.Logger] = {}
        self._initialized = True

    def setup(
        self,
        logs_dir: Path,
        log_level: int = DEFAULT_LOG_LEVEL,
        console_output: bool = True,
    ) -> None:
        """Initialize logging with specified configuration.

        Args:
            logs_dir: Directory for log files.
            log_level: Logging level (e.g., logging.INFO).
            console_output: Whether to also log to console.
        """
        self.logs_dir = logs_dir
        self.log_level = log_level

        logs_dir.mkdir(parents=True, exist_ok=True)

        root_logger = logging.getLogger("dmascan")
        root_logger.setLevel(log_level)
        self._close_handlers(root_logger)

        root_logger.addHandler(self._create_file_handler(logs_dir / "main.log", DETAILED_FORMAT))

        # Console output goes to stderr so JSON reports on stdout stay clean
        if console_output:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(log_level)
            console_handler.setFormatter(logging.Formatter(SIMPLE_FORMAT))
            root_logger.addHandler(console_handler)

        self.loggers["main"] = root_logger

        self._setup_scan_logger(logs_dir)

    def _close_handlers(self, logger: logging.Logger) -> None:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    def _create_file_handler(
        self,
        log_path: Path,
        format_string: str,
        max_bytes: int = DEFAULT_MAX_BYTES,
        backup_count: int = DEFAULT_BACKUP_COUNT,
    ) -> RotatingFileHandler:
        """Create a rotating file handler.

        Args:
            log_path: Path to the log file.
            format_string: Log format string.
            max_bytes: Maximum file size before rotation.
            backup_count: Number of backup files to keep.

        Returns:
            Configured RotatingFileHandler.
        """
        handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        handler.setLevel(self.log_level)
        handler.setFormatter(logging.Formatter(format_string))
        return handler

    def _setup_scan_logger(self, logs_dir: Path) -> None:
        """Setup the scan results logger."""
        logger = logging.getLogger("dmascan.scan")
        logger.setLevel(logging.INFO)
        logger.propagate = False  # Don't also log to main
        self._close_handlers(logger)

        handler = self._create_file_handler(logs_dir / "scan.log", SCAN_FORMAT)
        handler.setLevel(logging.INFO)
        logger.addHandler(handler)
        self.loggers["scan"] = logger

    def get_logger(self, name: str = "main") -> logging.Logger:
        """Get a logger by name.

        Args:
            name: Logger name ("main", "scan").

        Returns:
            The requested logger, or a child of the main logger.
        """
        if name in self.loggers:
            return self.loggers[name]

        if name == "main":
            return logging.getLogger("dmascan")
        return logging.getLogger(f"dmascan.{name}")


# Global logger instance
_logger_manager = DMAScanLogger()


def setup_logging(
    logs_dir: Path,
    log_level: int = DEFAULT_LOG_LEVEL,
    console_output: bool = True,
) -> None:
    """Initialize the logging system.

    This should be called once at application startup.

    Args:
        logs_dir: Directory for log files.
        log_level: Logging level (default: INFO).
        console_output: Whether to also log to console (default: True).
    """
    _logger_manager.setup(logs_dir, log_level, console_output)


def get_logger(name: str = "main") -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name. Options:
            - "main": General application logging
            - "scan": Scan results logging

    Returns:
        Logger instance.
    """
    return _logger_manager.get_logger(name)


def log_scan_result(
    source_name: str,
    device_count: int,
    suspicious_count: int,
    duration_ms: float,
) -> None:
    """Log a completed scan.

    Args:
        source_name: Name of the device source.
        device_count: Number of devices enumerated.
        suspicious_count: Number of suspicious devices.
        duration_ms: Scan duration in milliseconds.
    """
    logger = get_logger("scan")
    logger.info(
        f"{source_name} | Scanned {device_count} devices, "
        f"{suspicious_count} suspicious in {duration_ms:.1f}ms"
    )


def log_enumeration_failure(source_name: str, error: str) -> None:
    """Log a scan that could not enumerate devices."""
    get_logger("scan").error(f"{source_name} | Enumeration failed | {error}")


def log_detection(result: "ClassificationResult") -> None:
    """Log one suspicious device.

    Args:
        result: The classification result to record.
    """
    logger = get_logger("scan")
    logger.warning(
        f"{result.category_name} | {result.device.description or '<no description>'} | "
        f"{result.matched_field.value}={result.matched_pattern} | "
        f"{result.device.joined_hardware_ids}"
    )
