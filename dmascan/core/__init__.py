"""Core module - models, configuration, logging and orchestration."""

from .config import Config, ScanConfig, UIConfig, load_config, save_config
from .logging_config import setup_logging
from .models import (
    ClassificationResult,
    DeviceRecord,
    MatchField,
    ScanReport,
    SignatureCategory,
)

__all__ = [
    # Models
    "DeviceRecord",
    "SignatureCategory",
    "ClassificationResult",
    "MatchField",
    "ScanReport",
    # Config
    "Config",
    "ScanConfig",
    "UIConfig",
    "load_config",
    "save_config",
    "setup_logging",
]
