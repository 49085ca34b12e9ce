"""Configuration management for DMA Scan.

This module handles loading, saving, and validating configuration
from JSON files and environment variables.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Default paths
DEFAULT_CONFIG_DIR = Path(os.environ.get("APPDATA", "~")) / "DMAScan"
DEFAULT_CONFIG_FILE = "config.json"
DEFAULT_SIGNATURES_DIR = "signatures"
DEFAULT_LOGS_DIR = "logs"


@dataclass
class ScanConfig:
    """Configuration for scanning behavior."""

    source: str = "auto"  # auto, wmi, powershell, udev
    max_workers: int = 1  # >1 classifies devices on a thread pool
    command_timeout_seconds: int = 60  # Timeout for the PowerShell fallback
    include_usb: bool = True
    include_pci: bool = True


@dataclass
class UIConfig:
    """Configuration for user interface."""

    require_consent: bool = True
    show_banner: bool = True
    use_colors: bool = True


@dataclass
class Config:
    """Main configuration container for DMA Scan.

    Attributes:
        config_dir: Base directory for all DMA Scan data
        signatures_dir: Directory of extra signature catalog files
        logs_dir: Directory for log files
        scan: Scanning configuration
        ui: UI configuration
        custom_signatures: List of custom signature file paths
    """

    config_dir: Path = field(default_factory=lambda: DEFAULT_CONFIG_DIR.expanduser())
    signatures_dir: Path = field(default_factory=lambda: Path(DEFAULT_SIGNATURES_DIR))
    logs_dir: Path = field(default_factory=lambda: Path(DEFAULT_LOGS_DIR))

    scan: ScanConfig = field(default_factory=ScanConfig)
    ui: UIConfig = field(default_factory=UIConfig)

    custom_signatures: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Resolve relative paths to absolute paths."""
        if not self.signatures_dir.is_absolute():
            self.signatures_dir = self.config_dir / self.signatures_dir
        if not self.logs_dir.is_absolute():
            self.logs_dir = self.config_dir / self.logs_dir

    def ensure_directories(self) -> None:
        """Create all required directories if they don't exist."""
        for directory in [
            self.config_dir,
            self.signatures_dir,
            self.logs_dir,
        ]:
            directory.mkdir(parents=True, exist_ok=True)

    def signature_paths(self) -> list[Path]:
        """Get the catalog sources to merge onto the built-in catalog.

        Returns:
            The signatures directory (when it exists) followed by each
            custom signature file, in order.
        """
        paths: list[Path] = []
        if self.signatures_dir.is_dir():
            paths.append(self.signatures_dir)
        paths.extend(Path(p) for p in self.custom_signatures)
        return paths

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary for JSON serialization."""
        return {
            "config_dir": str(self.config_dir),
            "signatures_dir": str(self.signatures_dir),
            "logs_dir": str(self.logs_dir),
            "scan": {
                "source": self.scan.source,
                "max_workers": self.scan.max_workers,
                "command_timeout_seconds": self.scan.command_timeout_seconds,
                "include_usb": self.scan.include_usb,
                "include_pci": self.scan.include_pci,
            },
            "ui": {
                "require_consent": self.ui.require_consent,
                "show_banner": self.ui.show_banner,
                "use_colors": self.ui.use_colors,
            },
            "custom_signatures": self.custom_signatures,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create configuration from dictionary."""
        config = cls()

        if "config_dir" in data:
            config.config_dir = Path(data["config_dir"])
        if "signatures_dir" in data:
            config.signatures_dir = Path(data["signatures_dir"])
        else:
            config.signatures_dir = Path(DEFAULT_SIGNATURES_DIR)
        if "logs_dir" in data:
            config.logs_dir = Path(data["logs_dir"])
        else:
            config.logs_dir = Path(DEFAULT_LOGS_DIR)

        # Load scan config
        if "scan" in data:
            scan_data = data["scan"]
            config.scan = ScanConfig(
                source=scan_data.get("source", "auto"),
                max_workers=max(1, int(scan_data.get("max_workers", 1))),
                command_timeout_seconds=scan_data.get("command_timeout_seconds", 60),
                include_usb=scan_data.get("include_usb", True),
                include_pci=scan_data.get("include_pci", True),
            )

        # Load UI config
        if "ui" in data:
            ui_data = data["ui"]
            config.ui = UIConfig(
                require_consent=ui_data.get("require_consent", True),
                show_banner=ui_data.get("show_banner", True),
                use_colors=ui_data.get("use_colors", True),
            )

        config.custom_signatures = data.get("custom_signatures", [])

        # Re-run post_init to resolve paths
        config.__post_init__()

        return config


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Config object with loaded settings.

    Raises:
        json.JSONDecodeError: If config file contains invalid JSON.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_DIR.expanduser() / DEFAULT_CONFIG_FILE

    if not config_path.exists():
        # Return default config if no config file exists
        return Config()

    with open(config_path, encoding="utf-8") as f:
        data = json.load(f)

    return Config.from_dict(data)


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file.

    Args:
        config: Config object to save.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = config.config_dir / DEFAULT_CONFIG_FILE

    # Ensure directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)


def get_default_config() -> Config:
    """Get the default configuration.

    Returns:
        A new Config object with default settings.
    """
    return Config()
