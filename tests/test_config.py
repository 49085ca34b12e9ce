"""Tests for configuration management."""

import json
import pytest
from pathlib import Path
from tempfile import TemporaryDirectory

from dmascan.core.config import (
    Config,
    ScanConfig,
    UIConfig,
    load_config,
    save_config,
    get_default_config,
)


class TestScanConfig:
    """Tests for ScanConfig."""

    def test_default_values(self):
        """Test default scan configuration values."""
        config = ScanConfig()

        assert config.source == "auto"
        assert config.max_workers == 1
        assert config.command_timeout_seconds == 60
        assert config.include_usb is True
        assert config.include_pci is True


class TestUIConfig:
    """Tests for UIConfig."""

    def test_default_values(self):
        """Test default UI configuration values."""
        config = UIConfig()

        assert config.require_consent is True
        assert config.show_banner is True
        assert config.use_colors is True


class TestConfig:
    """Tests for main Config class."""

    def test_default_config(self):
        """Test default configuration creation."""
        config = Config()

        assert config.scan is not None
        assert config.ui is not None
        assert config.custom_signatures == []
        assert config.signatures_dir == config.config_dir / "signatures"
        assert config.logs_dir == config.config_dir / "logs"

    def test_ensure_directories(self):
        """Test directory creation."""
        with TemporaryDirectory() as tmpdir:
            config = Config(config_dir=Path(tmpdir) / "dmascan")
            config.ensure_directories()

            assert config.config_dir.exists()
            assert config.signatures_dir.exists()
            assert config.logs_dir.exists()

    def test_signature_paths(self, tmp_path: Path):
        """Test the signatures directory comes before custom files."""
        config = Config(config_dir=tmp_path)
        config.custom_signatures = ["extra.json"]

        assert config.signature_paths() == [Path("extra.json")]

        config.ensure_directories()
        assert config.signature_paths() == [tmp_path / "signatures", Path("extra.json")]

    def test_to_dict(self):
        """Test configuration serialization to dictionary."""
        config = Config()
        data = config.to_dict()

        assert "config_dir" in data
        assert "scan" in data
        assert "ui" in data
        assert data["scan"]["source"] == "auto"
        assert data["ui"]["require_consent"] is True

    def test_from_dict(self):
        """Test configuration deserialization from dictionary."""
        data = {
            "scan": {
                "source": "udev",
                "include_pci": False,
            },
            "ui": {
                "use_colors": False,
            },
            "custom_signatures": ["extra.json"],
        }

        config = Config.from_dict(data)

        assert config.scan.source == "udev"
        assert config.scan.include_pci is False
        assert config.scan.include_usb is True
        assert config.ui.use_colors is False
        assert config.ui.require_consent is True
        assert "extra.json" in config.custom_signatures

    def test_from_dict_relative_dirs(self):
        """Test directories default to the config directory."""
        config = Config.from_dict({"config_dir": "/opt/dmascan"})

        assert config.signatures_dir == Path("/opt/dmascan/signatures")
        assert config.logs_dir == Path("/opt/dmascan/logs")

    def test_from_dict_clamps_workers(self):
        """Test the worker count is at least one."""
        config = Config.from_dict({"scan": {"max_workers": 0}})

        assert config.scan.max_workers == 1

    def test_roundtrip(self):
        """Test configuration roundtrip through dict."""
        original = Config()
        original.scan.source = "powershell"
        original.scan.max_workers = 4
        original.custom_signatures = ["test.json"]

        data = original.to_dict()
        restored = Config.from_dict(data)

        assert restored.scan.source == original.scan.source
        assert restored.scan.max_workers == original.scan.max_workers
        assert restored.custom_signatures == original.custom_signatures
        assert restored.logs_dir == original.logs_dir


class TestConfigFileOperations:
    """Tests for config file save/load operations."""

    def test_save_and_load_config(self):
        """Test saving and loading configuration from file."""
        with TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"

            # Create and save config
            config = Config(config_dir=Path(tmpdir))
            config.scan.source = "wmi"
            config.ui.require_consent = False
            save_config(config, config_path)

            # Verify file exists
            assert config_path.exists()

            # Load and verify
            loaded = load_config(config_path)
            assert loaded.scan.source == "wmi"
            assert loaded.ui.require_consent is False
            assert loaded.config_dir == Path(tmpdir)

    def test_save_default_location(self, tmp_path: Path):
        """Test saving into the config directory."""
        config = Config(config_dir=tmp_path)
        save_config(config)

        data = json.loads((tmp_path / "config.json").read_text())
        assert data["scan"]["max_workers"] == 1

    def test_load_invalid_json(self, tmp_path: Path):
        """Test a corrupt config file raises an error."""
        config_path = tmp_path / "config.json"
        config_path.write_text("{broken")

        with pytest.raises(json.JSONDecodeError):
            load_config(config_path)

    def test_load_nonexistent_returns_default(self):
        """Test loading from nonexistent file returns default config."""
        with TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "nonexistent.json"
            config = load_config(config_path)

            # Should return default config
            assert config.scan.source == "auto"
            assert config.ui.require_consent is True

    def test_get_default_config(self):
        """Test get_default_config function."""
        config = get_default_config()

        assert isinstance(config, Config)
        assert config.scan.max_workers == 1
