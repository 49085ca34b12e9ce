"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def kmbox_device():
    """A hardware injection box identified by its hardware ID."""
    from dmascan.core.models import DeviceRecord

    return DeviceRecord(
        hardware_ids=("USB\\VID_1A2C&PID_2124&REV_0100", "USB\\VID_1A2C&PID_2124"),
        description="USB Input Device",
        instance_id="USB\\VID_1A2C&PID_2124\\5&2F3A1B&0&3",
    )


@pytest.fixture
def benign_device():
    """An ordinary network adapter."""
    from dmascan.core.models import DeviceRecord

    return DeviceRecord(
        hardware_ids=("VID_8086&PID_1234",),
        description="Intel Network Adapter",
    )


@pytest.fixture
def sample_devices():
    """A mixed inventory in enumeration order."""
    from dmascan.core.models import DeviceRecord

    return [
        DeviceRecord(("PCI\\VEN_8086&DEV_A370",), "Intel(R) Wireless-AC 9560"),
        DeviceRecord(("USB\\VID_0483&PID_5740",), "STMicroelectronics Virtual COM Port"),
        DeviceRecord(("HID\\VID_046D&PID_C52B",), "HID Keyboard Device"),
        DeviceRecord(("USB\\VID_1A86&PID_E026",), "USB Composite Device"),
        DeviceRecord((), ""),
        DeviceRecord(("PCI\\VEN_10EE&DEV_7021",), "Xilinx FPGA Card"),
    ]


@pytest.fixture
def default_catalog():
    """The built-in signature catalog."""
    from dmascan.classification.signatures import create_default_catalog

    return create_default_catalog()


@pytest.fixture
def test_config(tmp_path):
    """A configuration rooted in a temporary directory."""
    from dmascan.core.config import Config

    return Config(config_dir=tmp_path / "dmascan")
