"""Device sources for enumerating attached hardware."""

import sys

from .base import BaseDeviceSource, EnumerationUnavailable
from .static import JsonDeviceSource, StaticDeviceSource
from .udev import UdevDeviceSource
from .windows import BACKENDS, WindowsDeviceSource

SOURCE_NAMES = ("auto", *BACKENDS[1:], "udev")


def create_default_source(
    source: str = "auto",
    command_timeout_seconds: int = 60,
    include_usb: bool = True,
    include_pci: bool = True,
) -> BaseDeviceSource:
    """Create the device source for the current platform.

    Args:
        source: "auto", "wmi", "powershell" or "udev". "auto" picks the
            Windows source on Windows and udev elsewhere.
        command_timeout_seconds: Timeout for the PowerShell fallback.
        include_usb: Whether udev enumerates USB devices.
        include_pci: Whether udev enumerates PCI devices.

    Returns:
        A device source. It may still fail to open on this host.

    Raises:
        ValueError: If the source name is unknown.
    """
    if source not in SOURCE_NAMES:
        raise ValueError(f"Unknown device source: {source}")

    if source == "udev" or (source == "auto" and sys.platform.startswith("linux")):
        return UdevDeviceSource(include_usb=include_usb, include_pci=include_pci)

    return WindowsDeviceSource(
        backend=source,
        command_timeout_seconds=command_timeout_seconds,
    )


__all__ = [
    "BaseDeviceSource",
    "EnumerationUnavailable",
    "StaticDeviceSource",
    "JsonDeviceSource",
    "WindowsDeviceSource",
    "UdevDeviceSource",
    "SOURCE_NAMES",
    "create_default_source",
]
