"""Linux Device Source - USB and PCI enumeration through udev.

Devices are read with pyudev and their identifiers are rendered in the
Windows hardware ID form (``USB\\VID_xxxx&PID_xxxx``,
``PCI\\VEN_xxxx&DEV_xxxx&CC_xxxx``) so one signature catalog covers both
platforms.
"""

import logging
import sys
from typing import Any

from dmascan.core.models import DeviceRecord
from dmascan.discovery.base import BaseDeviceSource, EnumerationUnavailable

logger = logging.getLogger("dmascan.discovery.udev")


class UdevDeviceSource(BaseDeviceSource):
    """Device source for Linux USB and PCI devices.

    Example:
        source = UdevDeviceSource(include_pci=False)
        with source.enumerate() as devices:
            for device in devices:
                print(device.hardware_ids)
    """

    def __init__(self, include_usb: bool = True, include_pci: bool = True) -> None:
        """Initialize the udev device source.

        Args:
            include_usb: Whether to enumerate USB devices.
            include_pci: Whether to enumerate PCI devices.
        """
        self.include_usb = include_usb
        self.include_pci = include_pci
        self._devices: list[Any] | None = None
        self._position = 0

    def get_source_name(self) -> str:
        """Return the source identifier."""
        return "udev"

    def get_description(self) -> str:
        """Return source description."""
        return "Enumerates Linux USB and PCI devices via udev"

    def is_available(self) -> bool:
        """Check if this source can run on the current system."""
        return sys.platform.startswith("linux")

    def open(self) -> None:
        """List USB and PCI devices from udev.

        Raises:
            EnumerationUnavailable: If pyudev or the udev database is unavailable.
        """
        try:
            import pyudev
        except ImportError as e:
            raise EnumerationUnavailable("pyudev is not installed") from e

        devices: list[Any] = []
        try:
            context = pyudev.Context()
            if self.include_usb:
                devices.extend(context.list_devices(subsystem="usb", DEVTYPE="usb_device"))
            if self.include_pci:
                devices.extend(context.list_devices(subsystem="pci"))
        except Exception as e:
            raise EnumerationUnavailable(f"Failed to enumerate udev devices: {e}") from e

        logger.info(f"Found {len(devices)} devices via udev")
        self._devices = devices
        self._position = 0

    def next_device(self) -> DeviceRecord | None:
        """Return the next device, or None when all devices were read."""
        if self._devices is None:
            raise EnumerationUnavailable("Enumeration session is not open")
        if self._position >= len(self._devices):
            return None

        device = self._devices[self._position]
        self._position += 1

        if _get_property(device, "SUBSYSTEM") == "pci":
            return _record_from_pci(device)
        return _record_from_usb(device)

    def close(self) -> None:
        """Drop the listed devices."""
        self._devices = None
        self._position = 0


def _get_property(device: Any, name: str) -> str:
    """Read one udev property, returning an empty string when unavailable."""
    try:
        value = device.properties.get(name)
    except Exception as e:
        logger.debug(f"Property {name} unavailable: {e}")
        return ""
    return str(value) if value is not None else ""


def _sys_path(device: Any) -> str:
    try:
        return str(device.sys_path)
    except Exception as e:
        logger.debug(f"Device path unavailable: {e}")
        return ""


def _record_from_usb(device: Any) -> DeviceRecord:
    vid = _get_property(device, "ID_VENDOR_ID").upper()
    pid = _get_property(device, "ID_MODEL_ID").upper()
    revision = _get_property(device, "ID_REVISION").upper()

    hardware_ids: list[str] = []
    if vid and pid:
        if revision:
            hardware_ids.append(f"USB\\VID_{vid}&PID_{pid}&REV_{revision}")
        hardware_ids.append(f"USB\\VID_{vid}&PID_{pid}")

    description = (
        _get_property(device, "ID_MODEL_FROM_DATABASE")
        or _get_property(device, "ID_MODEL").replace("_", " ")
    )

    return DeviceRecord(
        hardware_ids=tuple(hardware_ids),
        description=description,
        instance_id=_sys_path(device),
    )


def _record_from_pci(device: Any) -> DeviceRecord:
    hardware_ids: list[str] = []

    # PCI_ID is "VVVV:DDDD", PCI_CLASS is the 24-bit class code in hex
    pci_id = _get_property(device, "PCI_ID").upper()
    pci_class = _get_property(device, "PCI_CLASS").upper().zfill(6)
    vendor, _, dev = pci_id.partition(":")

    if vendor and dev:
        hardware_ids.append(f"PCI\\VEN_{vendor}&DEV_{dev}&CC_{pci_class}")
        hardware_ids.append(f"PCI\\VEN_{vendor}&DEV_{dev}&CC_{pci_class[:4]}")
        hardware_ids.append(f"PCI\\VEN_{vendor}&DEV_{dev}")
    if _get_property(device, "PCI_CLASS"):
        hardware_ids.append(f"PCI\\CC_{pci_class}")
        hardware_ids.append(f"PCI\\CC_{pci_class[:4]}")

    description = _get_property(device, "ID_MODEL_FROM_DATABASE")

    return DeviceRecord(
        hardware_ids=tuple(hardware_ids),
        description=description,
        instance_id=_sys_path(device),
    )
