"""In-memory and file-backed device sources.

StaticDeviceSource serves a fixed list of records. JsonDeviceSource replays
an inventory previously captured with ``dmascand.py devices --json``.
"""

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from dmascan.core.models import DeviceRecord
from dmascan.discovery.base import BaseDeviceSource, EnumerationUnavailable

logger = logging.getLogger("dmascan.discovery.static")


class StaticDeviceSource(BaseDeviceSource):
    """Device source over a fixed sequence of records.

    Example:
        source = StaticDeviceSource([DeviceRecord(("USB\\VID_1A2C&PID_2124",))])
        report = scan(source, create_default_catalog())
    """

    def __init__(self, devices: Iterable[DeviceRecord] = (), name: str = "static") -> None:
        self._devices = tuple(devices)
        self._name = name
        self._position: int | None = None

    def get_source_name(self) -> str:
        """Return the source identifier."""
        return self._name

    def open(self) -> None:
        """Start a new session at the first record."""
        self._position = 0

    def next_device(self) -> DeviceRecord | None:
        """Return the next record, or None at the end of the list."""
        if self._position is None:
            raise EnumerationUnavailable("Enumeration session is not open")
        if self._position >= len(self._devices):
            return None
        device = self._devices[self._position]
        self._position += 1
        return device

    def close(self) -> None:
        """End the session."""
        self._position = None


class JsonDeviceSource(StaticDeviceSource):
    """Device source that replays a JSON device inventory.

    The file holds either a list of device objects or an object with a
    ``devices`` key. Each device object uses the keys ``hardware_ids``,
    ``description`` and ``instance_id``; missing keys become empty.
    """

    def __init__(self, file_path: Path) -> None:
        super().__init__(name="json")
        self.file_path = file_path

    def get_description(self) -> str:
        """Return source description."""
        return f"Replays the device inventory in {self.file_path}"

    def is_available(self) -> bool:
        """Check that the inventory file exists."""
        return self.file_path.is_file()

    def open(self) -> None:
        """Read the inventory file and start a session.

        Raises:
            EnumerationUnavailable: If the file is missing or malformed.
        """
        try:
            data = json.loads(self.file_path.read_text(encoding="utf-8"))
        except OSError as e:
            raise EnumerationUnavailable(f"Cannot read device inventory {self.file_path}: {e}") from e
        except json.JSONDecodeError as e:
            raise EnumerationUnavailable(f"Invalid JSON in device inventory {self.file_path}: {e}") from e

        self._devices = tuple(self._parse_devices(data))
        logger.info(f"Loaded {len(self._devices)} devices from {self.file_path}")
        super().open()

    def _parse_devices(self, data: Any) -> list[DeviceRecord]:
        if isinstance(data, dict):
            data = data.get("devices", [])
        if not isinstance(data, list):
            raise EnumerationUnavailable(f"Invalid device inventory format in {self.file_path}")

        devices = []
        for index, item in enumerate(data):
            if not isinstance(item, dict):
                logger.warning(f"Skipping malformed device entry {index} in {self.file_path}")
                continue
            devices.append(DeviceRecord.from_dict(item))
        return devices
