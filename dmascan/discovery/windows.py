"""Windows Device Source - Plug and Play device enumeration.

Enumerates present Plug and Play devices through WMI (Win32_PnPEntity),
falling back to PowerShell Get-CimInstance when the wmi package or the WMI
service is unavailable. Each device yields its hardware ID list and its
device description.
"""

import json
import logging
import os
import subprocess
from typing import Any

from dmascan.core.models import DeviceRecord
from dmascan.discovery.base import BaseDeviceSource, EnumerationUnavailable

logger = logging.getLogger("dmascan.discovery.windows")

BACKEND_AUTO = "auto"
BACKEND_WMI = "wmi"
BACKEND_POWERSHELL = "powershell"
BACKENDS = (BACKEND_AUTO, BACKEND_WMI, BACKEND_POWERSHELL)

POWERSHELL_QUERY = """
Get-CimInstance Win32_PnPEntity | Select-Object
    DeviceID,
    Description,
    HardwareID
| ConvertTo-Json -Compress
""".replace("\n", " ")


class WindowsDeviceSource(BaseDeviceSource):
    """Device source for Windows Plug and Play devices.

    Example:
        source = WindowsDeviceSource(backend="auto")
        with source.enumerate() as devices:
            for device in devices:
                print(device.joined_hardware_ids)
    """

    def __init__(
        self,
        backend: str = BACKEND_AUTO,
        command_timeout_seconds: int = 60,
    ) -> None:
        """Initialize the Windows device source.

        Args:
            backend: "auto" (WMI, then PowerShell), "wmi" or "powershell".
            command_timeout_seconds: Timeout for the PowerShell query.

        Raises:
            ValueError: If the backend name is unknown.
        """
        if backend not in BACKENDS:
            raise ValueError(f"Unknown Windows backend: {backend}")

        self.backend = backend
        self.command_timeout_seconds = command_timeout_seconds
        self._is_windows = os.name == "nt"
        self._rows: list[Any] | None = None
        self._position = 0
        self._active_backend: str | None = None

    def get_source_name(self) -> str:
        """Return the source identifier."""
        return self._active_backend or self.backend

    def get_description(self) -> str:
        """Return source description."""
        return "Enumerates Windows Plug and Play devices via WMI or PowerShell"

    def is_available(self) -> bool:
        """Check if this source can run on the current system."""
        return self._is_windows

    def open(self) -> None:
        """Run the device query and start a session.

        Raises:
            EnumerationUnavailable: If no backend could enumerate devices.
        """
        if not self._is_windows:
            raise EnumerationUnavailable("Windows device enumeration is only available on Windows")

        rows: list[Any] | None = None

        if self.backend in (BACKEND_AUTO, BACKEND_WMI):
            rows = self._query_wmi()
            if rows is not None:
                self._active_backend = BACKEND_WMI

        if rows is None and self.backend in (BACKEND_AUTO, BACKEND_POWERSHELL):
            if self.backend == BACKEND_AUTO:
                logger.warning("WMI enumeration failed, trying PowerShell...")
            rows = self._query_powershell()
            if rows is not None:
                self._active_backend = BACKEND_POWERSHELL

        if rows is None:
            raise EnumerationUnavailable("Failed to get device information")

        logger.info(f"Found {len(rows)} devices via {self._active_backend}")
        self._rows = rows
        self._position = 0

    def next_device(self) -> DeviceRecord | None:
        """Return the next device, or None when all devices were read."""
        if self._rows is None:
            raise EnumerationUnavailable("Enumeration session is not open")
        if self._position >= len(self._rows):
            return None

        row = self._rows[self._position]
        self._position += 1

        if self._active_backend == BACKEND_WMI:
            return self._record_from_wmi(row)
        return self._record_from_dict(row)

    def close(self) -> None:
        """Drop the queried rows."""
        self._rows = None
        self._position = 0

    def _query_wmi(self) -> list[Any] | None:
        """Query Win32_PnPEntity through WMI.

        Returns:
            List of WMI objects, or None if WMI is unavailable.
        """
        try:
            import wmi

            c = wmi.WMI()
            return list(c.Win32_PnPEntity())

        except ImportError:
            logger.debug("WMI module not available")
        except Exception as e:
            logger.error(f"Error enumerating devices via WMI: {e}")

        return None

    def _query_powershell(self) -> list[dict[str, Any]] | None:
        """Query Win32_PnPEntity through PowerShell.

        Returns:
            List of device dictionaries, or None if the query failed.
        """
        try:
            cmd = ["powershell.exe", "-NoProfile", "-Command", POWERSHELL_QUERY]

            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.command_timeout_seconds,
                creationflags=(
                    subprocess.CREATE_NO_WINDOW if hasattr(subprocess, "CREATE_NO_WINDOW") else 0
                ),
            )

            if result.returncode != 0:
                logger.error(f"PowerShell error: {result.stderr}")
                return None

            if not result.stdout.strip():
                return []

            data = json.loads(result.stdout)

            # Handle single device (not a list)
            if isinstance(data, dict):
                data = [data]

            return [row for row in data if isinstance(row, dict)]

        except subprocess.TimeoutExpired:
            logger.error("PowerShell command timed out")
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse PowerShell output: {e}")
        except FileNotFoundError:
            logger.error("PowerShell not found")

        return None

    def _record_from_wmi(self, entity: Any) -> DeviceRecord:
        return DeviceRecord(
            hardware_ids=_as_id_tuple(_read_property(entity, "HardwareID")),
            description=_as_text(_read_property(entity, "Description")),
            instance_id=_as_text(_read_property(entity, "DeviceID")),
        )

    def _record_from_dict(self, row: dict[str, Any]) -> DeviceRecord:
        return DeviceRecord(
            hardware_ids=_as_id_tuple(row.get("HardwareID")),
            description=_as_text(row.get("Description")),
            instance_id=_as_text(row.get("DeviceID")),
        )


def _read_property(entity: Any, name: str) -> Any:
    """Read one WMI property, returning None when it cannot be retrieved."""
    try:
        return getattr(entity, name)
    except Exception as e:
        logger.debug(f"Property {name} unavailable: {e}")
        return None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_id_tuple(value: Any) -> tuple[str, ...]:
    """Normalize a hardware ID property (list, string or None) to a tuple."""
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value else ()
    return tuple(str(v) for v in value if v)
