"""Base interface for device sources.

All device sources must inherit from BaseDeviceSource and implement the
open/next/close enumeration session used by the scan orchestrator.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dmascan.core.models import DeviceRecord


class EnumerationUnavailable(OSError):
    """The device source could not be opened or enumerated."""


class BaseDeviceSource(ABC):
    """Abstract base class for all device sources.

    A device source produces a finite, one-shot sequence of device records.
    Each enumeration session is opened with open(), drained with
    next_device() and released with close(). A new session is required to
    scan again. Sources are not reentrant: only one thread may pull from a
    session.

    Subclasses must implement:
        - open(): Start an enumeration session
        - next_device(): Return the next record, or None at the end
        - get_source_name(): Return the source identifier

    Example:
        with source.enumerate() as devices:
            for device in devices:
                print(device.description)
    """

    @abstractmethod
    def open(self) -> None:
        """Open an enumeration session.

        Raises:
            EnumerationUnavailable: If the platform denies access or the
                enumeration mechanism is absent.
        """
        pass

    @abstractmethod
    def next_device(self) -> "DeviceRecord | None":
        """Pull the next device record.

        Returns:
            The next DeviceRecord, or None once the sequence is exhausted.

        Raises:
            EnumerationUnavailable: If enumeration breaks mid-session.
        """
        pass

    def close(self) -> None:
        """Release enumeration resources. Default implementation does nothing."""
        pass

    @abstractmethod
    def get_source_name(self) -> str:
        """Return the source identifier.

        Returns:
            A string identifier for this source.
            Examples: "wmi", "udev", "json"
        """
        pass

    def get_description(self) -> str:
        """Return a human-readable description of this source."""
        return f"Enumerates devices via {self.get_source_name()}"

    def is_available(self) -> bool:
        """Check if this source can run on the current system.

        Returns:
            True if the source can run, False otherwise.
            Default implementation always returns True.
        """
        return True

    @contextmanager
    def enumerate(self) -> Iterator[Iterator["DeviceRecord"]]:
        """Open a session and yield an iterator over its devices.

        close() is called exactly once after a successful open, including
        when the caller stops early or an error is raised.

        Raises:
            EnumerationUnavailable: If the session cannot be opened.
        """
        self.open()
        try:
            yield self._iter_devices()
        finally:
            self.close()

    def _iter_devices(self) -> Iterator["DeviceRecord"]:
        while True:
            device = self.next_device()
            if device is None:
                return
            yield device

    def __enter__(self) -> "BaseDeviceSource":
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
