"""GNSS device descriptions, parsed from configuration strings."""

from __future__ import annotations

import enum
from dataclasses import dataclass

_GPSD_PREFIX = "gpsd://"


class DeviceKind(enum.Enum):
    """Where GNSS data comes from."""

    NONE = "none"
    TTY_PATH = "tty_path"
    GPSD = "gpsd"


@dataclass(frozen=True)
class Device:
    """A GNSS device: nothing, a serial TTY path or a gpsd host."""

    kind: DeviceKind = DeviceKind.NONE
    value: str = ""

    def __str__(self) -> str:
        if self.kind is DeviceKind.NONE:
            return ""
        if self.kind is DeviceKind.GPSD:
            return f"{_GPSD_PREFIX}{self.value}"
        return self.value


def parse_device(path: str) -> Device:
    """Parse a device string: empty, ``gpsd://host:port`` or a TTY path."""
    if not path:
        return Device()
    if path.startswith(_GPSD_PREFIX):
        return Device(DeviceKind.GPSD, path[len(_GPSD_PREFIX):])
    return Device(DeviceKind.TTY_PATH, path)