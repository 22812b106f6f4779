"""Resetting the concentrator through GPIO lines and external commands."""

from __future__ import annotations

import fcntl
import logging
import os
import struct
import subprocess
import threading
import time
from dataclasses import dataclass

log = logging.getLogger(__name__)

_STEP_DELAY = 0.1

# GPIO character device, uapi v1.
_GPIO_GET_LINEHANDLE_IOCTL = 0xC16CB403
_GPIOHANDLE_SET_LINE_VALUES_IOCTL = 0xC040B409
_GPIOHANDLE_REQUEST_OUTPUT = 1 << 1
_GPIOHANDLES_MAX = 64
_HANDLE_REQUEST = struct.Struct("=64II64B32sIi")
_HANDLE_DATA = struct.Struct("=64B")


class _OutputLine:
    """A single GPIO line requested as output, initially inactive."""

    def __init__(self, chip: str, line: int) -> None:
        path = chip if "/" in chip else f"/dev/{chip}"
        offsets = [line] + [0] * (_GPIOHANDLES_MAX - 1)
        defaults = [0] * _GPIOHANDLES_MAX
        request = bytearray(
            _HANDLE_REQUEST.pack(
                *offsets, _GPIOHANDLE_REQUEST_OUTPUT, *defaults, b"concentratord", 1, 0
            )
        )
        chip_fd = os.open(path, os.O_RDWR | os.O_CLOEXEC)
        try:
            fcntl.ioctl(chip_fd, _GPIO_GET_LINEHANDLE_IOCTL, request, True)
        finally:
            os.close(chip_fd)
        self._fd: int | None = _HANDLE_REQUEST.unpack(request)[-1]

    def set_value(self, active: bool) -> None:
        data = bytearray(_HANDLE_DATA.pack(int(active), *[0] * (_GPIOHANDLES_MAX - 1)))
        fcntl.ioctl(self._fd, _GPIOHANDLE_SET_LINE_VALUES_IOCTL, data, True)

    def close(self) -> None:
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None


@dataclass
class ResetConfiguration:
    """GPIO lines as (chip, line) and raw commands as (command, args) used for resetting."""

    sx130x_reset: tuple[str, int] | None = None
    sx1302_power_en: tuple[str, int] | None = None
    sx1261_reset: tuple[str, int] | None = None
    ad5338r_reset: tuple[str, int] | None = None
    reset_commands: list[tuple[str, list[str]]] | None = None


_lock = threading.Lock()
_lines: dict[str, _OutputLine] = {}
_reset_commands: list[tuple[str, list[str]]] | None = None

_PIN_DESCRIPTIONS = {
    "sx130x_reset": "reset pin",
    "sx1302_power_en": "sx1302 power enable pin",
    "sx1261_reset": "sx1261 reset pin",
    "ad5338r_reset": "ad5338r reset pin",
}


def setup(config: ResetConfiguration) -> None:
    """Request the configured GPIO lines and store the reset commands.

    Settings left as None keep what an earlier call configured. Raises
    OSError when a GPIO line cannot be requested.
    """
    global _reset_commands

    with _lock:
        for name, description in _PIN_DESCRIPTIONS.items():
            pin = getattr(config, name)
            if pin is None:
                continue
            chip, line = pin
            log.info("Configuring %s, dev: %s, pin: %d", description, chip, line)
            requested = _OutputLine(chip, line)
            previous = _lines.pop(name, None)
            if previous is not None:
                previous.close()
            _lines[name] = requested

        if config.reset_commands is not None:
            log.info("Configuring raw reset commands")
            _reset_commands = [(cmd, list(args)) for cmd, args in config.reset_commands]


def _pulse(line: _OutputLine, first: bool, second: bool) -> None:
    line.set_value(first)
    time.sleep(_STEP_DELAY)
    line.set_value(second)
    time.sleep(_STEP_DELAY)


def reset() -> None:
    """Power up and reset the concentrator, then run the reset commands in order.

    Raises OSError when a line cannot be set or a command cannot be started.
    """
    with _lock:
        power_en = _lines.get("sx1302_power_en")
        if power_en is not None:
            log.info("Enabling concentrator power")
            power_en.set_value(True)
            time.sleep(_STEP_DELAY)

        sx130x = _lines.get("sx130x_reset")
        if sx130x is not None:
            log.info("Triggering sx130x reset")
            _pulse(sx130x, True, False)

        sx1261 = _lines.get("sx1261_reset")
        if sx1261 is not None:
            log.info("Triggering sx1261 reset")
            _pulse(sx1261, False, True)

        ad5338r = _lines.get("ad5338r_reset")
        if ad5338r is not None:
            log.info("Triggering AD5338R reset")
            _pulse(ad5338r, False, True)

        for cmd, args in _reset_commands or []:
            log.info("Executing reset command, command: %s, args: %s", cmd, args)
            subprocess.run([cmd, *args], capture_output=True, check=False)
            time.sleep(_STEP_DELAY)