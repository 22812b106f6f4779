"""Connecting to gpsd and setting up a u-blox receiver for timing messages."""

from __future__ import annotations

import json
import logging
import socket
from typing import BinaryIO

from .errors import ConcentratordError

log = logging.getLogger(__name__)

_READ_TIMEOUT = 5.0
_WATCH_COMMAND = b'?WATCH={"enable":true,"nmea":true,"raw":2};\r\n'
_UBLOX_DRIVER = "u-blox"
_UBLOX_NAV_TIMEGPS_CONFIG = "b5620601080001200001010000003294"


class GpsdError(ConcentratordError):
    """gpsd could not be set up as a GNSS source."""


def _split_server(server: str) -> tuple[str, int]:
    host, sep, port = server.rpartition(":")
    if not sep or not host:
        raise GpsdError(f"Invalid gpsd server address: {server}")
    try:
        return host.strip("[]"), int(port)
    except ValueError as exc:
        raise GpsdError(f"Invalid gpsd server port: {server}") from exc


def _read_line(reader: BinaryIO, what: str) -> bytes:
    line = reader.readline()
    try:
        log.debug("%s response: %s", what, line.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise GpsdError(f"{what} response is not valid UTF-8") from exc
    return line


def _parse_devices(line: bytes) -> list[tuple[str, str | None]]:
    try:
        response = json.loads(line)
        return [(device["path"], device.get("driver")) for device in response["devices"]]
    except (ValueError, KeyError, TypeError, AttributeError) as exc:
        raise GpsdError(f"Invalid devices response: {line!r}") from exc


def get_reader(server: str) -> BinaryIO:
    """Connect to gpsd at ``host:port`` and return a reader of its raw output.

    The first u-blox device gpsd reports is configured for NAV-TIMEGPS
    messages. Raises GpsdError when there is none or gpsd answers badly.
    """
    log.info("Connecting to gpsd, server: %s", server)
    sock = socket.create_connection(_split_server(server), timeout=_READ_TIMEOUT)
    reader = sock.makefile("rb")
    try:
        _read_line(reader, "Version")
        sock.sendall(_WATCH_COMMAND)
        devices = _parse_devices(_read_line(reader, "Devices"))
        _read_line(reader, "Watch")

        for path, driver in devices:
            if driver == _UBLOX_DRIVER:
                log.debug("Configuring uBlox device %s for NAV-TIMEGPS", path)
                sock.sendall(f"&{path}={_UBLOX_NAV_TIMEGPS_CONFIG}\r\n".encode())
                return reader

        raise GpsdError("No u-blox GNSS device found")
    except BaseException:
        reader.close()
        raise
    finally:
        # The reader keeps the connection open until it is closed itself.
        sock.close()