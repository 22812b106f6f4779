"""Allowed transmit frequency ranges per LoRaWAN region."""

from __future__ import annotations

import enum


class Region(enum.Enum):
    """Supported regions."""

    AS923 = "as923"
    AS923_2 = "as923_2"
    AS923_3 = "as923_3"
    AS923_4 = "as923_4"
    AU915 = "au915"
    CN470 = "cn470"
    EU433 = "eu433"
    EU868 = "eu868"
    IN865 = "in865"
    ISM2400 = "ism2400"
    KR920 = "kr920"
    RU864 = "ru864"
    US915 = "us915"


_TX_MIN_MAX_FREQS: dict[Region, tuple[tuple[int, int], ...]] = {
    Region.AS923: ((915000000, 928000000),),
    Region.AS923_2: ((915000000, 928000000),),
    Region.AS923_3: ((915000000, 928000000),),
    Region.AS923_4: ((915000000, 928000000),),
    Region.AU915: ((915000000, 928000000),),
    Region.CN470: ((470000000, 510000000),),
    Region.EU433: ((433050000, 434900000),),
    Region.EU868: ((863000000, 870000000),),
    Region.IN865: ((865000000, 867000000),),
    Region.ISM2400: ((2400000000, 2483500000),),
    Region.KR920: ((920900000, 923300000),),
    Region.RU864: ((864000000, 870000000),),
    Region.US915: ((902000000, 928000000),),
}


def tx_min_max_freqs(region: Region | str) -> tuple[tuple[int, int], ...]:
    """Return the (min, max) transmit frequency ranges in Hz for a region.

    Raises ValueError for an unknown region name.
    """
    return _TX_MIN_MAX_FREQS[Region(region)]