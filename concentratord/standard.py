"""Regulatory standards and their duty-cycle bands."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import timedelta

from .errors import BandNotFoundError


class Standard(enum.Enum):
    """Regulatory standards that can be selected in the configuration."""

    ETSI_EN_300_220 = "ETSI_EN_300_220"

    def __str__(self) -> str:
        return self.value


class Regulation(enum.Enum):
    """Regulation identifiers reported in duty-cycle statistics."""

    ETSI_EN_300_220 = "ETSI_EN_300_220"


@dataclass(frozen=True)
class Band:
    """A frequency band with its duty-cycle and EIRP limits."""

    label: str
    frequency_min: int
    frequency_max: int
    duty_cycle_permille_max: int
    tx_power_max_eirp: int

    def __str__(self) -> str:
        return (
            f"[label: {self.label}, freq_min: {self.frequency_min}, "
            f"freq_max: {self.frequency_max}, "
            f"dc_max: {self.duty_cycle_permille_max / 10.0:.2f}%]"
        )


@dataclass
class Configuration:
    """The bands and tracking window of a regulatory standard."""

    bands: list[Band] = field(default_factory=list)
    window_time: timedelta = timedelta(hours=1)
    regulation: Regulation = Regulation.ETSI_EN_300_220

    def get_band(self, tx_freq: int, tx_power_eirp: int) -> Band:
        """Return the first band that covers the frequency and allows the EIRP."""
        for band in self.bands:
            if (
                band.frequency_min <= tx_freq < band.frequency_max
                and tx_power_eirp <= band.tx_power_max_eirp
            ):
                return band
        raise BandNotFoundError(tx_freq, tx_power_eirp)


def _etsi_en_300_220() -> Configuration:
    return Configuration(
        regulation=Regulation.ETSI_EN_300_220,
        bands=[
            Band("K", 863000000, 865000000, 1, 14 + 2),
            Band("L", 865000000, 868000000, 10, 14 + 2),
            Band("M", 868000000, 868600000, 10, 14 + 2),
            Band("N", 868700000, 869200000, 1, 14 + 2),
            Band("P", 869400000, 869650000, 100, 27 + 2),
            Band("P", 869700000, 870000000, 1000, 7 + 2),
            Band("Q", 869700000, 870000000, 10, 14 + 2),
        ],
        window_time=timedelta(hours=1),
    )


_BUILDERS = {
    Standard.ETSI_EN_300_220: _etsi_en_300_220,
}


def get(standard: Standard | str) -> Configuration:
    """Return a fresh configuration for the given standard."""
    return _BUILDERS[Standard(standard)]()