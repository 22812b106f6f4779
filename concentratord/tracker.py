"""Duty-cycle tracking across the bands of a regulatory standard."""

from __future__ import annotations

import logging
from datetime import timedelta

from . import dutycycle
from .helpers import to_concentrator_count
from .standard import Band, Configuration, Regulation

log = logging.getLogger(__name__)


class Tracker:
    """Keeps one duty-cycle tracker per band of a regulatory configuration."""

    def __init__(self, config: Configuration, enforce: bool) -> None:
        self._config = config
        self._enforce = enforce
        self._trackers: dict[Band, dutycycle.Tracker] = {}

    def try_insert(self, tx_freq: int, tx_power: int, item: dutycycle.Item) -> None:
        """Track a transmission in the band matching its frequency and EIRP.

        Raises BandNotFoundError when no band matches, and the duty-cycle
        errors of the band's tracker when the limit would be exceeded.
        """
        band = self._config.get_band(tx_freq, tx_power)

        tracker = self._trackers.get(band)
        if tracker is None:
            tracker = dutycycle.Tracker(
                window=self._config.window_time,
                max_duration=self._config.window_time / 1000 * band.duty_cycle_permille_max,
                enforce=self._enforce,
            )
            tracker.try_insert(item)
            self._trackers[band] = tracker
        else:
            tracker.try_insert(item)

        log.info(
            "Item tracked, band: %s, freq: %d, tx_power_eirp: %d, start_counter_us: %d, "
            "end_counter_us: %d, duration: %s",
            band,
            tx_freq,
            tx_power,
            to_concentrator_count(item.start_time),
            to_concentrator_count(item.end_time),
            item.duration(),
        )

    def cleanup(self, cur_time: timedelta) -> None:
        """Drop items that no longer matter at cur_time from every band."""
        for tracker in self._trackers.values():
            tracker.cleanup(cur_time)

    def window(self) -> timedelta:
        """Return the tracking window of the regulatory configuration."""
        return self._config.window_time

    def tracked_durations(self, linear_count: timedelta) -> dict[Band, timedelta]:
        """Return the tracked airtime per band at the given time."""
        return {
            band: tracker.tracked_duration(linear_count)
            for band, tracker in self._trackers.items()
        }

    def regulation(self) -> Regulation:
        """Return the regulation the configuration implements."""
        return self._config.regulation