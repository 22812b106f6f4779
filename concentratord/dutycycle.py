"""Duty-cycle tracking over a sliding time window."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from .errors import DutyCycleError, DutyCycleFutureItemsError

_ZERO = timedelta(0)


@dataclass(frozen=True)
class Item:
    """A transmission occupying the air between start_time and end_time."""

    start_time: timedelta
    end_time: timedelta

    def duration(self) -> timedelta:
        """Return how long the item lasts."""
        return self.end_time - self.start_time

    def overlapping_duration(self, start_time: timedelta, end_time: timedelta) -> timedelta:
        """Return how much of the item falls between start_time and end_time."""
        if start_time >= self.end_time or end_time <= self.start_time:
            return _ZERO
        if start_time > self.start_time:
            return self.end_time - start_time
        if end_time < self.end_time:
            return end_time - self.start_time
        return self.duration()


@dataclass
class Tracker:
    """Tracks transmissions and enforces a maximum airtime per window."""

    window: timedelta
    max_duration: timedelta
    enforce: bool = True
    items: list[Item] = field(default_factory=list)

    def _window_start(self, cur_time: timedelta) -> timedelta:
        return max(cur_time - self.window, _ZERO)

    def cleanup(self, cur_time: timedelta) -> None:
        """Drop items that do not overlap cur_time plus or minus the window."""
        start = self._window_start(cur_time)
        end = cur_time + self.window
        self.items = [
            item for item in self.items if item.overlapping_duration(start, end) != _ZERO
        ]

    def tracked_duration(self, cur_time: timedelta) -> timedelta:
        """Return the airtime tracked within the window ending at cur_time."""
        start = self._window_start(cur_time)
        return sum(
            (item.overlapping_duration(start, cur_time) for item in self.items),
            _ZERO,
        )

    def try_insert(self, item: Item) -> None:
        """Track the item, or raise if it would break the duty-cycle limit.

        Raises DutyCycleError when the item itself would exceed the limit and
        DutyCycleFutureItemsError when it would push a later item over it.
        """
        if not self.enforce:
            self.items.append(item)
            return

        if self.tracked_duration(item.end_time) + item.duration() > self.max_duration:
            raise DutyCycleError()

        for future in (i for i in self.items if i.start_time > item.start_time):
            if self.tracked_duration(future.end_time) + item.duration() > self.max_duration:
                raise DutyCycleFutureItemsError()

        self.items.append(item)