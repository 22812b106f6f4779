"""Just-in-time queue that schedules downlink packets on the concentrator counter."""

from __future__ import annotations

import copy
import enum
import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Generic, Protocol, TypeVar

from . import dutycycle
from .errors import (
    BandNotFoundError,
    ConcentratordError,
    DutyCycleError,
    DutyCycleFutureItemsError,
)
from .helpers import to_concentrator_count
from .standard import Regulation
from .tracker import Tracker

log = logging.getLogger(__name__)

_COUNTER_MODULUS = 1 << 32
_ZERO = timedelta(0)


class TxMode(enum.Enum):
    """When a packet is to be transmitted."""

    IMMEDIATE = "immediate"
    TIMESTAMPED = "timestamped"
    ON_GPS = "on_gps"


class TxAckStatus(enum.Enum):
    """Acknowledgement status of a downlink transmission request."""

    IGNORED = "IGNORED"
    OK = "OK"
    TOO_LATE = "TOO_LATE"
    TOO_EARLY = "TOO_EARLY"
    COLLISION_PACKET = "COLLISION_PACKET"
    COLLISION_BEACON = "COLLISION_BEACON"
    TX_FREQ = "TX_FREQ"
    TX_POWER = "TX_POWER"
    GPS_UNLOCKED = "GPS_UNLOCKED"
    QUEUE_FULL = "QUEUE_FULL"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DUTY_CYCLE_OVERFLOW = "DUTY_CYCLE_OVERFLOW"


class TxAckError(ConcentratordError):
    """A packet could not be enqueued; ``status`` says why."""

    def __init__(self, status: TxAckStatus) -> None:
        self.status = status
        super().__init__(f"Packet rejected: {status.value}")


class TxPacket(Protocol):
    """What the queue needs from a packet to schedule it."""

    downlink_id: int
    tx_mode: TxMode
    count_us: int
    frequency: int
    tx_power: int

    def time_on_air(self) -> timedelta:
        """Return how long transmitting the packet takes."""
        ...


P = TypeVar("P", bound=TxPacket)


@dataclass(frozen=True)
class DutyCycleBand:
    """Duty-cycle load of one regulatory band."""

    name: str
    frequency_min: int
    frequency_max: int
    load_max: timedelta
    load_tracked: timedelta


@dataclass(frozen=True)
class DutyCycleStats:
    """Duty-cycle load of all tracked bands."""

    regulation: Regulation
    window: timedelta
    bands: list[DutyCycleBand] = field(default_factory=list)


@dataclass
class _Item(Generic[P]):
    # Unlike the concentrator counter, linear_count never rolls over.
    linear_count: timedelta
    pre_delay: timedelta
    post_delay: timedelta
    packet: P


class Queue(Generic[P]):
    """Holds packets until they must be handed to the concentrator."""

    tx_start_delay = timedelta(microseconds=1500)
    tx_margin_delay = timedelta(microseconds=1000)
    tx_jit_delay = timedelta(microseconds=40000)
    tx_max_advance_delay = timedelta(seconds=(3 + 1) * 128)

    def __init__(self, capacity: int, dc_tracker: Tracker | None = None) -> None:
        log.info("Initializing JIT queue, capacity: %d", capacity)
        self._capacity = capacity
        self._dc_tracker = dc_tracker
        self._items: list[_Item[P]] = []
        self._concentrator_count_last = 0
        self._linear_count_last = _ZERO
        # End of the last transmission handed out; it is no longer in the queue.
        self._tx_linear_count_finished = _ZERO

    def size(self) -> int:
        """Return the capacity of the queue."""
        return self._capacity

    def empty(self) -> bool:
        """Return True when nothing is queued."""
        return not self._items

    def full(self) -> bool:
        """Return True when the queue holds as many packets as it can."""
        return len(self._items) == self._capacity

    def pop(self, concentrator_count: int) -> P | None:
        """Return the first packet if it is due, else None.

        A packet whose time has already passed is dropped.
        """
        linear_count = self._linear_count(concentrator_count)
        if not self._items:
            return None

        first = self._items[0]
        if first.linear_count < linear_count:
            log.error(
                "Scheduled packet is too old, dropped: count_us: %d, current_counter_us: %d",
                first.packet.count_us,
                concentrator_count,
            )
            self._items.pop(0)
            return None

        if first.linear_count - linear_count > first.pre_delay:
            return None

        item = self._items.pop(0)
        self._tx_linear_count_finished = item.linear_count + item.post_delay
        return item.packet

    def get_duty_cycle_stats(self, concentrator_count: int) -> DutyCycleStats | None:
        """Return the duty-cycle load per band, or None without a tracker."""
        linear_count = self._linear_count(concentrator_count)
        tracker = self._dc_tracker
        if tracker is None:
            return None

        window = tracker.window()
        bands = []
        for band, duration in tracker.tracked_durations(linear_count).items():
            log.info(
                "Duty-cyle stats: %s - current_dc: %.2f%%", band, duration / window * 100.0
            )
            bands.append(
                DutyCycleBand(
                    name=band.label,
                    frequency_min=band.frequency_min,
                    frequency_max=band.frequency_max,
                    load_max=window / 1000 * band.duty_cycle_permille_max,
                    load_tracked=duration,
                )
            )

        return DutyCycleStats(regulation=tracker.regulation(), window=window, bands=bands)

    def enqueue(self, concentrator_count: int, packet: P) -> None:
        """Schedule a copy of the packet.

        Immediate packets become timestamped at the first free slot. Raises
        TxAckError with the reason when the packet cannot be scheduled.
        """
        linear_count = self._linear_count(concentrator_count)

        if packet.tx_mode is TxMode.TIMESTAMPED:
            log.info(
                "Enqueueing timestamped packet, downlink_id: %d, counter_us: %d, "
                "current_counter_us: %d",
                packet.downlink_id,
                packet.count_us,
                concentrator_count,
            )
        elif packet.tx_mode is TxMode.IMMEDIATE:
            log.info(
                "Enqueueing immediate packet, downlink_id: %d, current_counter_us: %d",
                packet.downlink_id,
                concentrator_count,
            )
        else:
            log.info(
                "Enqueueing packet on pps, downlink_id: %d, counter_us: %d, "
                "current_counter_us: %d",
                packet.downlink_id,
                packet.count_us,
                concentrator_count,
            )

        if self.full():
            raise TxAckError(TxAckStatus.QUEUE_FULL)

        try:
            time_on_air = packet.time_on_air()
        except Exception as exc:
            log.error("Get time on air for tx packet error, error: %s", exc)
            raise TxAckError(TxAckStatus.INTERNAL_ERROR) from exc

        item = _Item(
            linear_count=_ZERO,
            pre_delay=self.tx_start_delay + self.tx_jit_delay,
            post_delay=time_on_air,
            packet=copy.copy(packet),
        )

        if item.packet.tx_mode is TxMode.IMMEDIATE:
            item.packet.tx_mode = TxMode.TIMESTAMPED
            asap_count = linear_count + timedelta(seconds=1)

            # The packet handed out last may still be on the air.
            not_before = self._tx_linear_count_finished + self.tx_margin_delay + item.pre_delay
            asap_count = max(asap_count, not_before)

            if self._collides(asap_count, item.pre_delay, item.post_delay):
                for other in self._items:
                    asap_count = (
                        other.linear_count
                        + other.post_delay
                        + item.pre_delay
                        + self.tx_margin_delay
                    )
                    if not self._collides(asap_count, item.pre_delay, item.post_delay):
                        break

            item.linear_count = asap_count
            item.packet.count_us = to_concentrator_count(asap_count)
        else:
            item.linear_count = self._to_linear_count(item.packet.count_us)
            if self._collides(item.linear_count, item.pre_delay, item.post_delay):
                raise TxAckError(TxAckStatus.COLLISION_PACKET)

        if item.linear_count < linear_count or (
            item.linear_count - linear_count
            < self.tx_start_delay + self.tx_margin_delay + self.tx_jit_delay
        ):
            log.warning(
                "Too late to enqueue packet, downlink_id: %d, counter_us: %d, "
                "current_counter_us: %d",
                item.packet.downlink_id,
                item.packet.count_us,
                concentrator_count,
            )
            raise TxAckError(TxAckStatus.TOO_LATE)

        if item.linear_count - linear_count > self.tx_max_advance_delay:
            log.warning(
                "Too early to enqueue packet, downlink_id: %d, counter_us: %d, "
                "current_counter_us: %d",
                item.packet.downlink_id,
                item.packet.count_us,
                concentrator_count,
            )
            raise TxAckError(TxAckStatus.TOO_EARLY)

        if self._dc_tracker is not None:
            self._dc_tracker.cleanup(linear_count)
            try:
                self._dc_tracker.try_insert(
                    item.packet.frequency,
                    item.packet.tx_power,
                    dutycycle.Item(
                        start_time=item.linear_count,
                        end_time=item.linear_count + time_on_air,
                    ),
                )
            except (DutyCycleError, DutyCycleFutureItemsError) as exc:
                log.warning(
                    "Packet rejected because of duty-cycle, downlink_id: %d",
                    item.packet.downlink_id,
                )
                raise TxAckError(TxAckStatus.DUTY_CYCLE_OVERFLOW) from exc
            except BandNotFoundError as exc:
                log.warning(
                    "No duty-cycle band found for packet, downlink_id: %d, freq: %d, "
                    "tx_power: %d",
                    item.packet.downlink_id,
                    exc.freq,
                    exc.tx_power_eirp,
                )
                raise TxAckError(TxAckStatus.DUTY_CYCLE_OVERFLOW) from exc
            except Exception as exc:
                log.warning("Duty-cycle tracker error, error: %s", exc)
                raise TxAckError(TxAckStatus.INTERNAL_ERROR) from exc

        log.debug(
            "Packet enqueued, downlink_id: %d, count_us: %d",
            item.packet.downlink_id,
            item.packet.count_us,
        )
        self._items.append(item)
        self._items.sort(key=lambda i: i.linear_count)

    def _linear_count(self, concentrator_count: int) -> timedelta:
        diff_us = (concentrator_count - self._concentrator_count_last) % _COUNTER_MODULUS
        self._linear_count_last += timedelta(microseconds=diff_us)
        self._concentrator_count_last = concentrator_count
        return self._linear_count_last

    def _to_linear_count(self, count_us: int) -> timedelta:
        diff_us = (count_us - self._concentrator_count_last) % _COUNTER_MODULUS
        return self._linear_count_last + timedelta(microseconds=diff_us)

    def _collides(self, count: timedelta, pre_delay: timedelta, post_delay: timedelta) -> bool:
        if count < self._tx_linear_count_finished + pre_delay + self.tx_margin_delay:
            return True

        for other in self._items:
            if count > other.linear_count:
                if count - other.linear_count <= pre_delay + other.post_delay + self.tx_margin_delay:
                    return True
            elif other.linear_count - count <= other.pre_delay + post_delay + self.tx_margin_delay:
                return True

        return False