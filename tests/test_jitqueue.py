from dataclasses import dataclass
from datetime import timedelta

import pytest

from concentratord import standard
from concentratord.jitqueue import Queue, TxAckError, TxAckStatus, TxMode
from concentratord.standard import Regulation
from concentratord.tracker import Tracker

SECOND_US = 1_000_000
U32 = 1 << 32


@dataclass
class PacketMock:
    time_on_air_value: timedelta = timedelta(milliseconds=100)
    tx_mode: TxMode = TxMode.IMMEDIATE
    count_us: int = 0
    frequency: int = 868100000
    tx_power: int = 14
    downlink_id: int = 0

    def time_on_air(self) -> timedelta:
        return self.time_on_air_value


class FailingPacket(PacketMock):
    def time_on_air(self) -> timedelta:
        raise RuntimeError("no time on air")


def etsi_tracker() -> Tracker:
    return Tracker(standard.get(standard.Standard.ETSI_EN_300_220), True)


def test_size():
    q = Queue(10)
    assert q.size() == 10


def test_empty_and_full():
    q = Queue(1)
    assert q.empty()
    q.enqueue(100, PacketMock())
    assert not q.empty()
    assert q.full()


def test_enqueue_full():
    q = Queue(2)
    q.enqueue(100, PacketMock())
    q.enqueue(100, PacketMock())
    with pytest.raises(TxAckError) as excinfo:
        q.enqueue(100, PacketMock())
    assert excinfo.value.status is TxAckStatus.QUEUE_FULL


def test_enqueue_immediate():
    q = Queue(2)
    concentrator_count = 100
    q.enqueue(concentrator_count, PacketMock())
    q.enqueue(concentrator_count, PacketMock())

    first_count = concentrator_count + SECOND_US
    pre_delay_us = 1500 + 40000

    # Not yet due one microsecond before the pre-delay window.
    assert q.pop(first_count - pre_delay_us - 1) is None
    first = q.pop(first_count - pre_delay_us)
    assert first.tx_mode is TxMode.TIMESTAMPED
    assert first.count_us == first_count

    first_end = first_count + 100_000
    second_count = first_end + pre_delay_us + 1000
    second = q.pop(second_count - pre_delay_us)
    assert second.tx_mode is TxMode.TIMESTAMPED
    assert second.count_us == second_count
    assert q.empty()


def test_enqueue_immediate_does_not_modify_caller_packet():
    q = Queue(1)
    packet = PacketMock()
    q.enqueue(100, packet)
    assert packet.tx_mode is TxMode.IMMEDIATE
    assert packet.count_us == 0


def test_enqueue_immediate_u32_wrapping():
    q = Queue(2)
    concentrator_count = (0 - (SECOND_US + 1500 + 40000 + 100_000)) % U32
    q.enqueue(concentrator_count, PacketMock())
    q.enqueue(concentrator_count, PacketMock())

    first = q.pop((4294825796 - 41500) % U32)
    assert first.count_us == 4294825796
    second = q.pop((1000 - 41500) % U32)
    assert second.count_us == 1000


def test_pop_empty():
    q = Queue(2)
    assert q.pop(SECOND_US) is None


def test_pop():
    q = Queue(2)
    q.enqueue(SECOND_US, PacketMock(tx_mode=TxMode.TIMESTAMPED, count_us=2 * SECOND_US))
    item = q.pop(2 * SECOND_US)
    assert item.count_us == 2 * SECOND_US


def test_pop_too_far_in_future():
    q = Queue(2)
    q.enqueue(SECOND_US, PacketMock(tx_mode=TxMode.TIMESTAMPED, count_us=2 * SECOND_US))
    assert q.pop(SECOND_US) is None
    assert not q.empty()


def test_pop_u32_wrapping():
    q = Queue(2)
    concentrator_count = (0 - SECOND_US) % U32
    q.enqueue(concentrator_count, PacketMock(tx_mode=TxMode.TIMESTAMPED, count_us=1))
    item = q.pop((0 - 100) % U32)
    assert item.count_us == 1


def test_pop_drops_too_old_packet():
    q = Queue(2)
    q.enqueue(SECOND_US, PacketMock(tx_mode=TxMode.TIMESTAMPED, count_us=2 * SECOND_US))
    assert q.pop(3 * SECOND_US) is None
    assert q.empty()


def test_enqueue_too_late():
    q = Queue(2)
    with pytest.raises(TxAckError) as excinfo:
        q.enqueue(SECOND_US, PacketMock(tx_mode=TxMode.TIMESTAMPED, count_us=SECOND_US + 10_000))
    assert excinfo.value.status is TxAckStatus.TOO_LATE


def test_enqueue_too_early():
    q = Queue(2)
    with pytest.raises(TxAckError) as excinfo:
        q.enqueue(SECOND_US, PacketMock(tx_mode=TxMode.TIMESTAMPED, count_us=601 * SECOND_US))
    assert excinfo.value.status is TxAckStatus.TOO_EARLY


def test_enqueue_collision():
    q = Queue(2)
    q.enqueue(SECOND_US, PacketMock(tx_mode=TxMode.TIMESTAMPED, count_us=2 * SECOND_US))
    with pytest.raises(TxAckError) as excinfo:
        q.enqueue(SECOND_US, PacketMock(tx_mode=TxMode.TIMESTAMPED, count_us=2 * SECOND_US))
    assert excinfo.value.status is TxAckStatus.COLLISION_PACKET


def test_enqueue_time_on_air_error():
    q = Queue(2)
    with pytest.raises(TxAckError) as excinfo:
        q.enqueue(100, FailingPacket())
    assert excinfo.value.status is TxAckStatus.INTERNAL_ERROR


def test_enqueue_duty_cycle_overflow():
    q = Queue(2, etsi_tracker())
    packet = PacketMock(
        time_on_air_value=timedelta(seconds=4),
        tx_mode=TxMode.TIMESTAMPED,
        count_us=2 * SECOND_US,
        frequency=863100000,
        tx_power=14,
    )
    with pytest.raises(TxAckError) as excinfo:
        q.enqueue(SECOND_US, packet)
    assert excinfo.value.status is TxAckStatus.DUTY_CYCLE_OVERFLOW
    assert q.empty()


def test_enqueue_band_not_found():
    q = Queue(2, etsi_tracker())
    packet = PacketMock(tx_mode=TxMode.TIMESTAMPED, count_us=2 * SECOND_US, frequency=920000000)
    with pytest.raises(TxAckError) as excinfo:
        q.enqueue(SECOND_US, packet)
    assert excinfo.value.status is TxAckStatus.DUTY_CYCLE_OVERFLOW


def test_duty_cycle_stats_without_tracker():
    q = Queue(2)
    assert q.get_duty_cycle_stats(SECOND_US) is None


def test_duty_cycle_stats():
    q = Queue(2, etsi_tracker())
    q.enqueue(SECOND_US, PacketMock(tx_mode=TxMode.TIMESTAMPED, count_us=2 * SECOND_US))
    stats = q.get_duty_cycle_stats(3 * SECOND_US)

    assert stats.regulation is Regulation.ETSI_EN_300_220
    assert stats.window == timedelta(hours=1)
    assert len(stats.bands) == 1
    band = stats.bands[0]
    assert band.name == "M"
    assert band.frequency_min == 868000000
    assert band.frequency_max == 868600000
    assert band.load_max == timedelta(seconds=36)
    assert band.load_tracked == timedelta(milliseconds=100)