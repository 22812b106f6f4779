"""Conversions between durations and the concentrator's microsecond counter."""

from datetime import timedelta

_COUNTER_MODULUS = 1 << 32
_ONE_MICROSECOND = timedelta(microseconds=1)


def to_concentrator_count(duration: timedelta) -> int:
    """Return the 32-bit concentrator counter value for a duration, wrapping around."""
    return (duration // _ONE_MICROSECOND) % _COUNTER_MODULUS