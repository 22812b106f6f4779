# concentratord

Building blocks for a LoRa gateway concentrator daemon, usable as a plain
Python library with no third-party dependencies.

## Modules

- `concentratord.jitqueue`: a just-in-time downlink queue. `Queue` schedules
  packets against the 32-bit microsecond concentrator counter and handles
  counter roll-over. An immediate packet is turned into a timestamped one at
  the first free slot, one second or more ahead. `enqueue` raises
  `TxAckError`, whose `status` is a `TxAckStatus`, when the queue is full,
  when a packet collides with another, when it is too late or too early, or
  when it would exceed the duty-cycle budget. `pop` returns the first packet
  once it is due. `get_duty_cycle_stats` returns a `DutyCycleStats` made of
  `DutyCycleBand`s when the queue was given a duty-cycle tracker. Packets only
  need to follow the `TxPacket` protocol: the attributes `downlink_id`,
  `tx_mode`, `count_us`, `frequency` and `tx_power`, and a `time_on_air()`
  method. The queue stores a copy of each packet.
- `concentratord.dutycycle`: `Item` (a start and end time) and `Tracker`, which
  enforces a maximum airtime within a sliding window. `try_insert` raises
  `DutyCycleError` or `DutyCycleFutureItemsError`.
- `concentratord.tracker`: `Tracker` keeps one duty-cycle tracker for each band
  of a regulatory `Configuration`. It offers `try_insert`, `cleanup`, `window`,
  `tracked_durations` and `regulation`.
- `concentratord.standard`: the regulatory standards (`Standard`, `Regulation`),
  their bands (`Band`) and `Configuration.get_band`, which raises
  `BandNotFoundError`. `get(standard)` builds a configuration. ETSI EN 300 220
  is included.
- `concentratord.region`: `tx_min_max_freqs(region)` returns the permitted
  transmit frequency ranges for a `Region`, given as the enum or as its name
  (for example `"eu868"`).
- `concentratord.gnss`: `parse_device(path)` turns a configuration string into
  a `Device`. An empty string, a TTY path or `gpsd://host:port` are accepted.
  `str(device)` gives the string back.
- `concentratord.gpsd`: `get_reader(server)` connects to gpsd at `host:port`
  and enables the watch. It configures the first u-blox device gpsd reports
  for NAV-TIMEGPS messages and returns a binary reader of the raw output.
  Failures raise `GpsdError`.
- `concentratord.signals`: `SignalPool` hands out receivers (`queue.SimpleQueue`)
  and sends every `Signal` (`SignalKind.STOP` or `SignalKind.CONFIGURATION`)
  to all of them.
- `concentratord.reset`: `setup(ResetConfiguration(...))` requests the GPIO
  output lines through the Linux GPIO character device and stores the reset
  commands. `reset()` powers up and pulses the lines, then runs the commands
  in order.
- `concentratord.helpers`: `to_concentrator_count(duration)` converts a
  `timedelta` to the wrapping 32-bit microsecond counter.
- `concentratord.errors`: `ConcentratordError` and its subclasses.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

```python
from datetime import timedelta

from concentratord import standard, tracker
from concentratord.dutycycle import Item

config = standard.get(standard.Standard.ETSI_EN_300_220)
dc = tracker.Tracker(config, True)

# 3.6 s in band K (0.1 % of one hour) fits exactly.
dc.try_insert(863000000, 16, Item(timedelta(0), timedelta(milliseconds=3600)))
print(dc.window())  # 1:00:00
```

```python
from dataclasses import dataclass
from datetime import timedelta

from concentratord.jitqueue import Queue, TxMode


@dataclass
class Packet:
    downlink_id: int
    tx_mode: TxMode
    count_us: int
    frequency: int
    tx_power: int

    def time_on_air(self) -> timedelta:
        return timedelta(milliseconds=100)


queue = Queue(32)
queue.enqueue(100, Packet(1, TxMode.IMMEDIATE, 0, 868100000, 14))
packet = queue.pop(1_000_100)
print(packet.tx_mode, packet.count_us)  # TxMode.TIMESTAMPED 1000100
```

```python
from concentratord.gnss import parse_device

device = parse_device("gpsd://localhost:2947")
print(device.kind, str(device))
```

## What this package does not do

It has no command-line program and runs no daemon. It does not talk to
concentrator radio chips: receiving, sending, reading GPS time from the chip
and measuring time on air are left to the caller, which passes packets and
counter values in. It opens no sockets for publishing events or taking
commands, and it keeps no gateway statistics.