"""Signals broadcast to the worker threads of the daemon."""

from __future__ import annotations

import enum
import queue
from dataclasses import dataclass, field
from typing import Any


class SignalKind(enum.Enum):
    """The kinds of signal that can be broadcast."""

    STOP = "Stop"
    CONFIGURATION = "Configuration"


@dataclass(frozen=True)
class Signal:
    """A signal, carrying a gateway configuration for CONFIGURATION."""

    kind: SignalKind
    configuration: Any = None

    def __str__(self) -> str:
        return self.kind.value


@dataclass
class SignalPool:
    """Broadcasts signals to every receiver handed out."""

    _receivers: list[queue.SimpleQueue] = field(default_factory=list)

    def new_receiver(self) -> queue.SimpleQueue:
        """Return a new queue that receives every signal sent from now on."""
        receiver: queue.SimpleQueue = queue.SimpleQueue()
        self._receivers.append(receiver)
        return receiver

    def send_signal(self, signal: Signal) -> None:
        """Deliver the signal to every receiver."""
        for receiver in self._receivers:
            receiver.put(signal)