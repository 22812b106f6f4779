"""LoRa gateway concentrator building blocks: JIT queue, duty-cycle regulation, GNSS, signals and reset."""

__version__ = "4.5.0"
__all__ = [
    "dutycycle",
    "errors",
    "gnss",
    "gpsd",
    "helpers",
    "jitqueue",
    "region",
    "reset",
    "signals",
    "standard",
    "tracker",
]