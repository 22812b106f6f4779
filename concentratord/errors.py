"""Exceptions raised by the concentrator support library."""


class ConcentratordError(Exception):
    """Base class for all errors raised by this package."""


class DutyCycleError(ConcentratordError):
    """The item would exceed the duty-cycle limit."""

    def __init__(self) -> None:
        super().__init__("Item exceeds duty-cycle")


class DutyCycleFutureItemsError(ConcentratordError):
    """Inserting the item would make already scheduled items exceed the duty-cycle."""

    def __init__(self) -> None:
        super().__init__("Item would exceed duty-cycle with future items")


class BandNotFoundError(ConcentratordError):
    """No regulatory band matches the frequency and EIRP."""

    def __init__(self, freq: int, tx_power_eirp: int) -> None:
        self.freq = freq
        self.tx_power_eirp = tx_power_eirp
        super().__init__(f"No band for freq: {freq}, tx_power_eirp: {tx_power_eirp}")


class CommandTimeoutError(ConcentratordError):
    """Waiting for a command timed out."""

    def __init__(self) -> None:
        super().__init__("Timeout")