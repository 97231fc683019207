from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False, slots=True)
class HostGaugeError(Exception):
    """A controlled error raised by hostgauge.

    Construction-time mistakes (bad config, reused instrument names) raise
    one of the subclasses below. Pull-time provider failures are absorbed by
    the sampler unless its failure policy says otherwise.
    """

    code: str
    message: str

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code}: {self.message}"


class ConfigError(HostGaugeError):
    def __init__(self, message: str) -> None:
        super().__init__(code="config_error", message=message)


class DuplicateInstrumentError(HostGaugeError):
    def __init__(self, name: str) -> None:
        super().__init__(
            code="duplicate_instrument",
            message=f"Instrument {name!r} is already registered.",
        )


class ProviderError(HostGaugeError):
    """An OS metric provider failed to produce a reading."""

    def __init__(self, message: str) -> None:
        super().__init__(code="provider_error", message=message)


class UnsupportedError(ProviderError):
    """The current platform has no facility for the requested reading."""

    def __init__(self, message: str) -> None:
        HostGaugeError.__init__(self, code="unsupported", message=message)


class ListenerClosedError(HostGaugeError):
    def __init__(self) -> None:
        super().__init__(code="listener_closed", message="Listener has been closed.")
