from __future__ import annotations


class HitCounterError(Exception):
    """Base class for errors raised by the hitcounter package."""


class InvalidDuration(HitCounterError, ValueError):
    """Raised when a counter duration is not a proper multiple of its resolution."""

    def __init__(self, duration_ns: int | None = None, resolution_ns: int | None = None) -> None:
        self.duration_ns = duration_ns
        self.resolution_ns = resolution_ns
        message = "counter duration must be a multiple of its resolution"
        if duration_ns is not None and resolution_ns is not None:
            message = f"{message} (duration={duration_ns}ns, resolution={resolution_ns}ns)"
        super().__init__(message)


class ConfigError(HitCounterError, ValueError):
    """Raised when a counter configuration mapping or file is malformed."""
