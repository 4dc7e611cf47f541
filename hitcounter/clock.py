from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from typing import Optional

NS_PER_MS = 1_000_000
NS_PER_SECOND = 1_000_000_000
NS_PER_MINUTE = 60 * NS_PER_SECOND


def truncate(ts_ns: int, resolution_ns: int) -> int:
    """Floor ``ts_ns`` to the greatest multiple of ``resolution_ns`` not exceeding it."""
    # Python floor division rounds toward -inf, so negative instants floor too.
    return ts_ns - (ts_ns % resolution_ns)


class Clock(ABC):
    """Source of the current instant, in nanoseconds."""

    @abstractmethod
    def now(self) -> int:
        raise NotImplementedError


class SystemClock(Clock):
    """Wall clock backed by ``time.time_ns``."""

    __slots__ = ()

    def now(self) -> int:
        return time.time_ns()

    def __repr__(self) -> str:
        return "SystemClock()"


class ManualClock(Clock):
    """Clock whose "now" is pinned and only moves when told to.

    - Meant for deterministic tests: no wall-clock sleeps needed.
    - Each counter can be given its own instance, so several simulated
      timelines can coexist in one process.
    """

    __slots__ = ("_now_ns", "_lock")

    def __init__(self, start_ns: Optional[int] = None) -> None:
        self._now_ns = time.time_ns() if start_ns is None else int(start_ns)
        self._lock = threading.Lock()

    def now(self) -> int:
        return self._now_ns

    def set(self, ts_ns: int) -> None:
        with self._lock:
            self._now_ns = int(ts_ns)

    def advance(self, delta_ns: int) -> int:
        """Move the clock forward by ``delta_ns`` and return the new instant."""
        with self._lock:
            self._now_ns += int(delta_ns)
            return self._now_ns

    def __repr__(self) -> str:
        return f"ManualClock(now={self._now_ns})"


DEFAULT_CLOCK: Clock = SystemClock()
