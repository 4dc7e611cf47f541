from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Optional

from .clock import DEFAULT_CLOCK, Clock, truncate
from .errors import InvalidDuration
from .window import Placement, SlotWindow

logger = logging.getLogger(__name__)


class HitCounter(ABC):
    """Interface shared by hit counters."""

    @abstractmethod
    def add_hit(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def add_hit_at_time(self, t: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_hits(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def get_duration(self) -> int:
        raise NotImplementedError


class RollingCounter(HitCounter):
    """Fixed-memory counter of hits over a rolling time window.

    The window is ``duration_ns // resolution_ns`` buckets, allocated once at
    construction and never grown or shrunk. Time only moves when a hit is
    recorded; there are no timers or background threads.

    Concurrency:
    - A single structural lock serializes the decision of which bucket a hit
      belongs to, together with any shift/insert of the window.
    - The increment of an existing bucket happens on that bucket's own lock,
      after the structural lock is released. The bucket is resolved by
      reference under the lock, so a concurrent shift can never redirect the
      increment to another slot.
    - ``get_hits`` reads without the structural lock unless
      ``consistent_reads`` is set.

    Example: ``RollingCounter(5 * NS_PER_MINUTE, NS_PER_MINUTE)`` counts hits
    over a rolling 5-minute period at minute granularity. For the smallest
    footprint, pick the largest resolution that divides the duration.
    """

    __slots__ = ("_window", "_res", "_clock", "_lock", "_consistent_reads")

    def __init__(
        self,
        duration_ns: int,
        resolution_ns: int,
        clock: Optional[Clock] = None,
        consistent_reads: bool = False,
    ) -> None:
        if resolution_ns <= 0 or duration_ns <= resolution_ns or duration_ns % resolution_ns != 0:
            raise InvalidDuration(duration_ns, resolution_ns)

        self._res = resolution_ns
        self._clock = clock if clock is not None else DEFAULT_CLOCK
        self._lock = threading.Lock()
        self._consistent_reads = consistent_reads
        num_slots = duration_ns // resolution_ns
        self._window = SlotWindow(num_slots, resolution_ns, self._now())
        logger.info(
            f"Rolling counter created: duration={duration_ns}ns resolution={resolution_ns}ns slots={num_slots}"
        )

    def _now(self) -> int:
        return truncate(self._clock.now(), self._res)

    @property
    def resolution(self) -> int:
        return self._res

    @property
    def num_slots(self) -> int:
        return len(self._window)

    @property
    def clock(self) -> Clock:
        return self._clock

    def get_duration(self) -> int:
        """Configured window duration, in nanoseconds."""
        return len(self._window) * self._res

    def add_hit(self) -> None:
        """Record one hit at the current instant.

        The hit stays included in ``get_hits`` until the window duration has
        elapsed, or until capacity forces its slot out.
        """
        self.add_hit_at_time(self._clock.now())

    def add_hit_at_time(self, t: int) -> None:
        """Record one hit at instant ``t`` (nanoseconds).

        Useful when the moment a hit happened and the moment it is recorded
        differ, e.g. deferred bookkeeping in a request handler. A hit older
        than the oldest retained slot is dropped silently.
        """
        t = truncate(t, self._res)
        with self._lock:
            placement, bucket = self._window.place(t)
        if bucket is not None and not placement.installs:
            bucket.add_hit()

    def get_hits(self) -> int:
        """Total number of hits within the window ending now."""
        oldest = self._now() - self._res * (len(self._window) - 1)
        if self._consistent_reads:
            with self._lock:
                return self._window.total_since(oldest)
        return self._window.total_since(oldest)

    def __str__(self) -> str:
        return str(self._window)

    def __repr__(self) -> str:
        return (
            f"RollingCounter(duration_ns={self.get_duration()}, resolution_ns={self._res}, "
            f"clock={self._clock!r})"
        )


def new_counter(duration_ns: int, resolution_ns: int, **kwargs) -> RollingCounter:
    """Create a ``RollingCounter``; raises ``InvalidDuration`` on a bad configuration."""
    return RollingCounter(duration_ns, resolution_ns, **kwargs)
