from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone

from .clock import NS_PER_SECOND


def format_ns(ts_ns: int) -> str:
    """Render a nanosecond instant as an ISO-8601 UTC timestamp."""
    seconds, rem = divmod(ts_ns, NS_PER_SECOND)
    moment = datetime.fromtimestamp(seconds, tz=timezone.utc) + timedelta(microseconds=rem // 1000)
    return moment.isoformat()


class Bucket:
    """One time slot of a rolling window.

    - ``time`` is the resolution-truncated start of the slot; it never changes.
    - ``add_hit`` takes the bucket's own lock, which is far finer than the
      window's structural lock: concurrent hits on the active slot only
      contend with each other.
    - ``hits`` is a plain read and may be momentarily stale.
    """

    __slots__ = ("_time", "_hits", "_lock")

    def __init__(self, time_ns: int, hits: int = 0) -> None:
        self._time = time_ns
        self._hits = hits
        self._lock = threading.Lock()

    @property
    def time(self) -> int:
        return self._time

    @property
    def hits(self) -> int:
        return self._hits

    def add_hit(self) -> int:
        with self._lock:
            self._hits += 1
            return self._hits

    def __str__(self) -> str:
        return f"{self._hits} hits at {format_ns(self._time)}"

    def __repr__(self) -> str:
        return f"Bucket(time_ns={self._time}, hits={self._hits})"
