from __future__ import annotations

import logging
from enum import Enum
from typing import Iterator, Optional, Tuple

from .bucket import Bucket

logger = logging.getLogger(__name__)


class Placement(Enum):
    """How ``SlotWindow.place`` resolved a truncated instant."""

    FRONT = "front"  # matched the most recent slot
    MATCH = "match"  # matched an older retained slot
    ADVANCE = "advance"  # newer than the front: window shifted by one
    INSERT = "insert"  # filled a gap inside the retained span
    DISCARD = "discard"  # older than the tail, dropped

    @property
    def installs(self) -> bool:
        """True when a new bucket was installed already holding the hit."""
        return self is Placement.ADVANCE or self is Placement.INSERT


class SlotWindow:
    """Fixed-capacity, strictly time-descending sequence of buckets.

    - Always holds exactly ``num_slots`` buckets; index 0 is the most recent.
    - No two buckets share a time. Gaps between slots are allowed and are
      not represented.
    - Structural changes build a new tuple and swap it in, so readers that
      grabbed ``snapshot()`` iterate a consistent sequence without locking.
    - Writers must be serialized by the caller (``RollingCounter`` holds the
      structural lock around ``place``).
    """

    __slots__ = ("num_slots", "resolution_ns", "_slots")

    def __init__(self, num_slots: int, resolution_ns: int, start_ns: int) -> None:
        if num_slots < 1:
            raise ValueError("window needs at least one slot")
        self.num_slots = num_slots
        self.resolution_ns = resolution_ns
        # Pre-aged so queries are well defined before the first hit.
        self._slots: Tuple[Bucket, ...] = tuple(
            Bucket(start_ns - i * resolution_ns) for i in range(num_slots)
        )

    @property
    def front(self) -> Bucket:
        return self._slots[0]

    @property
    def tail(self) -> Bucket:
        return self._slots[-1]

    def snapshot(self) -> Tuple[Bucket, ...]:
        return self._slots

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[Bucket]:
        return iter(self._slots)

    def place(self, t: int) -> Tuple[Placement, Optional[Bucket]]:
        """Resolve the bucket for truncated instant ``t``.

        Cases are checked in order: equal to the front, newer than the front,
        older than the tail, then a scan for the retained span. New buckets
        are created with their first hit already counted; callers only call
        ``add_hit`` on the returned bucket when ``placement.installs`` is false.
        """
        slots = self._slots
        front = slots[0]
        if t == front.time:
            return Placement.FRONT, front

        if t > front.time:
            bucket = Bucket(t, 1)
            evicted = slots[-1]
            self._slots = (bucket,) + slots[:-1]
            logger.debug("window advanced to %d, evicted %r", t, evicted)
            return Placement.ADVANCE, bucket

        if t < slots[-1].time:
            logger.debug("discarded hit at %d, older than tail %d", t, slots[-1].time)
            return Placement.DISCARD, None

        pos = 1
        while slots[pos].time > t:
            pos += 1
        if slots[pos].time == t:
            return Placement.MATCH, slots[pos]

        # Shift everything from pos one step toward the tail; the tail falls off.
        bucket = Bucket(t, 1)
        evicted = slots[-1]
        self._slots = slots[:pos] + (bucket,) + slots[pos:-1]
        logger.debug("inserted slot %d at position %d, evicted %r", t, pos, evicted)
        return Placement.INSERT, bucket

    def total_since(self, oldest_ns: int) -> int:
        """Sum hits of every bucket whose time is not before ``oldest_ns``."""
        total = 0
        for bucket in self._slots:
            # Strict descending order makes the first older bucket a stopping point.
            if bucket.time < oldest_ns:
                break
            total += bucket.hits
        return total

    def __str__(self) -> str:
        return "[ " + ", ".join(str(b) for b in self._slots) + " ]"
