"""Fixed-memory rolling time-window hit counter.

Hits are grouped into resolution-wide buckets held in a fixed-capacity,
time-descending window; totals cover the window ending at "now".
"""

from .clock import NS_PER_MINUTE, NS_PER_MS, NS_PER_SECOND, Clock, ManualClock, SystemClock, truncate
from .bucket import Bucket
from .window import Placement, SlotWindow
from .counter import HitCounter, RollingCounter, new_counter
from .errors import ConfigError, HitCounterError, InvalidDuration
from .config import CounterConfig, build_counter, configure_logging, load_config

__all__ = [
    "NS_PER_MS",
    "NS_PER_SECOND",
    "NS_PER_MINUTE",
    "Clock",
    "SystemClock",
    "ManualClock",
    "truncate",
    "Bucket",
    "SlotWindow",
    "Placement",
    "HitCounter",
    "RollingCounter",
    "new_counter",
    "HitCounterError",
    "InvalidDuration",
    "ConfigError",
    "CounterConfig",
    "load_config",
    "build_counter",
    "configure_logging",
]
