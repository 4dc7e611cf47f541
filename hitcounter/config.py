from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .clock import NS_PER_SECOND, Clock
from .counter import RollingCounter
from .errors import ConfigError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

DEFAULT_DURATION_SECONDS = 60
DEFAULT_RESOLUTION_SECONDS = 1


@dataclass
class CounterConfig:
    """Rolling counter configuration.

    Each quantity accepts either unit:
    - duration_ns / duration_seconds
    - resolution_ns / resolution_seconds
    Whichever one is missing is derived from the other. When neither is
    given, a 60s window at 1s resolution is used. If both are given the
    nanosecond value wins.
    """

    duration_ns: Optional[int] = None
    duration_seconds: Optional[float] = None
    resolution_ns: Optional[int] = None
    resolution_seconds: Optional[float] = None
    consistent_reads: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.duration_ns, self.duration_seconds = _reconcile(
            self.duration_ns, self.duration_seconds, DEFAULT_DURATION_SECONDS
        )
        self.resolution_ns, self.resolution_seconds = _reconcile(
            self.resolution_ns, self.resolution_seconds, DEFAULT_RESOLUTION_SECONDS
        )
        self.log_level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigError(f"unknown log level: {self.log_level}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CounterConfig":
        if not isinstance(data, Mapping):
            raise ConfigError(f"counter configuration must be a mapping, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"unknown counter configuration keys: {', '.join(unknown)}")
        try:
            return cls(**dict(data))
        except ConfigError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigError(f"invalid counter configuration: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _reconcile(ns: Optional[int], seconds: Optional[float], default_seconds: float):
    if ns is None and seconds is None:
        return int(default_seconds * NS_PER_SECOND), default_seconds
    if ns is None:
        return int(round(float(seconds) * NS_PER_SECOND)), seconds
    ns = int(ns)
    return ns, ns / NS_PER_SECOND


def load_config(path: Union[str, Path]) -> CounterConfig:
    """Load a ``CounterConfig`` from a YAML or JSON file.

    The settings may sit at the top level or under a ``counter`` key. An
    empty file yields the defaults.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot parse {path}: {e}") from e

    if data is None:
        logger.warning(f"Config file {path} is empty, using defaults")
        return CounterConfig()
    if isinstance(data, Mapping) and "counter" in data:
        data = data["counter"]
    return CounterConfig.from_dict(data)


def build_counter(config: CounterConfig, clock: Optional[Clock] = None) -> RollingCounter:
    """Create the counter described by ``config``; raises ``InvalidDuration`` if it is inconsistent."""
    return RollingCounter(
        config.duration_ns,
        config.resolution_ns,
        clock=clock,
        consistent_reads=config.consistent_reads,
    )


def configure_logging(level: Union[str, int] = "INFO") -> None:
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    logging.basicConfig(level=level, format=LOG_FORMAT)
