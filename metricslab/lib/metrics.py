"""In-memory registry of tagged counters for request instrumentation."""

from __future__ import annotations

import math
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Dict, Tuple, Union

from metricslab.lib.logger import get_logger

logger = get_logger(__name__)

TagPairs = Tuple[Tuple[str, str], ...]
TagsInput = Union[Mapping[str, str], Iterable[Tuple[str, str]], None]
Number = Union[int, float]


class MetricsError(Exception):
    """Base class for registry errors."""


class InvalidIdentity(MetricsError, ValueError):
    """Raised when a counter name or tag set is malformed."""


class InvalidIncrement(MetricsError, ValueError):
    """Raised when a delta is negative, non-finite or not a number."""


class CardinalityLimitExceeded(MetricsError):
    """Raised when a metric name already holds the maximum number of series."""

    def __init__(self, name: str, limit: int) -> None:
        super().__init__(f"Metric '{name}' reached its limit of {limit} tag sets")
        self.name = name
        self.limit = limit


def canonical_tags(tags: TagsInput) -> TagPairs:
    """Validate *tags* and return them as a key-sorted tuple of pairs."""

    if tags is None:
        return ()
    pairs = tags.items() if isinstance(tags, Mapping) else tags
    seen: Dict[str, str] = {}
    for pair in pairs:
        try:
            key, value = pair
        except (TypeError, ValueError) as exc:
            raise InvalidIdentity(f"Tag entry {pair!r} is not a key/value pair") from exc
        if not isinstance(key, str) or not key:
            raise InvalidIdentity(f"Tag key {key!r} must be a non-empty string")
        if not isinstance(value, str):
            raise InvalidIdentity(f"Tag '{key}' has non-string value {value!r}")
        if key in seen:
            raise InvalidIdentity(f"Duplicate tag key '{key}'")
        seen[key] = value
    return tuple(sorted(seen.items()))


@dataclass(frozen=True)
class CounterSnapshot:
    """Point-in-time value of one counter series."""

    name: str
    tags: Dict[str, str]
    value: Number
    description: str = ""


@dataclass(eq=False)
class Counter:
    """Monotonic counter; instances double as the handle returned by the registry."""

    name: str
    tag_pairs: TagPairs = ()
    description: str = ""
    _value: Number = field(default=0, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @property
    def tags(self) -> Dict[str, str]:
        return dict(self.tag_pairs)

    @property
    def value(self) -> Number:
        with self._lock:
            return self._value

    def increment(self, delta: Number = 1) -> None:
        if (
            isinstance(delta, bool)
            or not isinstance(delta, (int, float))
            or not math.isfinite(delta)
            or delta < 0
        ):
            raise InvalidIncrement(f"Counter '{self.name}' cannot be incremented by {delta!r}")
        if delta == 0:
            return
        with self._lock:
            self._value += delta

    def snapshot(self) -> CounterSnapshot:
        return CounterSnapshot(self.name, self.tags, self.value, self.description)


class MetricsRegistry:
    """Thread-safe store of counters keyed by name and canonical tag set.

    A registry is built once per application and handed to every component
    that records metrics. Series are created lazily and live as long as the
    registry does. ``cardinality_limit`` optionally caps the number of tag sets
    a single metric name may hold.
    """

    def __init__(self, cardinality_limit: int | None = None) -> None:
        if cardinality_limit is not None and cardinality_limit <= 0:
            raise ValueError("cardinality_limit must be positive")
        self._lock = threading.Lock()
        self._counters: Dict[Tuple[str, TagPairs], Counter] = {}
        self._series_per_name: Dict[str, int] = {}
        self._cardinality_limit = cardinality_limit

    @property
    def cardinality_limit(self) -> int | None:
        return self._cardinality_limit

    def get_or_create_counter(self, name: str, tags: TagsInput = None, description: str = "") -> Counter:
        """Return the counter for ``(name, tags)``, creating it on first use."""

        if not isinstance(name, str) or not name:
            raise InvalidIdentity("Metric name must be a non-empty string")
        key = (name, canonical_tags(tags))
        with self._lock:
            counter = self._counters.get(key)
            if counter is not None:
                return counter
            series = self._series_per_name.get(name, 0)
            if self._cardinality_limit is not None and series >= self._cardinality_limit:
                logger.warning(
                    "Cardinality limit reached",
                    extra={"metric": name, "limit": self._cardinality_limit},
                )
                raise CardinalityLimitExceeded(name, self._cardinality_limit)
            counter = Counter(name=name, tag_pairs=key[1], description=description)
            self._counters[key] = counter
            self._series_per_name[name] = series + 1
        logger.debug("Registered counter", extra={"metric": name, "tags": counter.tags})
        return counter

    def increment(self, handle: Counter, delta: Number = 1) -> None:
        handle.increment(delta)

    def snapshot(self) -> list[CounterSnapshot]:
        """Read every counter, ordered by name then tags."""

        with self._lock:
            counters = sorted(self._counters.items(), key=lambda item: item[0])
        return [counter.snapshot() for _, counter in counters]

    def cardinality(self, name: str) -> int:
        with self._lock:
            return self._series_per_name.get(name, 0)

    def __len__(self) -> int:
        with self._lock:
            return len(self._counters)
