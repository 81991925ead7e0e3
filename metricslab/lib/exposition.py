"""Serializers turning registry snapshots into exportable payloads."""

from __future__ import annotations

import re
from typing import Any, Iterable, Iterator

from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import CounterMetricFamily
from prometheus_client.registry import Collector

from metricslab.lib.logger import get_logger
from metricslab.lib.metrics import CounterSnapshot, MetricsRegistry

logger = get_logger(__name__)

_INVALID_NAME_CHARS = re.compile(r"[^a-zA-Z0-9_:]")
_INVALID_LABEL_CHARS = re.compile(r"[^a-zA-Z0-9_]")


def sanitize_metric_name(name: str) -> str:
    """Map a dotted metric name onto the Prometheus naming rules."""

    safe = _INVALID_NAME_CHARS.sub("_", name)
    if safe[:1].isdigit():
        safe = f"_{safe}"
    return safe


def exposed_family_name(name: str) -> str:
    """Return the family name Prometheus sees, without the counter ``_total`` suffix."""

    safe = sanitize_metric_name(name)
    if safe.endswith("_total"):
        safe = safe[: -len("_total")]
    return safe


def sanitize_label_name(name: str) -> str:
    safe = _INVALID_LABEL_CHARS.sub("_", name)
    if safe[:1].isdigit():
        safe = f"_{safe}"
    return safe


def snapshot_payload(samples: Iterable[CounterSnapshot]) -> list[dict[str, Any]]:
    """Return JSON-serializable dictionaries for the given samples."""

    return [
        {
            "name": sample.name,
            "tags": dict(sample.tags),
            "value": sample.value,
            "description": sample.description,
        }
        for sample in samples
    ]


class SnapshotCollector(Collector):
    """prometheus_client collector reading counters from a ``MetricsRegistry``."""

    def __init__(self, registry: MetricsRegistry) -> None:
        self._registry = registry

    def collect(self) -> Iterator[CounterMetricFamily]:
        families: dict[str, CounterMetricFamily] = {}
        owners: dict[str, str] = {}
        seen_labels: dict[str, set[tuple[tuple[str, str], ...]]] = {}
        for sample in self._registry.snapshot():
            family_name = exposed_family_name(sample.name)
            if not family_name:
                logger.warning("Skipping counter with no exposable name", extra={"metric": sample.name})
                continue
            owner = owners.setdefault(family_name, sample.name)
            if owner != sample.name:
                logger.warning(
                    "Skipping counter whose exposed name collides with another metric",
                    extra={"metric": sample.name, "exposed_as": family_name, "owner": owner},
                )
                continue
            labels = {sanitize_label_name(key): value for key, value in sample.tags.items()}
            if len(labels) != len(sample.tags):
                logger.warning(
                    "Skipping counter whose tag keys collide once sanitized",
                    extra={"metric": sample.name, "tags": sample.tags},
                )
                continue
            label_key = tuple(sorted(labels.items()))
            exposed = seen_labels.setdefault(family_name, set())
            if label_key in exposed:
                logger.warning(
                    "Skipping counter exposed with the same labels as another series",
                    extra={"metric": sample.name, "tags": sample.tags},
                )
                continue
            exposed.add(label_key)
            family = families.get(family_name)
            if family is None:
                family = CounterMetricFamily(family_name, sample.description or sample.name)
                families[family_name] = family
            family.add_sample(f"{family_name}_total", labels, float(sample.value))
        yield from families.values()


def render_prometheus(registry: MetricsRegistry) -> bytes:
    """Render every counter in the Prometheus text exposition format."""

    collector_registry = CollectorRegistry()
    collector_registry.register(SnapshotCollector(registry))
    return generate_latest(collector_registry)
