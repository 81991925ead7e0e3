"""Counter bookkeeping for the hello endpoint."""

from __future__ import annotations

from metricslab.lib.metrics import Counter, MetricsRegistry

HELLO_COUNTER_NAME = "app.hello.requests"
HELLO_COUNTER_TAGS = {"endpoint": "/hello"}
HELLO_COUNTER_DESCRIPTION = "Number of hello endpoint requests"


class HelloMetrics:
    """Holds the hello request counter, registered once at startup."""

    def __init__(self, registry: MetricsRegistry) -> None:
        self._counter: Counter = registry.get_or_create_counter(
            HELLO_COUNTER_NAME,
            HELLO_COUNTER_TAGS,
            description=HELLO_COUNTER_DESCRIPTION,
        )

    @property
    def counter(self) -> Counter:
        return self._counter

    def increment_counter(self) -> None:
        self._counter.increment()
