"""Metrics collector: Prometheus counters and histograms.

Exposed metrics:
- ``dailygm_sync_total`` counter (source: aggregator, scan, failed)
- ``dailygm_scan_windows_total`` counter
- ``dailygm_scan_duration_seconds`` histogram
- ``dailygm_aggregator_duration_seconds`` histogram
- ``dailygm_submission_total`` counter (outcome: sent or an error code)
"""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram

_PREFIX = "dailygm"


class MetricsCollector:
    """Low-level Prometheus collector that owns the registry.

    Use :class:`GMMetrics` for the high-level tracking interface.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._registry

    def histogram(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Histogram:
        """Register and return a Histogram."""
        return Histogram(name, doc, labels, registry=self._registry)

    def counter(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Counter:
        """Register and return a Counter."""
        return Counter(name, doc, labels, registry=self._registry)


class GMMetrics:
    """Sync, scan and submission metrics."""

    def __init__(self, collector: MetricsCollector | None = None) -> None:
        self._collector = collector or MetricsCollector()

        self._sync = self._collector.counter(
            f"{_PREFIX}_sync_total",
            "Received-count synchronizations by the source that produced the count",
            ("source",),
        )
        self._scan_windows = self._collector.counter(
            f"{_PREFIX}_scan_windows_total",
            "Log windows fetched by the chunked scanner",
        )
        self._scan_duration = self._collector.histogram(
            f"{_PREFIX}_scan_duration_seconds",
            "Duration of incremental scan passes",
        )
        self._aggregator_duration = self._collector.histogram(
            f"{_PREFIX}_aggregator_duration_seconds",
            "Duration of aggregator count requests",
        )
        self._submissions = self._collector.counter(
            f"{_PREFIX}_submission_total",
            "GM submission attempts by outcome",
            ("outcome",),
        )

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._collector.registry

    def inc_sync(self, source: str) -> None:
        self._sync.labels(source=source).inc()

    def inc_scan_window(self) -> None:
        self._scan_windows.inc()

    def observe_scan(self, seconds: float) -> None:
        self._scan_duration.observe(seconds)

    def observe_aggregator(self, seconds: float) -> None:
        self._aggregator_duration.observe(seconds)

    def inc_submission(self, outcome: str) -> None:
        self._submissions.labels(outcome=outcome).inc()
