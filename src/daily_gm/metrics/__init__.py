"""Metrics: Prometheus metrics collection and exposure."""

from __future__ import annotations

from daily_gm.metrics.collector import GMMetrics, MetricsCollector

__all__ = ["GMMetrics", "MetricsCollector"]
