"""HTTP API: the aggregator endpoint, account stats, health and metrics."""
