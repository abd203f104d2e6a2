"""Chain access: contract ABI, RPC reader and received-count aggregators."""

from daily_gm.chain.aggregator import HTTPAggregator, RPCAggregator
from daily_gm.chain.reader import ChainReader

__all__ = ["ChainReader", "HTTPAggregator", "RPCAggregator"]
