"""Shared test fixtures for the daily-gm test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from fakes import CONTRACT, FakeAggregator, FakeChain, FakeNaming, FakeWallet

from daily_gm.config.settings import (
    AggregatorConfig,
    AggregatorMode,
    AppConfig,
    CacheConfig,
    CacheEngine,
    ChainConfig,
    ScanConfig,
    WalletConfig,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from daily_gm.cache.client import CacheClient
    from daily_gm.engine.client import DailyGMEngine


@pytest.fixture
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture
def naming() -> FakeNaming:
    return FakeNaming()


@pytest.fixture
def wallet() -> FakeWallet:
    return FakeWallet()


@pytest.fixture
def app_config() -> AppConfig:
    """Provide a test AppConfig with safe defaults: memory cache, no delays."""
    return AppConfig(
        chain=ChainConfig(contract_address=CONTRACT, deployment_block=100),
        aggregator=AggregatorConfig(mode=AggregatorMode.RPC),
        cache=CacheConfig(engine=CacheEngine.MEMORY),
        scan=ScanConfig(max_window=10, window_delay=0),
        wallet=WalletConfig(settle_delay=0),
    )


@pytest.fixture
async def memory_cache() -> AsyncIterator[CacheClient]:
    """A connected in-memory cache client."""
    from daily_gm.cache.client import CacheClient

    client = CacheClient(CacheConfig(engine=CacheEngine.MEMORY))
    await client.connect()
    yield client
    await client.close()


@pytest.fixture
def aggregator() -> FakeAggregator:
    """An aggregator that is down, so syncs take the scan path."""
    return FakeAggregator()


@pytest.fixture
def gm_engine(
    app_config: AppConfig,
    chain: FakeChain,
    aggregator: FakeAggregator,
    naming: FakeNaming,
    wallet: FakeWallet,
) -> DailyGMEngine:
    """An uninitialized engine wired to the in-memory fakes."""
    from daily_gm.engine.client import DailyGMEngine
    from daily_gm.metrics.collector import GMMetrics

    return DailyGMEngine(
        app_config,
        reader=chain,
        aggregator=aggregator,
        naming=naming,
        wallet=wallet,
        metrics=GMMetrics(),
    )
