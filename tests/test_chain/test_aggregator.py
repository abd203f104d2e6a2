"""Tests for the received-count aggregators: HTTP via httpx mock transport."""

from __future__ import annotations

import httpx
import pytest
from fakes import ALICE, FakeChain

from daily_gm.chain.aggregator import FETCH_GMS_PATH, HTTPAggregator, RPCAggregator
from daily_gm.config.settings import AggregatorConfig
from daily_gm.errors.chain_errors import RemoteUnavailableError

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _aggregator(handler) -> HTTPAggregator:
    """HTTPAggregator whose internal client uses a mock transport."""
    aggregator = HTTPAggregator(AggregatorConfig(url="http://aggregator.test"))
    aggregator._client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        base_url="http://aggregator.test",
    )
    return aggregator


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestHTTPAggregatorLifecycle:
    async def test_not_connected_by_default(self) -> None:  # noqa: ASYNC910
        assert HTTPAggregator(AggregatorConfig()).is_connected is False

    async def test_connect_and_close(self) -> None:
        aggregator = HTTPAggregator(AggregatorConfig())
        await aggregator.connect()
        assert aggregator.is_connected is True
        await aggregator.close()
        assert aggregator.is_connected is False

    async def test_not_connected_raises(self) -> None:
        with pytest.raises(RemoteUnavailableError, match="not connected"):
            await HTTPAggregator(AggregatorConfig()).fetch_count(ALICE)


# ---------------------------------------------------------------------------
# fetch_count
# ---------------------------------------------------------------------------


class TestHTTPAggregatorFetch:
    async def test_returns_count(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == FETCH_GMS_PATH
            assert request.url.params["address"] == ALICE
            return httpx.Response(200, json={"count": 42})

        assert await _aggregator(handler).fetch_count(ALICE) == 42

    async def test_zero_is_valid(self) -> None:
        aggregator = _aggregator(lambda _: httpx.Response(200, json={"count": 0}))
        assert await aggregator.fetch_count(ALICE) == 0

    async def test_error_body_surfaces(self) -> None:
        aggregator = _aggregator(lambda _: httpx.Response(500, json={"error": "Alchemy down"}))
        with pytest.raises(RemoteUnavailableError, match="Alchemy down") as exc_info:
            await aggregator.fetch_count(ALICE)
        assert exc_info.value.status_code == 500

    async def test_non_json_error(self) -> None:
        aggregator = _aggregator(lambda _: httpx.Response(503, text="Service Unavailable"))
        with pytest.raises(RemoteUnavailableError, match="503"):
            await aggregator.fetch_count(ALICE)

    @pytest.mark.parametrize(
        "body",
        [{}, {"count": -1}, {"count": "7"}, {"count": True}, [1, 2]],
    )
    async def test_malformed_payload(self, body: object) -> None:
        aggregator = _aggregator(lambda _: httpx.Response(200, json=body))
        with pytest.raises(RemoteUnavailableError):
            await aggregator.fetch_count(ALICE)

    async def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(RemoteUnavailableError, match="connection refused"):
            await _aggregator(handler).fetch_count(ALICE)


# ---------------------------------------------------------------------------
# RPCAggregator
# ---------------------------------------------------------------------------


class TestRPCAggregator:
    async def test_single_full_range_query(self) -> None:
        chain = FakeChain(height=5_000_000)
        chain.add_gm(ALICE, 150)
        chain.add_gm(ALICE, 4_999_999)
        aggregator = RPCAggregator(chain, deployment_block=100)

        assert await aggregator.fetch_count(ALICE) == 2
        assert chain.calls == [(100, 5_000_000)]

    async def test_before_deployment(self) -> None:
        chain = FakeChain(height=50)
        aggregator = RPCAggregator(chain, deployment_block=100)

        assert await aggregator.fetch_count(ALICE) == 0
        assert chain.calls == []

    async def test_failure_propagates(self) -> None:
        chain = FakeChain(height=500)
        chain.fail_at = 100
        with pytest.raises(RemoteUnavailableError):
            await RPCAggregator(chain, deployment_block=100).fetch_count(ALICE)
