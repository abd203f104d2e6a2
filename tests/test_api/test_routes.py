"""Tests for the /api/fetch-gms and /api/stats endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from fastapi.testclient import TestClient
from fakes import ALICE, FakeChain

from daily_gm.api.app import create_app
from daily_gm.errors.chain_errors import RemoteUnavailableError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from daily_gm.engine.client import DailyGMEngine


@pytest.fixture
def client(gm_engine: DailyGMEngine) -> Iterator[TestClient]:
    with TestClient(create_app(engine=gm_engine), raise_server_exceptions=False) as test_client:
        yield test_client


# ---------------------------------------------------------------------------
# /api/fetch-gms
# ---------------------------------------------------------------------------


class TestFetchGMs:
    def test_count(self, client: TestClient, chain: FakeChain) -> None:
        chain.height = 5_000
        chain.add_gm(ALICE, 150)
        chain.add_gm(ALICE, 4_000)

        response = client.get("/api/fetch-gms", params={"address": ALICE})

        assert response.status_code == 200
        assert response.json() == {"count": 2}
        assert chain.calls == [(100, 5_000)]

    def test_lower_case_address_accepted(self, client: TestClient, chain: FakeChain) -> None:
        chain.height = 200
        response = client.get("/api/fetch-gms", params={"address": ALICE.lower()})
        assert response.json() == {"count": 0}

    def test_missing_address(self, client: TestClient) -> None:
        response = client.get("/api/fetch-gms")
        assert response.status_code == 400
        assert response.json() == {"error": "Address is required"}

    def test_invalid_address(self, client: TestClient) -> None:
        response = client.get("/api/fetch-gms", params={"address": "vitalik.eth"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid address format"}

    def test_upstream_failure(self, client: TestClient, chain: FakeChain) -> None:
        chain.height = 500
        chain.fail_at = 100

        response = client.get("/api/fetch-gms", params={"address": ALICE})

        assert response.status_code == 502
        assert "failed" in response.json()["error"]


# ---------------------------------------------------------------------------
# /api/stats/{address}
# ---------------------------------------------------------------------------


class TestStats:
    def test_stats_body(self, client: TestClient, chain: FakeChain) -> None:
        chain.height = 120
        chain.add_gm(ALICE, 110)
        chain.streaks[ALICE.lower()] = 3

        response = client.get(f"/api/stats/{ALICE}")

        assert response.status_code == 200
        body = response.json()
        assert body["address"] == ALICE
        assert body["streak"] == 3
        assert body["lastGM"] == 0
        assert body["canGM"] is True
        assert body["countdown"] == "00:00:00"
        assert body["received"]["count"] == 1
        assert body["received"]["source"] == "scan"

    def test_invalid_address(self, client: TestClient) -> None:
        response = client.get("/api/stats/not-an-address")
        assert response.status_code == 400
        assert response.json() == {
            "code": "invalid-input-format",
            "message": "Invalid address format",
        }

    def test_contract_read_failure(self, client: TestClient, chain: FakeChain) -> None:
        async def broken(address: str) -> int:
            raise RemoteUnavailableError("streak() failed: timeout")

        chain.streak = broken  # type: ignore[method-assign]

        response = client.get(f"/api/stats/{ALICE}")

        assert response.status_code == 502
        assert response.json()["code"] == "remote-unavailable"

    def test_received_failure_is_reported_not_raised(
        self, client: TestClient, chain: FakeChain
    ) -> None:
        chain.height = 120
        chain.fail_at = 105

        response = client.get(f"/api/stats/{ALICE}")

        assert response.status_code == 200
        received = response.json()["received"]
        assert received["count"] is None
        assert received["error"].startswith("Log query for blocks 100-109 failed")
