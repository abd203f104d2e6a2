"""Daily GM endpoints.

``/api/fetch-gms`` is the aggregator endpoint consumed by
:class:`~daily_gm.chain.aggregator.HTTPAggregator`. Its error responses use
the ``{"error": "..."}`` shape that client expects, not the generic
``{"code", "message"}`` error body.
"""

from __future__ import annotations

import logging
import time
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from daily_gm.api.dependencies import get_engine
from daily_gm.api.schemas import ErrorResponse, FetchGMsResponse, StatsResponse
from daily_gm.engine.client import DailyGMEngine  # noqa: TC001
from daily_gm.errors.chain_errors import RemoteUnavailableError
from daily_gm.errors.definitions import ErrInvalidAddressFormat
from daily_gm.names.models import RawAddress, classify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["gm"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def _checksum(address: str) -> str | None:
    query = classify(address)
    return query.address if isinstance(query, RawAddress) else None


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.get(
    "/fetch-gms",
    response_model=FetchGMsResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def fetch_gms(
    engine: Annotated[DailyGMEngine, Depends(get_engine)],
    address: Annotated[str, Query()] = "",
) -> FetchGMsResponse | JSONResponse:
    """Number of GMs received by *address*, from one full-range log query."""
    if not address:
        return _error(400, "Address is required")
    checksummed = _checksum(address)
    if checksummed is None:
        return _error(400, ErrInvalidAddressFormat.message)

    started = time.monotonic()
    try:
        count = await engine.indexed_count(checksummed)
    except RemoteUnavailableError as exc:
        logger.error("fetch-gms failed for %s: %s", checksummed, exc)
        return _error(502, exc.message)

    logger.info(
        "fetch-gms: %d GMs for %s in %.2fs", count, checksummed, time.monotonic() - started
    )
    return FetchGMsResponse(count=count)


@router.get("/stats/{address}", response_model=StatsResponse)
async def get_stats(
    address: str,
    engine: Annotated[DailyGMEngine, Depends(get_engine)],
) -> StatsResponse:
    """Streak, eligibility countdown and received count for *address*."""
    checksummed = _checksum(address)
    if checksummed is None:
        raise ErrInvalidAddressFormat
    stats = await engine.stats(checksummed)
    return StatsResponse.model_validate(stats.to_dict())
