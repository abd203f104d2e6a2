"""Pydantic response models for the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class FetchGMsResponse(BaseModel):
    count: int = Field(ge=0)


class ErrorResponse(BaseModel):
    error: str


class ReceivedResponse(BaseModel):
    count: int | None = None
    source: str | None = None
    error: str | None = None


class StatsResponse(BaseModel):
    """Account summary returned by ``GET /api/stats/{address}``."""

    model_config = ConfigDict(populate_by_name=True)

    address: str
    streak: int
    last_gm: int = Field(alias="lastGM")
    can_gm: bool = Field(alias="canGM")
    countdown: str
    seconds_until_reset: int = Field(alias="secondsUntilReset")
    received: ReceivedResponse
