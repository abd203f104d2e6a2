"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest
from starlette.responses import Response

from daily_gm import __version__
from daily_gm.api.routes import router
from daily_gm.config.settings import AppConfig
from daily_gm.engine.client import DailyGMEngine
from daily_gm.errors.gm_errors import GMError
from daily_gm.metrics.collector import GMMetrics

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialise the engine on startup and shut it down on exit.

    An engine already placed on ``app.state.engine`` (tests) is used as is.
    """
    engine: DailyGMEngine | None = getattr(app.state, "engine", None)
    owned = engine is None
    if engine is None:
        engine = DailyGMEngine(app.state.config, metrics=app.state.metrics)

    try:
        if not engine.is_initialized:
            await engine.initialize()
        app.state.engine = engine
        logger.info("DailyGM engine initialized")
        yield
    finally:
        if owned:
            await engine.close()
            logger.info("DailyGM engine shut down")


def create_app(*, config: AppConfig | None = None, engine: DailyGMEngine | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        config: Optional AppConfig. If *None*, a default config is created
            from environment variables.
        engine: Optional pre-built engine; its lifecycle stays with the caller.
    """
    if config is None:
        config = engine.config if engine is not None else AppConfig()

    app = FastAPI(
        title="daily-gm",
        version=__version__,
        description="Daily GM on Base: streaks, greetings received and GM submission",
        lifespan=_lifespan,
    )

    app.state.config = config
    app.state.metrics = GMMetrics() if config.metrics.enabled else None
    if engine is not None:
        app.state.engine = engine

    # -- Error handler --
    @app.exception_handler(GMError)
    async def _gm_error_handler(request: Request, exc: GMError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"code": exc.code, "message": exc.message},
        )

    # -- Base routes --
    @app.get("/health", tags=["base"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/metrics", tags=["base"], include_in_schema=False)
    async def metrics_endpoint() -> Response:
        """Prometheus metrics endpoint."""
        current = getattr(app.state, "engine", None)
        metrics: GMMetrics | None = getattr(current, "metrics", None) or app.state.metrics
        registry = metrics.registry if metrics is not None else None
        body = generate_latest(registry) if registry else generate_latest()
        return Response(
            content=body,
            media_type="text/plain; version=0.0.4; charset=utf-8",
        )

    app.include_router(router)

    return app
