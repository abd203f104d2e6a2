"""FastAPI dependency injection helpers.

Usage in a route::

    @router.get("/stats/{address}")
    async def get_stats(
        address: str,
        engine: Annotated[DailyGMEngine, Depends(get_engine)],
    ) -> ...:
        ...
"""

from __future__ import annotations

from fastapi import Request

from daily_gm.engine.client import DailyGMEngine  # noqa: TC001
from daily_gm.errors.gm_errors import GMError

ErrEngineUnavailable = GMError("Service is starting up", status_code=503, code="engine-unavailable")


def get_engine(request: Request) -> DailyGMEngine:
    """Retrieve the engine stored on ``app.state.engine`` during lifespan startup.

    Raises:
        GMError: 503 if the engine is not initialized.
    """
    engine: DailyGMEngine | None = getattr(request.app.state, "engine", None)
    if engine is None or not engine.is_initialized:
        raise ErrEngineUnavailable
    return engine
