"""Application entry point for the daily-gm server."""

from __future__ import annotations

import os

import uvicorn

from daily_gm.config.settings import AppConfig


def main() -> None:
    """Start the daily-gm server on the configured host and port."""
    config = AppConfig()
    reload = os.getenv("DAILYGM_RELOAD", "false").lower() in ("1", "true", "yes")
    uvicorn.run(
        "daily_gm.api.app:create_app",
        factory=True,
        host=config.server.host,
        port=config.server.port,
        reload=reload,
        log_level="debug" if config.debug else "info",
    )


if __name__ == "__main__":
    main()
