"""Engine: the client that owns every daily-gm service."""

from daily_gm.engine.client import AccountStats, DailyGMEngine

__all__ = ["AccountStats", "DailyGMEngine"]
