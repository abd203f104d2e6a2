"""GM eligibility: the UTC daily reset clock."""

from daily_gm.gm.eligibility import Countdown, can_gm, next_reset, time_until_reset, watch_countdown

__all__ = ["Countdown", "can_gm", "next_reset", "time_until_reset", "watch_countdown"]
