"""Network guard and GM transaction submission."""

from daily_gm.tx.guard import ChainGuard, GuardOutcome, GuardStatus
from daily_gm.tx.submitter import GMSubmitter, SubmitOutcome, classify_write_error

__all__ = [
    "ChainGuard",
    "GMSubmitter",
    "GuardOutcome",
    "GuardStatus",
    "SubmitOutcome",
    "classify_write_error",
]
