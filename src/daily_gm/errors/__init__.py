"""Error taxonomy for daily-gm."""

from daily_gm.errors.chain_errors import (
    ContractRejectedError,
    NetworkMismatchError,
    NetworkSwitchCancelledError,
    NetworkSwitchFailedError,
    NetworkSwitchUnsupportedError,
    PartialScanFailureError,
    RemoteUnavailableError,
    UserRejectedError,
    WalletError,
)
from daily_gm.errors.gm_errors import GMError
from daily_gm.errors.name_errors import InvalidInputFormatError, NameUnresolvedError

__all__ = [
    "ContractRejectedError",
    "GMError",
    "InvalidInputFormatError",
    "NameUnresolvedError",
    "NetworkMismatchError",
    "NetworkSwitchCancelledError",
    "NetworkSwitchFailedError",
    "NetworkSwitchUnsupportedError",
    "PartialScanFailureError",
    "RemoteUnavailableError",
    "UserRejectedError",
    "WalletError",
]
