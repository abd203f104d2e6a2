"""Chain, aggregator and wallet errors."""

from __future__ import annotations

from daily_gm.errors.gm_errors import GMError


class RemoteUnavailableError(GMError):
    """An external service (aggregator, RPC node, naming service) failed.

    Recoverable: the synchronizer treats it as the signal to fall back.
    """

    def __init__(self, message: str, *, status_code: int = 502) -> None:
        super().__init__(message, status_code=status_code, code="remote-unavailable")


class PartialScanFailureError(GMError):
    """A log window query failed mid-scan.

    Attributes:
        from_block: First block of the failed window.
        to_block: Last block of the failed window.
        last_completed_block: Last block of the final window that succeeded,
            or ``from_block - 1`` if the first window failed.
    """

    def __init__(
        self,
        message: str,
        *,
        from_block: int,
        to_block: int,
        last_completed_block: int,
    ) -> None:
        super().__init__(message, status_code=502, code="partial-scan-failure")
        self.from_block = from_block
        self.to_block = to_block
        self.last_completed_block = last_completed_block


class WalletError(GMError):
    """Raw failure reported by a wallet provider.

    The message carries the wallet's own text (revert reason, rejection
    notice) so callers can classify it.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=502, code="wallet-error")


class UserRejectedError(GMError):
    """The user declined a signature or network switch request."""

    def __init__(self, message: str = "Transaction rejected") -> None:
        super().__init__(message, status_code=400, code="user-rejected")


class ContractRejectedError(GMError):
    """The contract reverted; ``reason`` is the matched revert name or empty."""

    def __init__(self, message: str, *, reason: str = "") -> None:
        super().__init__(message, status_code=422, code="contract-rejected")
        self.reason = reason


class NetworkMismatchError(GMError):
    """The wallet is not on the target network and could not be moved there."""

    def __init__(self, message: str, *, target: str, code: str = "network-mismatch") -> None:
        super().__init__(message, status_code=409, code=code)
        self.target = target


class NetworkSwitchCancelledError(NetworkMismatchError):
    """The user rejected the network switch request."""

    def __init__(self, *, target: str) -> None:
        super().__init__("Network switch cancelled", target=target, code="network-switch-cancelled")


class NetworkSwitchFailedError(NetworkMismatchError):
    """The switch request failed for a reason other than user rejection."""

    def __init__(self, detail: str, *, target: str) -> None:
        super().__init__(
            f"Failed to switch network: {detail}. Please switch to {target} manually",
            target=target,
            code="network-switch-failed",
        )
        self.detail = detail


class NetworkSwitchUnsupportedError(NetworkMismatchError):
    """The wallet cannot switch networks programmatically."""

    def __init__(self, *, target: str) -> None:
        super().__init__(
            f"Please switch to {target} network manually in your wallet",
            target=target,
            code="network-switch-unsupported",
        )
