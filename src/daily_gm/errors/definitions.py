"""Pre-built errors carrying the fixed user-facing messages."""

from __future__ import annotations

from daily_gm.errors.chain_errors import ContractRejectedError, UserRejectedError, WalletError
from daily_gm.errors.gm_errors import GMError
from daily_gm.errors.name_errors import InvalidInputFormatError, NameUnresolvedError

# -- Wallet ----------------------------------------------------------------

ErrWalletNotConnected = WalletError("Please connect your wallet")
ErrWritePending = GMError("A GM is already being sent", status_code=409, code="write-pending")

# -- Recipient -------------------------------------------------------------

ErrRecipientMissing = InvalidInputFormatError("Please enter a friend's address or ENS name")
ErrInvalidAddressFormat = InvalidInputFormatError("Invalid address format")
ErrNameStillResolving = NameUnresolvedError("Still resolving name...")
ErrNameUnresolved = NameUnresolvedError("Could not resolve name. Please check and try again.")

# -- Transaction -----------------------------------------------------------

ErrTransactionRejected = UserRejectedError("Transaction rejected")
ErrAlreadyGMToday = ContractRejectedError(
    "You already GM'd today! Come back tomorrow", reason="AlreadyGMToday"
)
ErrInvalidRecipient = ContractRejectedError("Invalid recipient address", reason="InvalidRecipient")
ErrSendFailed = GMError("Failed to send GM. Please try again", status_code=502, code="send-failed")
