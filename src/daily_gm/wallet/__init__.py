"""Wallet capability: active network, network switching and signed writes."""

from daily_gm.wallet.base import WalletProvider
from daily_gm.wallet.local import LocalAccountWallet

__all__ = ["LocalAccountWallet", "WalletProvider"]
