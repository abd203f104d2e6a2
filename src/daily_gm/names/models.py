"""Recipient query classification.

A user-entered recipient is exactly one of:

- :class:`BasenameName`: ends with ``.base.eth``
- :class:`DotEthName`: any other string containing a ``.``
- :class:`RawAddress`: ``0x`` + 40 hex characters
- :class:`InvalidQuery`: everything else

:func:`classify` is a pure function of the string's shape.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from web3 import Web3

BASENAME_SUFFIX = ".base.eth"

_RAW_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")

# ENSIP-11: EVM chains other than mainnet use 0x80000000 | chainId.
_ENSIP11_EVM_BIT = 0x80000000
_ETH_COIN_TYPE = 60


@dataclass(frozen=True, slots=True)
class RawAddress:
    address: str


@dataclass(frozen=True, slots=True)
class DotEthName:
    name: str


@dataclass(frozen=True, slots=True)
class BasenameName:
    name: str


@dataclass(frozen=True, slots=True)
class InvalidQuery:
    text: str


RecipientQuery = RawAddress | DotEthName | BasenameName | InvalidQuery


def classify(text: str) -> RecipientQuery:
    """Classify recipient input. Surrounding whitespace is ignored."""
    value = text.strip()
    if value.endswith(BASENAME_SUFFIX):
        return BasenameName(value)
    if "." in value:
        return DotEthName(value)
    if _RAW_ADDRESS_RE.match(value):
        return RawAddress(Web3.to_checksum_address(value))
    return InvalidQuery(text)


def to_coin_type(chain_id: int) -> int:
    """ENSIP-11 coin type for an EVM chain id."""
    if chain_id == 1:
        return _ETH_COIN_TYPE
    if chain_id < 0 or chain_id >= _ENSIP11_EVM_BIT:
        msg = f"chain id {chain_id} out of range for ENSIP-11"
        raise ValueError(msg)
    return _ENSIP11_EVM_BIT | chain_id


class ResolutionStatus(enum.StrEnum):
    """Where a recipient lookup stands."""

    IDLE = "idle"
    PENDING = "pending"
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True, slots=True)
class Resolution:
    """Snapshot of a recipient lookup."""

    query: RecipientQuery | None = None
    status: ResolutionStatus = ResolutionStatus.IDLE
    address: str | None = None

    @property
    def is_name(self) -> bool:
        return isinstance(self.query, (DotEthName, BasenameName))
