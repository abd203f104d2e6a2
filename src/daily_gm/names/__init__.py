"""Recipient name resolution: raw addresses, ENS names and Basenames."""

from daily_gm.names.models import (
    BASENAME_SUFFIX,
    BasenameName,
    DotEthName,
    InvalidQuery,
    RawAddress,
    RecipientQuery,
    Resolution,
    ResolutionStatus,
    classify,
    to_coin_type,
)
from daily_gm.names.resolver import ENSNamingService, NamingService, RecipientResolver

__all__ = [
    "BASENAME_SUFFIX",
    "BasenameName",
    "DotEthName",
    "ENSNamingService",
    "InvalidQuery",
    "NamingService",
    "RawAddress",
    "RecipientQuery",
    "RecipientResolver",
    "Resolution",
    "ResolutionStatus",
    "classify",
    "to_coin_type",
]
