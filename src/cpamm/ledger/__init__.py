"""Ledger — внешние asset ledgers и адаптер пула к ним."""

from .asset import AssetLedger, TokenAsset
from .token import Token

__all__ = [
    "AssetLedger",
    "Token",
    "TokenAsset",
]
