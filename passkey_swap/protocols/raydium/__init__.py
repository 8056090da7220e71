"""
Raydium Trade API Protocol

Provides swap quotes and prebuilt swap transactions via the Raydium trade API.
"""

from .api import RaydiumTradeAPI
from .accounts import get_associated_token_address
from .constants import (
    TOKEN_PROGRAM_ID,
    ASSOCIATED_TOKEN_PROGRAM_ID,
    WRAPPED_SOL_MINT,
)

__all__ = [
    "RaydiumTradeAPI",
    "get_associated_token_address",
    "TOKEN_PROGRAM_ID",
    "ASSOCIATED_TOKEN_PROGRAM_ID",
    "WRAPPED_SOL_MINT",
]
