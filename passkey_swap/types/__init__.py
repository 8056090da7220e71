"""
Type definitions for Passkey Swap
"""

from .common import Asset
from .solana_tokens import (
    SOL,
    USDC,
    DEVNET_ASSETS,
    WRAPPED_SOL_MINT,
    DEVNET_USDC_MINT,
    LAMPORTS_PER_SOL,
    get_asset,
)
from .result import (
    TxVersion,
    SwapDirection,
    SwapQuote,
    SwapTransaction,
    NormalizedInstructionSet,
    ActivityRecord,
    BalanceSnapshot,
    SwapResult,
)

__all__ = [
    "Asset",
    "SOL",
    "USDC",
    "DEVNET_ASSETS",
    "WRAPPED_SOL_MINT",
    "DEVNET_USDC_MINT",
    "LAMPORTS_PER_SOL",
    "get_asset",
    "TxVersion",
    "SwapDirection",
    "SwapQuote",
    "SwapTransaction",
    "NormalizedInstructionSet",
    "ActivityRecord",
    "BalanceSnapshot",
    "SwapResult",
]
