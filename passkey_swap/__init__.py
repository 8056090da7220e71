"""
Passkey Swap - Gasless USDC⇄SOL swaps for passkey smart wallets on Solana

Provides:
- Balance and activity reads for the smart wallet
- Raydium trade API quotes and prebuilt swap transactions
- Transaction normalization (lookup table resolution, compute budget removal)
- Submission through a passkey signer / paymaster relay
"""

from .client import WalletClient
from .types import (
    Asset,
    SOL,
    USDC,
    TxVersion,
    SwapDirection,
    SwapQuote,
    SwapTransaction,
    NormalizedInstructionSet,
    ActivityRecord,
    BalanceSnapshot,
    SwapResult,
)
from .errors import (
    PasskeySwapError,
    RpcError,
    QuoteError,
    BuildError,
    LookupTableResolutionError,
    SubmissionError,
    TransientReadError,
    InvalidSwapAmount,
    SwapInProgress,
    ErrorCode,
)
from .infra import SmartWalletSigner, TransactionOptions, LocalRelaySigner
from .modules import WalletModule, SwapModule, BalanceRefresher

__all__ = [
    # Client
    "WalletClient",
    # Types
    "Asset",
    "SOL",
    "USDC",
    "TxVersion",
    "SwapDirection",
    "SwapQuote",
    "SwapTransaction",
    "NormalizedInstructionSet",
    "ActivityRecord",
    "BalanceSnapshot",
    "SwapResult",
    # Errors
    "PasskeySwapError",
    "RpcError",
    "QuoteError",
    "BuildError",
    "LookupTableResolutionError",
    "SubmissionError",
    "TransientReadError",
    "InvalidSwapAmount",
    "SwapInProgress",
    "ErrorCode",
    # Signers
    "SmartWalletSigner",
    "TransactionOptions",
    "LocalRelaySigner",
    # Modules
    "WalletModule",
    "SwapModule",
    "BalanceRefresher",
]

__version__ = "1.0.0"
