"""
Functional modules for WalletClient

Provides high-level operations:
- WalletModule: Balances, activity, price snapshot
- SwapModule: USDC⇄SOL swaps through the passkey signer
- BalanceRefresher: Periodic background refresh
"""

from .wallet import WalletModule
from .swap import SwapModule, parse_swap_amount
from .refresh import BalanceRefresher

__all__ = [
    "WalletModule",
    "SwapModule",
    "parse_swap_amount",
    "BalanceRefresher",
]
