"""
Common type definitions
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_FLOOR
from typing import Union


@dataclass(frozen=True)
class Asset:
    """
    Swappable asset

    Attributes:
        symbol: Asset symbol (e.g., "SOL", "USDC")
        mint: Token mint address (base58); wrapped SOL mint for native SOL
        decimals: Number of decimal places
        name: Full asset name (optional)
    """
    symbol: str
    mint: str
    decimals: int
    name: str = ""

    def __str__(self) -> str:
        return self.symbol

    def __repr__(self) -> str:
        return f"Asset({self.symbol}, {self.mint[:8]}...)"

    @property
    def is_native_sol(self) -> bool:
        """Check if this is native SOL (wrapped mint)"""
        from .solana_tokens import WRAPPED_SOL_MINT
        return self.mint == WRAPPED_SOL_MINT

    def ui_amount(self, raw_amount: int) -> Decimal:
        """
        Convert raw amount to UI amount with full precision

        Args:
            raw_amount: Raw token amount (smallest units)

        Returns:
            UI amount as Decimal
        """
        return Decimal(raw_amount) / Decimal(10 ** self.decimals)

    def raw_amount(self, ui_amount: Union[Decimal, float, int, str]) -> int:
        """
        Convert UI amount to raw amount, rounding down to whole units

        Args:
            ui_amount: UI amount (Decimal, float, int, or numeric str)

        Returns:
            Raw token amount (smallest units)
        """
        if not isinstance(ui_amount, Decimal):
            ui_amount = Decimal(str(ui_amount).strip())
        scaled = ui_amount * Decimal(10 ** self.decimals)
        return int(scaled.to_integral_value(rounding=ROUND_FLOOR))
