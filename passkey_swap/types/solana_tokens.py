"""
Devnet Asset Registry

Single source of truth for the assets the wallet can hold and swap.
"""

from typing import Dict

from .common import Asset


WRAPPED_SOL_MINT = "So11111111111111111111111111111111111111112"

# Circle devnet USDC
DEVNET_USDC_MINT = "4zMMC9srt5Ri5X14GAgXhaHii3GnPAEERYPJgZJDncDU"

LAMPORTS_PER_SOL = 1_000_000_000

SOL = Asset(
    symbol="SOL",
    mint=WRAPPED_SOL_MINT,
    decimals=9,
    name="Solana",
)

USDC = Asset(
    symbol="USDC",
    mint=DEVNET_USDC_MINT,
    decimals=6,
    name="USD Coin (devnet)",
)

# Keys are uppercase for case-insensitive lookup
DEVNET_ASSETS: Dict[str, Asset] = {
    "SOL": SOL,
    "USDC": USDC,
}


def get_asset(symbol: str) -> Asset:
    """
    Look up a registered asset by symbol

    Raises:
        KeyError: If the symbol is not registered
    """
    return DEVNET_ASSETS[symbol.upper()]
