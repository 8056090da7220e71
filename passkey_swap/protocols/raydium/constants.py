"""
Raydium trade API and SPL token constants
"""

# Token Programs
TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"

# Associated Token Program
ASSOCIATED_TOKEN_PROGRAM_ID = "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"

# Wrapped SOL mint
WRAPPED_SOL_MINT = "So11111111111111111111111111111111111111112"

# Trade API endpoints (relative to the swap host)
QUOTE_PATH = "/compute/swap-base-in"
BUILD_PATH = "/transaction/swap-base-in"
