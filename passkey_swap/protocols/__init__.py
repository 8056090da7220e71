"""
Protocol clients for swap routing
"""

from .raydium import RaydiumTradeAPI, get_associated_token_address

__all__ = [
    "RaydiumTradeAPI",
    "get_associated_token_address",
]
