"""
Associated token account derivation
"""

from typing import Optional, Union

from solders.pubkey import Pubkey

from .constants import TOKEN_PROGRAM_ID, ASSOCIATED_TOKEN_PROGRAM_ID


def _as_pubkey(value: Union[str, Pubkey]) -> Pubkey:
    return value if isinstance(value, Pubkey) else Pubkey.from_string(value)


def get_associated_token_address(
    owner: Union[str, Pubkey],
    mint: Union[str, Pubkey],
    token_program: Optional[Union[str, Pubkey]] = None,
) -> Pubkey:
    """
    Get associated token account address.

    The owner is only used as a seed, so off-curve owners (smart wallet
    PDAs) derive the same way as regular wallets.

    Args:
        owner: Wallet owner
        mint: Token mint
        token_program: Token program (defaults to Tokenkeg)

    Returns:
        ATA address
    """
    ata_program = Pubkey.from_string(ASSOCIATED_TOKEN_PROGRAM_ID)
    program = _as_pubkey(token_program) if token_program is not None else Pubkey.from_string(TOKEN_PROGRAM_ID)

    seeds = [
        bytes(_as_pubkey(owner)),
        bytes(program),
        bytes(_as_pubkey(mint)),
    ]

    address, _ = Pubkey.find_program_address(seeds, ata_program)
    return address
