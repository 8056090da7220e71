"""
Swap transaction normalizer

Turns a prebuilt swap transaction into a flat instruction list the passkey
signer can re-wrap:
- Decodes legacy or versioned (v0) wire transactions
- Resolves address lookup tables referenced by v0 messages
- Decompiles compiled instructions into absolute instructions
- Drops compute budget instructions (the relay sets its own budget)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union, TYPE_CHECKING

from solders.address_lookup_table_account import AddressLookupTableAccount
from solders.instruction import AccountMeta, Instruction
from solders.message import Message, MessageV0
from solders.pubkey import Pubkey
from solders.transaction import Transaction, VersionedTransaction

from .lookup_tables import resolve_lookup_tables
from ..types import NormalizedInstructionSet, SwapTransaction, TxVersion
from ..errors import BuildError, LookupTableResolutionError
from ..config import config as global_config

if TYPE_CHECKING:
    from .rpc import AccountReader

logger = logging.getLogger(__name__)


COMPUTE_BUDGET_PROGRAM_ID = Pubkey.from_string("ComputeBudget111111111111111111111111111111")


@dataclass(frozen=True)
class LegacyPayload:
    """Decoded legacy transaction: instructions are already absolute"""
    instructions: Tuple[Instruction, ...]


@dataclass(frozen=True)
class VersionedPayload:
    """Decoded v0 transaction: instructions still reference lookup tables"""
    message: Union[MessageV0, Message]
    lookup_table_addresses: Tuple[str, ...] = field(default_factory=tuple)


DecodedTransaction = Union[LegacyPayload, VersionedPayload]


def _account_metas(
    message: Union[Message, MessageV0],
    loaded_writable: Sequence[Pubkey] = (),
    loaded_readonly: Sequence[Pubkey] = (),
) -> List[AccountMeta]:
    """
    Build the full account list of a message with signer/writable flags

    Static keys are ordered [writable signers, readonly signers, writable
    non-signers, readonly non-signers]; loaded keys follow, writable first.
    """
    header = message.header
    static_keys = list(message.account_keys)
    num_keys = len(static_keys)
    num_signed = header.num_required_signatures
    num_readonly_signed = header.num_readonly_signed_accounts
    num_readonly_unsigned = header.num_readonly_unsigned_accounts

    metas: List[AccountMeta] = []
    for idx, key in enumerate(static_keys):
        if idx < num_signed:
            is_signer = True
            is_writable = idx < num_signed - num_readonly_signed
        else:
            is_signer = False
            is_writable = (idx - num_signed) < (num_keys - num_signed - num_readonly_unsigned)
        metas.append(AccountMeta(pubkey=key, is_signer=is_signer, is_writable=is_writable))

    metas.extend(AccountMeta(pubkey=key, is_signer=False, is_writable=True) for key in loaded_writable)
    metas.extend(AccountMeta(pubkey=key, is_signer=False, is_writable=False) for key in loaded_readonly)
    return metas


def _load_addresses(
    message: MessageV0,
    lookup_tables: Sequence[AddressLookupTableAccount],
) -> Tuple[List[Pubkey], List[Pubkey]]:
    tables = {str(table.key): table for table in lookup_tables}
    writable: List[Pubkey] = []
    readonly: List[Pubkey] = []

    for lookup in message.address_table_lookups:
        key = str(lookup.account_key)
        table = tables.get(key)
        if table is None:
            raise LookupTableResolutionError.missing(key)
        addresses = list(table.addresses)
        for target, indexes in ((writable, lookup.writable_indexes), (readonly, lookup.readonly_indexes)):
            for idx in indexes:
                if idx >= len(addresses):
                    raise LookupTableResolutionError(
                        f"Lookup table {key} has no entry at index {idx}",
                        address=key,
                    )
                target.append(addresses[idx])

    return writable, readonly


def decompile_message(
    message: Union[Message, MessageV0],
    lookup_tables: Sequence[AddressLookupTableAccount] = (),
) -> List[Instruction]:
    """
    Decompile a message into absolute instructions

    Args:
        message: Legacy or v0 message
        lookup_tables: Resolved tables for every lookup in a v0 message

    Returns:
        Instructions in message order

    Raises:
        LookupTableResolutionError: If a referenced table is not in lookup_tables
    """
    if isinstance(message, MessageV0):
        loaded_writable, loaded_readonly = _load_addresses(message, lookup_tables)
    else:
        loaded_writable, loaded_readonly = [], []

    metas = _account_metas(message, loaded_writable, loaded_readonly)

    instructions: List[Instruction] = []
    for compiled in message.instructions:
        program_id = metas[compiled.program_id_index].pubkey
        accounts = [metas[idx] for idx in compiled.accounts]
        instructions.append(Instruction(program_id=program_id, data=bytes(compiled.data), accounts=accounts))
    return instructions


def strip_compute_budget(instructions: Sequence[Instruction]) -> List[Instruction]:
    """Remove compute budget program instructions, keeping order"""
    return [ix for ix in instructions if ix.program_id != COMPUTE_BUDGET_PROGRAM_ID]


def decode_transaction(payload: SwapTransaction) -> DecodedTransaction:
    """
    Decode a prebuilt swap transaction according to its version tag

    Raises:
        BuildError: If the bytes are not a valid transaction
    """
    try:
        raw = payload.to_bytes()
        if payload.tx_version is TxVersion.V0:
            message = VersionedTransaction.from_bytes(raw).message
        else:
            message = Transaction.from_bytes(raw).message
    except Exception as e:
        raise BuildError.undecodable(e) from e

    if payload.tx_version is TxVersion.V0:
        lookups = message.address_table_lookups if isinstance(message, MessageV0) else []
        addresses = tuple(dict.fromkeys(str(lookup.account_key) for lookup in lookups))
        return VersionedPayload(message=message, lookup_table_addresses=addresses)

    return LegacyPayload(instructions=tuple(decompile_message(message)))


def normalize_transaction(
    payload: SwapTransaction,
    reader: "AccountReader",
    max_workers: Optional[int] = None,
) -> NormalizedInstructionSet:
    """
    Normalize a prebuilt swap transaction for the passkey signer

    Args:
        payload: Base64 transaction and its version tag
        reader: Account read capability used for lookup table resolution
        max_workers: Concurrent lookup table reads (default from config)

    Returns:
        NormalizedInstructionSet without compute budget instructions

    Raises:
        BuildError: If the payload cannot be decoded
        LookupTableResolutionError: If any referenced lookup table is missing
    """
    decoded = decode_transaction(payload)

    if isinstance(decoded, VersionedPayload):
        workers = max_workers or global_config.swap.max_lookup_workers
        lookup_tables = resolve_lookup_tables(reader, decoded.lookup_table_addresses, workers)
        instructions = decompile_message(decoded.message, lookup_tables)
    else:
        lookup_tables = []
        instructions = list(decoded.instructions)

    filtered = strip_compute_budget(instructions)
    logger.info(
        f"Normalized {payload.tx_version.value} transaction: "
        f"{len(filtered)}/{len(instructions)} instructions kept, {len(lookup_tables)} lookup table(s)"
    )

    return NormalizedInstructionSet(
        instructions=tuple(filtered),
        lookup_tables=tuple(lookup_tables),
        tx_version=payload.tx_version,
    )
