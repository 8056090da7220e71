"""
Address lookup table decoding and concurrent resolution
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, FIRST_EXCEPTION, wait
from typing import Iterable, List, TYPE_CHECKING

from solders.address_lookup_table_account import AddressLookupTable, AddressLookupTableAccount
from solders.pubkey import Pubkey

from ..errors import LookupTableResolutionError

if TYPE_CHECKING:
    from .rpc import AccountReader

logger = logging.getLogger(__name__)


def parse_lookup_table(address: str, data: bytes) -> AddressLookupTableAccount:
    """
    Decode raw lookup table account data

    Args:
        address: Table account address (base58)
        data: Raw account data

    Returns:
        AddressLookupTableAccount with every stored address

    Raises:
        ValueError: If the data is not an initialized lookup table
    """
    try:
        table = AddressLookupTable.deserialize(data)
    except Exception as e:
        raise ValueError(f"Lookup table {address} could not be decoded: {e}") from e
    return AddressLookupTableAccount(key=Pubkey.from_string(address), addresses=list(table.addresses))


def _resolve_one(reader: "AccountReader", address: str) -> AddressLookupTableAccount:
    try:
        table = reader.get_address_lookup_table(address)
    except Exception as e:
        raise LookupTableResolutionError.missing(address, e) from e

    if table is None:
        raise LookupTableResolutionError.missing(address)
    return table


def resolve_lookup_tables(
    reader: "AccountReader",
    addresses: Iterable[str],
    max_workers: int = 4,
) -> List[AddressLookupTableAccount]:
    """
    Resolve lookup tables concurrently

    Every address is fetched once; results keep the order of ``addresses``.
    The first failure cancels resolutions that have not started yet and is
    raised once in-flight reads finish.

    Args:
        reader: Account read capability
        addresses: Table addresses (base58), duplicates ignored
        max_workers: Upper bound on concurrent reads

    Returns:
        Resolved tables in request order

    Raises:
        LookupTableResolutionError: If any table is missing or unreadable
    """
    unique = list(dict.fromkeys(str(a) for a in addresses))
    if not unique:
        return []

    workers = max(1, min(max_workers, len(unique)))
    logger.debug(f"Resolving {len(unique)} lookup table(s) with {workers} worker(s)")

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="lut") as pool:
        futures = [pool.submit(_resolve_one, reader, address) for address in unique]
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)

        for future in pending:
            future.cancel()

        for future in futures:
            if future in done and future.exception() is not None:
                error = future.exception()
                logger.warning(f"Lookup table resolution failed: {error}")
                raise error

        return [future.result() for future in futures]
