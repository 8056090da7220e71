"""
Shared fixtures for unit tests.

Transactions are built with solders so the normalizer sees real wire bytes;
no test touches the network.
"""

import base64
import struct
import sys
import threading
from pathlib import Path
from typing import Dict, List, Optional

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from solders.address_lookup_table_account import LOOKUP_TABLE_META_SIZE, AddressLookupTableAccount
from solders.compute_budget import set_compute_unit_limit, set_compute_unit_price
from solders.hash import Hash
from solders.instruction import AccountMeta, Instruction
from solders.keypair import Keypair
from solders.message import Message, MessageV0
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction, VersionedTransaction

from passkey_swap.types import SwapTransaction, TxVersion


SWAP_PROGRAM_ID = Pubkey.from_string("CPMDWBwJDtYax9qW7AyRuVC19Cc4L4Vcy4n2BHAbHkCW")


class FakeReader:
    """In-memory AccountReader; records lookup table reads"""

    def __init__(
        self,
        tables: Optional[List[AddressLookupTableAccount]] = None,
        lamports: int = 0,
        token_balance: Optional[Dict] = None,
        signatures: Optional[List[Dict]] = None,
        error: Optional[Exception] = None,
    ):
        self.tables = {str(t.key): t for t in (tables or [])}
        self.lamports = lamports
        self.token_balance = token_balance
        self.signatures = signatures or []
        self.error = error
        self.lookup_calls: List[str] = []
        self._lock = threading.Lock()

    def get_balance(self, address: str) -> int:
        if self.error:
            raise self.error
        return self.lamports

    def get_token_account_balance(self, token_account: str) -> Dict:
        if self.error:
            raise self.error
        return self.token_balance or {}

    def get_address_lookup_table(self, address: str) -> Optional[AddressLookupTableAccount]:
        with self._lock:
            self.lookup_calls.append(address)
        if self.error:
            raise self.error
        return self.tables.get(address)

    def get_signatures_for_address(self, address: str, limit: int = 20) -> List[Dict]:
        if self.error:
            raise self.error
        return self.signatures[:limit]


def lookup_table_account_data(addresses: List[Pubkey], state: int = 1) -> bytes:
    """Raw lookup table account bytes: state tag, zeroed metadata, then addresses"""
    header = struct.pack("<I", state) + bytes(LOOKUP_TABLE_META_SIZE - 4)
    return header + b"".join(bytes(a) for a in addresses)


def swap_instruction(owner: Pubkey, writable: Pubkey, readonly: Pubkey) -> Instruction:
    return Instruction(
        program_id=SWAP_PROGRAM_ID,
        data=bytes([9, 1, 2, 3]),
        accounts=[
            AccountMeta(pubkey=owner, is_signer=True, is_writable=True),
            AccountMeta(pubkey=writable, is_signer=False, is_writable=True),
            AccountMeta(pubkey=readonly, is_signer=False, is_writable=False),
        ],
    )


def compute_budget_instructions() -> List[Instruction]:
    return [set_compute_unit_limit(400_000), set_compute_unit_price(100_000)]


@pytest.fixture
def owner() -> Keypair:
    return Keypair()


@pytest.fixture
def legacy_swap(owner):
    """Legacy swap transaction with compute budget instructions"""
    writable = Pubkey.new_unique()
    readonly = Pubkey.new_unique()
    swap_ix = swap_instruction(owner.pubkey(), writable, readonly)
    message = Message.new_with_blockhash(
        compute_budget_instructions() + [swap_ix],
        owner.pubkey(),
        Hash.default(),
    )
    tx = Transaction.new_unsigned(message)
    payload = SwapTransaction(
        transaction=base64.b64encode(bytes(tx)).decode("ascii"),
        tx_version=TxVersion.LEGACY,
    )
    return payload, swap_ix


@pytest.fixture
def v0_swap(owner):
    """
    v0 swap transaction whose non-signer accounts come from two lookup tables

    Returns (payload, swap instruction, lookup tables)
    """
    first = AddressLookupTableAccount(
        key=Pubkey.new_unique(),
        addresses=[Pubkey.new_unique(), Pubkey.new_unique()],
    )
    second = AddressLookupTableAccount(
        key=Pubkey.new_unique(),
        addresses=[Pubkey.new_unique()],
    )
    swap_ix = swap_instruction(owner.pubkey(), first.addresses[0], second.addresses[0])
    message = MessageV0.try_compile(
        owner.pubkey(),
        compute_budget_instructions() + [swap_ix],
        [first, second],
        Hash.default(),
    )
    tx = VersionedTransaction.populate(message, [Signature.default()])
    payload = SwapTransaction(
        transaction=base64.b64encode(bytes(tx)).decode("ascii"),
        tx_version=TxVersion.V0,
    )
    return payload, swap_ix, [first, second]
