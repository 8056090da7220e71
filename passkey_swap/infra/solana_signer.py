"""
Transaction signing abstractions

The wallet never holds the passkey: signing and broadcasting are delegated
to a smart-wallet signer (passkey portal + paymaster relay). SmartWalletSigner
is that capability; LocalRelaySigner implements it with a plain keypair for
local development.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence, Tuple, runtime_checkable, TYPE_CHECKING

import base58
from solders.compute_budget import set_compute_unit_limit
from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.transaction import VersionedTransaction

from ..errors import ConfigurationError, SubmissionError
from ..config import config as global_config

if TYPE_CHECKING:
    from solders.address_lookup_table_account import AddressLookupTableAccount
    from solders.instruction import Instruction
    from .rpc import RpcClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransactionOptions:
    """
    Options handed to the smart-wallet signer

    Attributes:
        compute_unit_limit: Compute unit ceiling requested as a hint
        cluster_simulation: Network tag the relay simulates against
        address_lookup_tables: Tables needed to compile the instructions
    """
    compute_unit_limit: int
    cluster_simulation: str
    address_lookup_tables: Tuple["AddressLookupTableAccount", ...] = field(default_factory=tuple)


@runtime_checkable
class SmartWalletSigner(Protocol):
    """
    Protocol for passkey smart-wallet signers

    Implementations must provide:
    - current_owner_address: The smart wallet address (base58)
    - sign_and_send(): Sign the instructions and broadcast, returning the signature
    """

    @property
    def current_owner_address(self) -> str:
        ...

    def sign_and_send(
        self,
        instructions: Sequence["Instruction"],
        options: TransactionOptions,
        redirect_url: Optional[str] = None,
    ) -> str:
        ...


class LocalRelaySigner:
    """
    Keypair-backed signer for local development

    Compiles a v0 transaction with the requested compute unit limit and
    lookup tables, signs it with the keypair, and sends it through the RPC
    client. The keypair pays its own fees.

    Usage:
        signer = LocalRelaySigner(rpc, Keypair())
        signature = signer.sign_and_send(instructions, options)
    """

    def __init__(
        self,
        rpc: "RpcClient",
        keypair: Keypair,
        skip_preflight: Optional[bool] = None,
    ):
        self._rpc = rpc
        self._keypair = keypair
        self._skip_preflight = (
            skip_preflight if skip_preflight is not None else global_config.relay.skip_preflight
        )

    @property
    def current_owner_address(self) -> str:
        return str(self._keypair.pubkey())

    def build(
        self,
        instructions: Sequence["Instruction"],
        options: TransactionOptions,
        recent_blockhash: Optional[str] = None,
    ) -> VersionedTransaction:
        """
        Compile and sign a v0 transaction

        Raises:
            SubmissionError: If no blockhash is available
        """
        if recent_blockhash is None:
            recent_blockhash = self._rpc.get_latest_blockhash().get("blockhash")
        if not recent_blockhash:
            raise SubmissionError("Failed to get recent blockhash")

        all_instructions = [set_compute_unit_limit(options.compute_unit_limit)]
        all_instructions.extend(instructions)

        message = MessageV0.try_compile(
            self._keypair.pubkey(),
            all_instructions,
            list(options.address_lookup_tables),
            Hash.from_string(recent_blockhash),
        )
        return VersionedTransaction(message, [self._keypair])

    def sign_and_send(
        self,
        instructions: Sequence["Instruction"],
        options: TransactionOptions,
        redirect_url: Optional[str] = None,
    ) -> str:
        """Sign with the local keypair and broadcast; redirect_url is unused"""
        tx = self.build(instructions, options)
        signature = self._rpc.send_transaction(bytes(tx), skip_preflight=self._skip_preflight)
        logger.info(f"Transaction sent: {signature}")
        return signature

    @classmethod
    def from_bytes(cls, rpc: "RpcClient", secret_key: bytes) -> "LocalRelaySigner":
        """Create signer from secret key bytes (64 bytes)"""
        return cls(rpc, Keypair.from_bytes(secret_key))

    @classmethod
    def from_base58(cls, rpc: "RpcClient", secret_key: str) -> "LocalRelaySigner":
        """Create signer from base58 secret key"""
        return cls.from_bytes(rpc, base58.b58decode(secret_key))

    @classmethod
    def from_file(cls, rpc: "RpcClient", path: str) -> "LocalRelaySigner":
        """
        Create signer from keypair file

        Supports:
        - JSON array format (Solana CLI): [1,2,3,...]
        - Raw bytes file (64 bytes)
        """
        with open(path, "rb") as f:
            content = f.read()

        try:
            data = json.loads(content)
        except (json.JSONDecodeError, UnicodeDecodeError):
            data = None

        if isinstance(data, list):
            return cls.from_bytes(rpc, bytes(data))
        if len(content) == 64:
            return cls.from_bytes(rpc, content)

        raise ConfigurationError.invalid("keypair_file", f"Cannot parse keypair file: {path}")
