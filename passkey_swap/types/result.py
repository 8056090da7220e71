"""
Result type definitions for quotes, swap transactions and wallet reads
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple, TYPE_CHECKING

from .common import Asset
from .solana_tokens import SOL, USDC

if TYPE_CHECKING:
    from solders.address_lookup_table_account import AddressLookupTableAccount
    from solders.instruction import Instruction


class TxVersion(Enum):
    """Transaction format requested from the trade API"""
    LEGACY = "LEGACY"
    V0 = "V0"

    @property
    def is_versioned(self) -> bool:
        return self is TxVersion.V0


class SwapDirection(Enum):
    """Supported swap directions"""
    USDC_TO_SOL = "usdc-to-sol"
    SOL_TO_USDC = "sol-to-usdc"

    @classmethod
    def from_string(cls, value: str) -> "SwapDirection":
        """
        Parse direction from "usdc-to-sol" / "sol-to-usdc" style strings

        Raises:
            ValueError: If the direction is unknown
        """
        normalized = value.strip().lower().replace("_", "-").replace("->", "-to-").replace("→", "-to-")
        normalized = "-".join(part for part in normalized.replace(" ", "-").split("-") if part)
        for direction in cls:
            if direction.value == normalized:
                return direction
        raise ValueError(f"Unknown swap direction: {value}")

    @property
    def input_asset(self) -> Asset:
        return USDC if self is SwapDirection.USDC_TO_SOL else SOL

    @property
    def output_asset(self) -> Asset:
        return SOL if self is SwapDirection.USDC_TO_SOL else USDC

    @property
    def tx_version(self) -> TxVersion:
        """USDC→SOL routes are requested as legacy, SOL→USDC as v0"""
        return TxVersion.LEGACY if self is SwapDirection.USDC_TO_SOL else TxVersion.V0

    def __str__(self) -> str:
        return f"{self.input_asset.symbol}→{self.output_asset.symbol}"


@dataclass(frozen=True)
class SwapQuote:
    """
    Aggregator quote

    The raw response is opaque and is passed to the build endpoint unmodified.

    Attributes:
        input_mint: Input token mint
        output_mint: Output token mint
        amount: Input amount (raw)
        slippage_bps: Requested slippage in basis points
        tx_version: Requested transaction format
        raw_response: Full quote response body
    """
    input_mint: str
    output_mint: str
    amount: int
    slippage_bps: int
    tx_version: TxVersion
    raw_response: Dict[str, Any] = field(default_factory=dict)

    @property
    def output_amount(self) -> Optional[int]:
        """Quoted output amount (raw) if the response carries one"""
        data = self.raw_response.get("data") or {}
        value = data.get("outputAmount") if isinstance(data, dict) else None
        return int(value) if value is not None else None

    def __str__(self) -> str:
        return f"Quote({self.amount} {self.input_mint[:6]}.. -> {self.output_amount}, {self.tx_version.value})"


@dataclass(frozen=True)
class SwapTransaction:
    """
    Prebuilt swap transaction as returned by the build endpoint

    Attributes:
        transaction: Base64-encoded wire transaction
        tx_version: Legacy or v0 discriminator
    """
    transaction: str
    tx_version: TxVersion

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.transaction)


@dataclass(frozen=True)
class NormalizedInstructionSet:
    """
    Instructions ready for the passkey signer

    Attributes:
        instructions: Absolute instructions, compute-budget instructions removed
        lookup_tables: Resolved lookup tables (empty for legacy)
        tx_version: Source transaction format
    """
    instructions: Tuple["Instruction", ...]
    lookup_tables: Tuple["AddressLookupTableAccount", ...] = ()
    tx_version: TxVersion = TxVersion.LEGACY

    def __len__(self) -> int:
        return len(self.instructions)


@dataclass(frozen=True)
class ActivityRecord:
    """
    Display-ready entry of the wallet's recent signatures

    Attributes:
        signature: Transaction signature (base58)
        timestamp: Formatted block time, "Unknown" if absent
        status: "Success" or "Failed"
        slot: Slot the transaction landed in
    """
    signature: str
    timestamp: str
    status: str
    slot: int

    SUCCESS = "Success"
    FAILED = "Failed"
    UNKNOWN_TIME = "Unknown"

    @property
    def is_success(self) -> bool:
        return self.status == self.SUCCESS

    @classmethod
    def from_rpc(cls, entry: Dict[str, Any]) -> "ActivityRecord":
        """Build from one getSignaturesForAddress result entry"""
        block_time = entry.get("blockTime")
        if block_time:
            timestamp = datetime.fromtimestamp(block_time, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
        else:
            timestamp = cls.UNKNOWN_TIME
        return cls(
            signature=entry.get("signature", ""),
            timestamp=timestamp,
            status=cls.FAILED if entry.get("err") else cls.SUCCESS,
            slot=int(entry.get("slot") or 0),
        )


@dataclass(frozen=True)
class BalanceSnapshot:
    """
    Wallet balances at one point in time

    Attributes:
        sol: Native SOL balance
        usdc: USDC balance
        sol_price_usd: SOL/USD price (0 when unavailable)
        updated_at: UTC time of the read
    """
    sol: Decimal = Decimal(0)
    usdc: Decimal = Decimal(0)
    sol_price_usd: Decimal = Decimal(0)
    updated_at: Optional[datetime] = None

    @property
    def total_value_usd(self) -> Decimal:
        return (self.sol * self.sol_price_usd + self.usdc).quantize(Decimal("0.01"))


@dataclass(frozen=True)
class SwapResult:
    """
    Outcome of a submitted swap

    Attributes:
        signature: Signature returned by the relay
        direction: Swap direction
        input_amount_raw: Input amount in smallest units
        quote: Quote the transaction was built from
        instruction_count: Number of instructions submitted
        lookup_table_count: Number of lookup tables submitted
    """
    signature: str
    direction: SwapDirection
    input_amount_raw: int
    quote: SwapQuote
    instruction_count: int = 0
    lookup_table_count: int = 0

    def __str__(self) -> str:
        return f"SwapResult({self.direction}, {self.signature[:16]}...)"
