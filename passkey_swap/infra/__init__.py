"""
Infrastructure layer for Passkey Swap

Provides:
- RpcClient: HTTP RPC wrapper with retry logic (AccountReader implementation)
- Lookup table decoding and concurrent resolution
- Transaction normalizer: decode, resolve, decompile, strip compute budget
- SmartWalletSigner: passkey signer capability (LocalRelaySigner for development)
- SubmissionGateway: hands normalized instructions to the signer
- CorrelationContext: correlation IDs for swap tracing
"""

from .rpc import AccountReader, RpcClient, RpcClientConfig
from .lookup_tables import parse_lookup_table, resolve_lookup_tables
from .tx_normalizer import (
    COMPUTE_BUDGET_PROGRAM_ID,
    LegacyPayload,
    VersionedPayload,
    decode_transaction,
    decompile_message,
    normalize_transaction,
    strip_compute_budget,
)
from .solana_signer import SmartWalletSigner, TransactionOptions, LocalRelaySigner
from .submission import SubmissionGateway
from .correlation import (
    CorrelationContext,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
    log_stage,
)

__all__ = [
    "AccountReader",
    "RpcClient",
    "RpcClientConfig",
    "parse_lookup_table",
    "resolve_lookup_tables",
    "COMPUTE_BUDGET_PROGRAM_ID",
    "LegacyPayload",
    "VersionedPayload",
    "decode_transaction",
    "decompile_message",
    "normalize_transaction",
    "strip_compute_budget",
    "SmartWalletSigner",
    "TransactionOptions",
    "LocalRelaySigner",
    "SubmissionGateway",
    "CorrelationContext",
    "generate_correlation_id",
    "get_correlation_id",
    "set_correlation_id",
    "log_stage",
]
