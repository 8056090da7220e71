"""
WalletClient - Unified entry point for the passkey wallet

Wires the RPC client, Raydium trade API and passkey signer together and
exposes them through functional modules (wallet, swap).
"""

from __future__ import annotations

from typing import Optional, Union, List, TYPE_CHECKING

if TYPE_CHECKING:
    from solders.keypair import Keypair

from .infra import RpcClient, RpcClientConfig, SmartWalletSigner, LocalRelaySigner, SubmissionGateway
from .protocols.raydium import RaydiumTradeAPI
from .errors import ConfigurationError


class WalletClient:
    """
    Passkey wallet client

    Provides access to wallet operations through functional modules:
    - wallet: Balances, activity, price snapshot
    - swap: USDC⇄SOL swaps submitted through the passkey signer

    Usage:
        # With a smart-wallet signer (passkey portal + paymaster)
        client = WalletClient(signer=passkey_signer)

        # Local development with a plain keypair
        client = WalletClient(
            rpc_url="https://api.devnet.solana.com",
            keypair_path="/path/to/keypair.json",
        )

        snapshot = client.wallet.snapshot()
        result = client.swap.swap("usdc-to-sol", "1.5")
    """

    def __init__(
        self,
        rpc_url: Union[str, List[str], None] = None,
        signer: Optional[SmartWalletSigner] = None,
        keypair: Optional["Keypair"] = None,
        keypair_path: Optional[str] = None,
        rpc_config: Optional[RpcClientConfig] = None,
        trade_api: Optional[RaydiumTradeAPI] = None,
    ):
        """
        Initialize WalletClient

        Args:
            rpc_url: RPC endpoint URL or list of URLs (defaults to SOLANA_RPC_URL)
            signer: Smart-wallet signer
            keypair: Keypair for a LocalRelaySigner (ignored if signer is given)
            keypair_path: Keypair file for a LocalRelaySigner (ignored if signer is given)
            rpc_config: Optional RPC configuration
            trade_api: Optional trade API client
        """
        self._rpc = RpcClient(rpc_url, config=rpc_config)

        if signer is None and keypair is not None:
            signer = LocalRelaySigner(self._rpc, keypair)
        elif signer is None and keypair_path:
            signer = LocalRelaySigner.from_file(self._rpc, keypair_path)
        self._signer = signer

        self._trade_api = trade_api or RaydiumTradeAPI()
        self._gateway: Optional[SubmissionGateway] = None

        # Lazy-loaded modules
        self._wallet: Optional["WalletModule"] = None
        self._swap: Optional["SwapModule"] = None

    @property
    def rpc(self) -> RpcClient:
        """Access to RPC client"""
        return self._rpc

    @property
    def signer(self) -> SmartWalletSigner:
        """Access to signer"""
        if self._signer is None:
            raise ConfigurationError.missing("signer")
        return self._signer

    @property
    def owner(self) -> str:
        """Smart wallet address"""
        return self.signer.current_owner_address

    @property
    def trade_api(self) -> RaydiumTradeAPI:
        """Access to Raydium trade API client"""
        return self._trade_api

    @property
    def gateway(self) -> SubmissionGateway:
        """Access to submission gateway"""
        if self._gateway is None:
            self._gateway = SubmissionGateway(self.signer)
        return self._gateway

    @property
    def wallet(self) -> "WalletModule":
        """
        Wallet module for balance and activity reads

        Provides:
        - sol_balance() / usdc_balance()
        - activity(limit)
        - sol_price() / snapshot()
        """
        if self._wallet is None:
            from .modules.wallet import WalletModule
            self._wallet = WalletModule(self)
        return self._wallet

    @property
    def swap(self) -> "SwapModule":
        """
        Swap module for USDC⇄SOL swaps

        Provides:
        - quote(direction, amount): Get swap quote
        - swap(direction, amount): Quote, build, normalize and submit
        """
        if self._swap is None:
            from .modules.swap import SwapModule
            self._swap = SwapModule(self)
        return self._swap

    def close(self):
        """Close client connections and release resources"""
        if self._wallet is not None:
            self._wallet.close()
        self._trade_api.close()
        self._rpc.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        owner = self._signer.current_owner_address[:8] if self._signer is not None else None
        return f"WalletClient(endpoint={self._rpc.endpoint}, owner={owner}...)"


# Type hints for modules (resolved at runtime)
if TYPE_CHECKING:
    from .modules.wallet import WalletModule
    from .modules.swap import SwapModule
