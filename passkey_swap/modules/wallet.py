"""
Wallet Module

Read-only views of the smart wallet:
- SOL and USDC balances
- Recent activity (signatures)
- SOL/USD price and portfolio snapshot
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import List, Optional, TYPE_CHECKING

import httpx

from ..types import ActivityRecord, BalanceSnapshot, LAMPORTS_PER_SOL, USDC
from ..protocols.raydium.accounts import get_associated_token_address
from ..errors import TransientReadError
from ..config import config as global_config

if TYPE_CHECKING:
    from ..client import WalletClient

logger = logging.getLogger(__name__)


class WalletModule:
    """
    Wallet read operations module

    Provides:
    - sol_balance(): native balance, raises TransientReadError on failure
    - usdc_balance(): USDC ATA balance, 0 when missing or unreadable
    - activity(): recent signatures, [] on failure
    - sol_price(): SOL/USD price, 0 on failure
    - snapshot(): balances + price in one BalanceSnapshot

    Usage:
        client = WalletClient(signer=signer)

        sol = client.wallet.sol_balance()
        usdc = client.wallet.usdc_balance()
        for record in client.wallet.activity():
            print(record.signature, record.status)
    """

    def __init__(self, client: "WalletClient"):
        """
        Initialize wallet module

        Args:
            client: WalletClient instance
        """
        self._client = client
        self._rpc = client.rpc
        self._http: Optional[httpx.Client] = None

    @property
    def address(self) -> str:
        """Smart wallet address"""
        return self._client.owner

    @property
    def usdc_account(self) -> str:
        """USDC associated token account of the wallet"""
        return str(get_associated_token_address(self.address, USDC.mint))

    def sol_balance(self) -> Decimal:
        """
        Get native SOL balance

        Returns:
            Balance in SOL

        Raises:
            TransientReadError: If the RPC read fails
        """
        address = self.address
        try:
            lamports = self._rpc.get_balance(address)
            return Decimal(int(lamports)) / Decimal(LAMPORTS_PER_SOL)
        except Exception as e:
            logger.warning(f"SOL balance read failed: {e}")
            raise TransientReadError.failed("SOL balance", e) from e

    def usdc_balance(self) -> Decimal:
        """
        Get USDC balance

        A wallet that never held USDC has no token account; that reads as 0,
        as does any RPC failure.
        """
        account = self.usdc_account
        try:
            value = self._rpc.get_token_account_balance(account) or {}
            amount = value.get("amount")
            if amount is None:
                return Decimal(0)
            return Decimal(int(amount)) / Decimal(10 ** int(value.get("decimals", USDC.decimals)))
        except Exception as e:
            logger.debug(f"USDC balance unavailable, using 0: {e}")
            return Decimal(0)

    def activity(self, limit: Optional[int] = None) -> List[ActivityRecord]:
        """
        Get recent wallet activity, newest first

        Args:
            limit: Max records (default from config, 20)

        Returns:
            List of ActivityRecord, empty if the read fails
        """
        limit = limit if limit is not None else global_config.wallet.activity_limit
        address = self.address
        try:
            entries = self._rpc.get_signatures_for_address(address, limit=limit)
            return [ActivityRecord.from_rpc(entry) for entry in entries]
        except Exception as e:
            logger.warning(f"Activity read failed: {e}")
            return []

    def _get_http(self) -> httpx.Client:
        if self._http is None:
            self._http = httpx.Client(timeout=global_config.wallet.price_timeout)
        return self._http

    def sol_price(self) -> Decimal:
        """SOL/USD spot price; 0 when the price feed is unavailable"""
        params = {"ids": "solana", "vs_currencies": "usd"}
        try:
            response = self._get_http().get(global_config.wallet.price_url, params=params)
            response.raise_for_status()
            return Decimal(str(response.json()["solana"]["usd"]))
        except (httpx.HTTPError, ValueError, KeyError, TypeError, InvalidOperation) as e:
            logger.warning(f"Failed to fetch SOL price: {e}")
            return Decimal(0)

    def snapshot(self, previous: Optional[BalanceSnapshot] = None) -> BalanceSnapshot:
        """
        Read balances and price together

        Args:
            previous: Last snapshot; its SOL value is kept if the SOL read fails

        Raises:
            TransientReadError: If the SOL read fails and there is no previous snapshot
        """
        try:
            sol = self.sol_balance()
        except TransientReadError:
            if previous is None:
                raise
            sol = previous.sol

        return BalanceSnapshot(
            sol=sol,
            usdc=self.usdc_balance(),
            sol_price_usd=self.sol_price(),
            updated_at=datetime.now(timezone.utc),
        )

    def close(self):
        """Close price feed HTTP client"""
        if self._http:
            self._http.close()
            self._http = None
