"""
Raydium Trade API Client

REST client for the Raydium swap-base-in quote and transaction endpoints.
"""

import logging
from typing import Optional, Dict, Any

import httpx

from ...types import SwapDirection, SwapQuote, SwapTransaction, TxVersion, USDC, WRAPPED_SOL_MINT
from ...config import config as global_config
from ...errors import QuoteError, BuildError
from .accounts import get_associated_token_address
from .constants import QUOTE_PATH, BUILD_PATH

logger = logging.getLogger(__name__)


class RaydiumTradeAPI:
    """
    Raydium trade API client

    Provides:
    - Swap quotes (exact input)
    - Prebuilt swap transactions (legacy or v0)

    Neither call retries; a failure surfaces to the caller as a typed error.

    Usage:
        api = RaydiumTradeAPI()
        quote = api.get_quote(USDC_MINT, SOL_MINT, 1_500_000, 50, TxVersion.LEGACY)
        tx = api.build_swap_transaction(quote, wallet, SwapDirection.USDC_TO_SOL)
    """

    def __init__(
        self,
        timeout: float = None,
        swap_host: str = None,
        compute_unit_price: str = None,
    ):
        """
        Initialize trade API client

        Args:
            timeout: Request timeout in seconds (default from config)
            swap_host: Trade API host (default from config)
            compute_unit_price: Priority fee hint in micro-lamports (default from config)
        """
        self._timeout = timeout if timeout is not None else global_config.swap.timeout
        host = swap_host if swap_host is not None else global_config.swap.swap_host
        self._quote_url = host.rstrip("/") + QUOTE_PATH
        self._build_url = host.rstrip("/") + BUILD_PATH
        self._compute_unit_price = (
            compute_unit_price if compute_unit_price is not None else global_config.swap.compute_unit_price
        )
        self._client: Optional[httpx.Client] = None

    @property
    def quote_url(self) -> str:
        return self._quote_url

    @property
    def build_url(self) -> str:
        return self._build_url

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.Client(timeout=self._timeout)
        return self._client

    def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        slippage_bps: int = 50,
        tx_version: TxVersion = TxVersion.V0,
    ) -> SwapQuote:
        """
        Get exact-input swap quote

        Args:
            input_mint: Input token mint address
            output_mint: Output token mint address
            amount: Amount in smallest units
            slippage_bps: Slippage tolerance in basis points
            tx_version: Transaction format the quote will be built into

        Returns:
            SwapQuote carrying the raw response

        Raises:
            QuoteError: On HTTP failure or a rejected quote
        """
        client = self._get_client()

        params = {
            "inputMint": input_mint,
            "outputMint": output_mint,
            "amount": str(amount),
            "slippageBps": slippage_bps,
            "txVersion": tx_version.value,
        }

        try:
            response = client.get(self._quote_url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Raydium quote failed: HTTP {e.response.status_code}")
            raise QuoteError.request_failed(e, e.response.status_code) from e
        except httpx.HTTPError as e:
            logger.warning(f"Raydium quote failed: {e}")
            raise QuoteError.request_failed(e) from e
        except ValueError as e:
            logger.warning(f"Raydium quote returned invalid JSON: {e}")
            raise QuoteError.request_failed(e) from e

        if not data.get("success"):
            logger.warning(f"Raydium quote rejected: {data.get('msg')}")
            raise QuoteError.rejected(data.get("msg"))

        return SwapQuote(
            input_mint=input_mint,
            output_mint=output_mint,
            amount=amount,
            slippage_bps=slippage_bps,
            tx_version=tx_version,
            raw_response=data,
        )

    def swap_request_body(
        self,
        quote: SwapQuote,
        wallet: str,
        direction: SwapDirection,
    ) -> Dict[str, Any]:
        """
        Build the swap transaction request body

        USDC→SOL names both token accounts and unwraps the output;
        SOL→USDC wraps native SOL and names only the USDC account.
        """
        usdc_account = str(get_associated_token_address(wallet, USDC.mint))

        body: Dict[str, Any] = {
            "computeUnitPriceMicroLamports": self._compute_unit_price,
            "swapResponse": quote.raw_response,
            "txVersion": quote.tx_version.value,
            "wallet": wallet,
        }

        if direction is SwapDirection.USDC_TO_SOL:
            body["inputAccount"] = usdc_account
            body["outputAccount"] = str(get_associated_token_address(wallet, WRAPPED_SOL_MINT))
            body["wrapSol"] = False
            body["unwrapSol"] = True
        else:
            body["outputAccount"] = usdc_account
            body["wrapSol"] = True
            body["unwrapSol"] = False

        return body

    def build_swap_transaction(
        self,
        quote: SwapQuote,
        wallet: str,
        direction: SwapDirection,
    ) -> SwapTransaction:
        """
        Get prebuilt swap transaction

        Args:
            quote: Quote from get_quote(), passed through unmodified
            wallet: Smart wallet address (base58)
            direction: Swap direction

        Returns:
            SwapTransaction (base64) tagged with the quote's tx version

        Raises:
            BuildError: On HTTP failure, a rejected build or a missing transaction
        """
        client = self._get_client()
        body = self.swap_request_body(quote, wallet, direction)

        try:
            response = client.post(self._build_url, json=body)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Raydium swap tx failed: HTTP {e.response.status_code}")
            raise BuildError.request_failed(e, e.response.status_code) from e
        except httpx.HTTPError as e:
            logger.warning(f"Raydium swap tx failed: {e}")
            raise BuildError.request_failed(e) from e
        except ValueError as e:
            logger.warning(f"Raydium swap tx returned invalid JSON: {e}")
            raise BuildError.request_failed(e) from e

        if not data.get("success"):
            logger.warning(f"Raydium swap tx rejected: {data.get('msg')}")
            raise BuildError.rejected(data.get("msg"))

        entries = data.get("data") or []
        transaction = entries[0].get("transaction") if entries and isinstance(entries[0], dict) else None
        if not transaction:
            raise BuildError("No swap transaction in response from Raydium API")

        return SwapTransaction(transaction=transaction, tx_version=quote.tx_version)

    def close(self):
        """Close HTTP client"""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
