"""
Swap Module

Runs one USDC⇄SOL swap end to end:
quote → build → normalize → submit through the passkey signer.
"""

from __future__ import annotations

import logging
import threading
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional, Union, TYPE_CHECKING

from ..types import Asset, SwapDirection, SwapQuote, SwapResult
from ..infra.tx_normalizer import normalize_transaction
from ..infra.correlation import CorrelationContext, log_stage
from ..errors import InvalidSwapAmount, PasskeySwapError, SwapInProgress
from ..config import config as global_config

if TYPE_CHECKING:
    from ..client import WalletClient

logger = logging.getLogger(__name__)

AmountLike = Union[str, Decimal, int, float]


def parse_swap_amount(amount: AmountLike, asset: Asset) -> int:
    """
    Convert a user-entered amount to raw units of ``asset``

    Raises:
        InvalidSwapAmount: If the amount is not a positive number or rounds to 0
    """
    text = str(amount).strip()
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(text)
    except (InvalidOperation, ValueError):
        raise InvalidSwapAmount(amount=text)

    if not value.is_finite() or value <= 0:
        raise InvalidSwapAmount(amount=text)

    raw = asset.raw_amount(value)
    if raw <= 0:
        raise InvalidSwapAmount(amount=text)
    return raw


class SwapModule:
    """
    USDC⇄SOL swap module

    One swap at a time: a second call while a swap is in flight raises
    SwapInProgress. No stage retries; every failure surfaces as its typed
    error and the caller restarts from a fresh quote.

    Usage:
        result = client.swap.swap(SwapDirection.USDC_TO_SOL, "1.5")
        print(result.signature)

        quote = client.swap.quote("sol-to-usdc", "0.1")
    """

    def __init__(
        self,
        client: "WalletClient",
        on_success: Optional[Callable[[SwapResult], None]] = None,
    ):
        """
        Initialize swap module

        Args:
            client: WalletClient instance
            on_success: Called with the SwapResult after a successful submission
        """
        self._client = client
        self._on_success = on_success
        self._busy = threading.Lock()

    @property
    def is_busy(self) -> bool:
        """True while a swap is in flight"""
        return self._busy.locked()

    def set_on_success(self, callback: Optional[Callable[[SwapResult], None]]):
        self._on_success = callback

    @staticmethod
    def _direction(direction: Union[SwapDirection, str]) -> SwapDirection:
        if isinstance(direction, SwapDirection):
            return direction
        return SwapDirection.from_string(direction)

    def _quote_raw(self, direction: SwapDirection, raw_amount: int, slippage_bps: Optional[int]) -> SwapQuote:
        slippage = slippage_bps if slippage_bps is not None else global_config.swap.default_slippage_bps
        return self._client.trade_api.get_quote(
            input_mint=direction.input_asset.mint,
            output_mint=direction.output_asset.mint,
            amount=raw_amount,
            slippage_bps=slippage,
            tx_version=direction.tx_version,
        )

    def quote(
        self,
        direction: Union[SwapDirection, str],
        amount: AmountLike,
        slippage_bps: Optional[int] = None,
    ) -> SwapQuote:
        """
        Get a quote without building or submitting

        Args:
            direction: Swap direction (enum or "usdc-to-sol" / "sol-to-usdc")
            amount: Input amount in UI units
            slippage_bps: Slippage tolerance (default from config)

        Raises:
            InvalidSwapAmount: If the amount is not a positive number
            QuoteError: If the quote is unavailable
        """
        direction = self._direction(direction)
        raw_amount = parse_swap_amount(amount, direction.input_asset)
        return self._quote_raw(direction, raw_amount, slippage_bps)

    def swap(
        self,
        direction: Union[SwapDirection, str],
        amount: AmountLike,
        slippage_bps: Optional[int] = None,
        redirect_url: Optional[str] = None,
    ) -> SwapResult:
        """
        Quote, build, normalize and submit a swap

        Args:
            direction: Swap direction (enum or "usdc-to-sol" / "sol-to-usdc")
            amount: Input amount in UI units (e.g. "1.5")
            slippage_bps: Slippage tolerance (default from config)
            redirect_url: Callback target for the passkey flow (default from config)

        Returns:
            SwapResult with the relay signature

        Raises:
            InvalidSwapAmount: Amount is not a positive number
            SwapInProgress: Another swap is in flight
            QuoteError / BuildError: Trade API failures
            LookupTableResolutionError: A v0 lookup table could not be loaded
            SubmissionError: The signer or relay failed
        """
        direction = self._direction(direction)
        raw_amount = parse_swap_amount(amount, direction.input_asset)

        if not self._busy.acquire(blocking=False):
            raise SwapInProgress()

        try:
            with CorrelationContext("swap"):
                result = self._execute(direction, raw_amount, slippage_bps, redirect_url)
        finally:
            self._busy.release()

        if self._on_success is not None:
            try:
                self._on_success(result)
            except Exception as e:
                # Already broadcast: callback failures never fail the swap
                logger.warning(f"Post-swap callback failed for {result.signature}: {e}", exc_info=True)

        return result

    def _execute(
        self,
        direction: SwapDirection,
        raw_amount: int,
        slippage_bps: Optional[int],
        redirect_url: Optional[str],
    ) -> SwapResult:
        stage = "quote"
        try:
            log_stage(logging.INFO, f"{direction} amount={raw_amount}", stage, log=logger)
            quote = self._quote_raw(direction, raw_amount, slippage_bps)

            stage = "build"
            owner = self._client.owner
            transaction = self._client.trade_api.build_swap_transaction(quote, owner, direction)
            log_stage(logging.INFO, f"Received {transaction.tx_version.value} transaction", stage, log=logger)

            stage = "normalize"
            normalized = normalize_transaction(transaction, self._client.rpc)
            log_stage(
                logging.INFO,
                f"{len(normalized)} instruction(s), {len(normalized.lookup_tables)} lookup table(s)",
                stage,
                log=logger,
            )

            stage = "submit"
            signature = self._client.gateway.submit(normalized, redirect_url=redirect_url)
        except PasskeySwapError as e:
            log_stage(logging.WARNING, f"Swap failed: {e}", stage, log=logger)
            raise

        log_stage(logging.INFO, f"Swap successful: {signature}", stage, log=logger)
        return SwapResult(
            signature=signature,
            direction=direction,
            input_amount_raw=raw_amount,
            quote=quote,
            instruction_count=len(normalized),
            lookup_table_count=len(normalized.lookup_tables),
        )
