"""
Raydium Trade API Unit Tests

Tests quote and build request shaping and error mapping with mocked HTTP.
"""

import sys
from pathlib import Path
from unittest.mock import Mock, patch

import httpx
import pytest

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from solders.pubkey import Pubkey

from passkey_swap.protocols.raydium.api import RaydiumTradeAPI
from passkey_swap.protocols.raydium.accounts import get_associated_token_address
from passkey_swap.types import SOL, USDC, SwapDirection, SwapQuote, TxVersion, WRAPPED_SOL_MINT
from passkey_swap.errors import BuildError, ErrorCode, QuoteError

HOST = "https://trade.example.com"


def _response(payload, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    if status_code >= 400:
        request = httpx.Request("GET", HOST)
        error_response = httpx.Response(status_code, request=request)
        response.raise_for_status = Mock(
            side_effect=httpx.HTTPStatusError("error", request=request, response=error_response)
        )
    else:
        response.raise_for_status = Mock()
    return response


def _quote(tx_version=TxVersion.LEGACY):
    return SwapQuote(
        input_mint=USDC.mint,
        output_mint=SOL.mint,
        amount=1_500_000,
        slippage_bps=50,
        tx_version=tx_version,
        raw_response={"id": "q-1", "success": True, "data": {"outputAmount": "10000000"}},
    )


@pytest.fixture
def api():
    client = RaydiumTradeAPI(timeout=5.0, swap_host=HOST, compute_unit_price="100000")
    yield client
    client.close()


class TestGetQuote:

    def test_request_params(self, api):
        payload = {"id": "q-1", "success": True, "data": {"outputAmount": "10000000"}}
        with patch.object(httpx.Client, "get", return_value=_response(payload)) as get:
            quote = api.get_quote(USDC.mint, SOL.mint, 1_500_000, 50, TxVersion.LEGACY)

        url = get.call_args.args[0]
        params = get.call_args.kwargs["params"]
        assert url == f"{HOST}/compute/swap-base-in"
        assert params == {
            "inputMint": USDC.mint,
            "outputMint": SOL.mint,
            "amount": "1500000",
            "slippageBps": 50,
            "txVersion": "LEGACY",
        }
        assert quote.raw_response == payload
        assert quote.tx_version is TxVersion.LEGACY
        assert quote.output_amount == 10_000_000

    def test_http_error(self, api):
        with patch.object(httpx.Client, "get", return_value=_response({}, status_code=500)):
            with pytest.raises(QuoteError) as exc_info:
                api.get_quote(USDC.mint, SOL.mint, 1_500_000)

        assert exc_info.value.message == "Quote failed"
        assert exc_info.value.details["status_code"] == 500

    def test_transport_error(self, api):
        with patch.object(httpx.Client, "get", side_effect=httpx.ConnectError("offline")):
            with pytest.raises(QuoteError) as exc_info:
                api.get_quote(USDC.mint, SOL.mint, 1_500_000)

        assert exc_info.value.code == ErrorCode.QUOTE_FAILED

    def test_rejected_with_message(self, api):
        payload = {"success": False, "msg": "REQ_AMOUNT_TOO_SMALL"}
        with patch.object(httpx.Client, "get", return_value=_response(payload)):
            with pytest.raises(QuoteError) as exc_info:
                api.get_quote(USDC.mint, SOL.mint, 1)

        assert exc_info.value.message == "REQ_AMOUNT_TOO_SMALL"
        assert exc_info.value.code == ErrorCode.QUOTE_REJECTED

    def test_rejected_without_message(self, api):
        with patch.object(httpx.Client, "get", return_value=_response({"success": False})):
            with pytest.raises(QuoteError) as exc_info:
                api.get_quote(USDC.mint, SOL.mint, 1)

        assert exc_info.value.message == "Quote error"


class TestBuildSwapTransaction:

    def test_usdc_to_sol_body(self, api):
        wallet = str(Pubkey.new_unique())
        body = api.swap_request_body(_quote(), wallet, SwapDirection.USDC_TO_SOL)

        assert body["computeUnitPriceMicroLamports"] == "100000"
        assert body["swapResponse"] == _quote().raw_response
        assert body["txVersion"] == "LEGACY"
        assert body["wallet"] == wallet
        assert body["inputAccount"] == str(get_associated_token_address(wallet, USDC.mint))
        assert body["outputAccount"] == str(get_associated_token_address(wallet, WRAPPED_SOL_MINT))
        assert body["wrapSol"] is False
        assert body["unwrapSol"] is True

    def test_sol_to_usdc_body(self, api):
        wallet = str(Pubkey.new_unique())
        quote = SwapQuote(SOL.mint, USDC.mint, 100_000_000, 50, TxVersion.V0, {"success": True})
        body = api.swap_request_body(quote, wallet, SwapDirection.SOL_TO_USDC)

        assert "inputAccount" not in body
        assert body["outputAccount"] == str(get_associated_token_address(wallet, USDC.mint))
        assert body["wrapSol"] is True
        assert body["unwrapSol"] is False
        assert body["txVersion"] == "V0"

    def test_returns_first_transaction(self, api):
        payload = {"success": True, "data": [{"transaction": "AQID"}, {"transaction": "BAUG"}]}
        wallet = str(Pubkey.new_unique())
        with patch.object(httpx.Client, "post", return_value=_response(payload)) as post:
            tx = api.build_swap_transaction(_quote(), wallet, SwapDirection.USDC_TO_SOL)

        assert post.call_args.args[0] == f"{HOST}/transaction/swap-base-in"
        assert post.call_args.kwargs["json"]["wallet"] == wallet
        assert tx.transaction == "AQID"
        assert tx.tx_version is TxVersion.LEGACY

    def test_http_error(self, api):
        with patch.object(httpx.Client, "post", return_value=_response({}, status_code=502)):
            with pytest.raises(BuildError) as exc_info:
                api.build_swap_transaction(_quote(), str(Pubkey.new_unique()), SwapDirection.USDC_TO_SOL)

        assert exc_info.value.message == "Swap transaction failed"

    def test_rejected(self, api):
        payload = {"success": False, "msg": "INSUFFICIENT_BALANCE"}
        with patch.object(httpx.Client, "post", return_value=_response(payload)):
            with pytest.raises(BuildError) as exc_info:
                api.build_swap_transaction(_quote(), str(Pubkey.new_unique()), SwapDirection.USDC_TO_SOL)

        assert exc_info.value.message == "INSUFFICIENT_BALANCE"
        assert exc_info.value.code == ErrorCode.BUILD_REJECTED

    def test_rejected_without_message(self, api):
        with patch.object(httpx.Client, "post", return_value=_response({"success": False})):
            with pytest.raises(BuildError) as exc_info:
                api.build_swap_transaction(_quote(), str(Pubkey.new_unique()), SwapDirection.USDC_TO_SOL)

        assert exc_info.value.message == "Swap error"

    def test_missing_transaction(self, api):
        with patch.object(httpx.Client, "post", return_value=_response({"success": True, "data": []})):
            with pytest.raises(BuildError):
                api.build_swap_transaction(_quote(), str(Pubkey.new_unique()), SwapDirection.USDC_TO_SOL)
