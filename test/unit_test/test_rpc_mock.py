"""
Test RPC Client with Mocks

Tests for RPC client behavior with mocked responses.
"""

import base64
import sys
from pathlib import Path
from unittest.mock import Mock, patch

import httpx
import pytest

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from passkey_swap.infra.rpc import AccountReader, RpcClient, RpcClientConfig
from passkey_swap.errors import ConfigurationError, ErrorCode, RpcError
from solders.pubkey import Pubkey

from conftest import lookup_table_account_data


def _response(payload):
    response = Mock()
    response.status_code = 200
    response.json.return_value = payload
    response.raise_for_status = Mock()
    return response


def _fast_config():
    return RpcClientConfig(timeout_seconds=1.0, max_retries=2, retry_delay_seconds=0)


def test_rpc_config_defaults():
    """Test RpcClientConfig default values from global config"""
    config = RpcClientConfig()

    assert config.timeout_seconds > 0
    assert config.max_retries > 0
    assert config.commitment in ("processed", "confirmed", "finalized")


def test_rpc_config_override():
    config = RpcClientConfig(timeout_seconds=60.0, max_retries=5, commitment="finalized")

    assert config.timeout_seconds == 60.0
    assert config.max_retries == 5
    assert config.commitment == "finalized"


def test_rpc_client_init():
    """Test RpcClient initialization"""
    client = RpcClient("https://api.devnet.solana.com")
    assert client.endpoint == "https://api.devnet.solana.com"

    client = RpcClient(["https://primary.example.com", "https://backup.example.com"])
    assert client.endpoint == "https://primary.example.com"

    with pytest.raises(ConfigurationError):
        RpcClient([])


def test_rpc_client_is_account_reader():
    assert isinstance(RpcClient("https://api.devnet.solana.com"), AccountReader)


def test_rpc_call_success():
    response = _response({
        "jsonrpc": "2.0",
        "id": 1,
        "result": {"context": {"slot": 1}, "value": 2_500_000_000},
    })

    with patch.object(httpx.Client, "post", return_value=response) as post:
        client = RpcClient("https://api.devnet.solana.com", config=_fast_config())
        assert client.get_balance("Owner111") == 2_500_000_000

        body = post.call_args.kwargs["json"]
        assert body["method"] == "getBalance"
        assert body["params"][0] == "Owner111"


def test_rpc_json_error_not_retried():
    """JSON-RPC error objects raise immediately with the node's code"""
    response = _response({
        "jsonrpc": "2.0",
        "id": 1,
        "error": {"code": -32602, "message": "Invalid param: could not find account"},
    })

    with patch.object(httpx.Client, "post", return_value=response) as post:
        client = RpcClient("https://api.devnet.solana.com", config=_fast_config())
        with pytest.raises(RpcError) as exc_info:
            client.get_token_account_balance("Ata111")

        assert post.call_count == 1
        assert exc_info.value.code == ErrorCode.RPC_INVALID_RESPONSE
        assert exc_info.value.rpc_error_code == -32602


def test_rpc_connection_error_retries_then_raises():
    with patch.object(httpx.Client, "post", side_effect=httpx.ConnectError("refused")) as post:
        client = RpcClient("https://api.devnet.solana.com", config=_fast_config())
        with pytest.raises(RpcError) as exc_info:
            client.get_balance("Owner111")

        assert post.call_count == 2
        assert exc_info.value.code == ErrorCode.RPC_CONNECTION_FAILED


def test_rpc_rate_limit_retried():
    limited = _response({})
    limited.status_code = 429
    good = _response({"jsonrpc": "2.0", "id": 1, "result": {"value": 3}})

    with patch.object(httpx.Client, "post", side_effect=[limited, good]) as post:
        client = RpcClient("https://api.devnet.solana.com", config=_fast_config())
        assert client.get_balance("Owner111") == 3
        assert post.call_count == 2


def test_rpc_rate_limit_exhausted():
    limited = _response({})
    limited.status_code = 429

    with patch.object(httpx.Client, "post", return_value=limited):
        client = RpcClient("https://api.devnet.solana.com", config=_fast_config())
        with pytest.raises(RpcError) as exc_info:
            client.get_balance("Owner111")

        assert exc_info.value.code == ErrorCode.RPC_RATE_LIMITED


def test_rpc_endpoint_fallback():
    good = _response({"jsonrpc": "2.0", "id": 1, "result": {"value": 7}})

    with patch.object(
        httpx.Client, "post",
        side_effect=[httpx.ConnectError("down"), httpx.ConnectError("down"), good],
    ):
        client = RpcClient(
            ["https://primary.example.com", "https://backup.example.com"],
            config=_fast_config(),
        )
        assert client.get_balance("Owner111") == 7
        assert client.endpoint == "https://backup.example.com"


class TestLookupTableFetch:
    """getAccountInfo decoding into AddressLookupTableAccount"""

    def test_decodes_addresses(self):
        table_key = Pubkey.new_unique()
        addresses = [Pubkey.new_unique(), Pubkey.new_unique()]
        data = base64.b64encode(lookup_table_account_data(addresses)).decode("ascii")
        response = _response({
            "jsonrpc": "2.0",
            "id": 1,
            "result": {"context": {"slot": 1}, "value": {"data": [data, "base64"], "owner": "AddressLookupTab1e1111111111111111111111111"}},
        })

        with patch.object(httpx.Client, "post", return_value=response):
            client = RpcClient("https://api.devnet.solana.com", config=_fast_config())
            table = client.get_address_lookup_table(str(table_key))

        assert table.key == table_key
        assert list(table.addresses) == addresses

    def test_missing_account_returns_none(self):
        response = _response({"jsonrpc": "2.0", "id": 1, "result": {"context": {"slot": 1}, "value": None}})

        with patch.object(httpx.Client, "post", return_value=response):
            client = RpcClient("https://api.devnet.solana.com", config=_fast_config())
            assert client.get_address_lookup_table(str(Pubkey.new_unique())) is None


def test_send_transaction_encodes_base64():
    response = _response({"jsonrpc": "2.0", "id": 1, "result": "5signature"})

    with patch.object(httpx.Client, "post", return_value=response) as post:
        client = RpcClient("https://api.devnet.solana.com", config=_fast_config())
        assert client.send_transaction(b"\x01\x02\x03", skip_preflight=True) == "5signature"

        params = post.call_args.kwargs["json"]["params"]
        assert params[0] == "AQID"
        assert params[1]["skipPreflight"] is True
        assert params[1]["encoding"] == "base64"
