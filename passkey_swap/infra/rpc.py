"""
Solana JSON-RPC access

AccountReader is the read capability the swap core and wallet reads depend
on. RpcClient implements it over HTTP, walking a list of endpoints and
retrying transport failures on each before moving to the next. Errors the
node reports inside a JSON-RPC response are raised at once.
"""

from __future__ import annotations

import base64
import logging
import time
import threading
from typing import Any, Dict, List, Optional, Protocol, Union, runtime_checkable, TYPE_CHECKING
from dataclasses import dataclass

import httpx

from ..errors import RpcError, ConfigurationError
from ..config import config as global_config
from .lookup_tables import parse_lookup_table

if TYPE_CHECKING:
    from solders.address_lookup_table_account import AddressLookupTableAccount

logger = logging.getLogger(__name__)


@runtime_checkable
class AccountReader(Protocol):
    """
    Read capability over a Solana node

    Implementations must provide:
    - get_balance(): native balance in lamports
    - get_token_account_balance(): SPL token account balance info
    - get_address_lookup_table(): resolved lookup table or None
    - get_signatures_for_address(): recent signatures, newest first
    """

    def get_balance(self, address: str) -> int:
        ...

    def get_token_account_balance(self, token_account: str) -> Dict[str, Any]:
        ...

    def get_address_lookup_table(self, address: str) -> Optional["AddressLookupTableAccount"]:
        ...

    def get_signatures_for_address(self, address: str, limit: int = 20) -> List[Dict[str, Any]]:
        ...


@dataclass
class RpcClientConfig:
    """
    Per-client RPC settings; unset fields fall back to config.rpc

    Usage:
        client = RpcClient(url, config=RpcClientConfig(max_retries=5))
    """
    timeout_seconds: float = None
    max_retries: int = None
    retry_delay_seconds: float = None
    commitment: str = None

    def __post_init__(self):
        for name in ("timeout_seconds", "max_retries", "retry_delay_seconds", "commitment"):
            if getattr(self, name) is None:
                setattr(self, name, getattr(global_config.rpc, name))


class _Retryable(Exception):
    """Carries a transport failure that the next attempt may clear"""

    def __init__(self, error: RpcError):
        super().__init__(str(error))
        self.error = error


class RpcClient:
    """
    Solana RPC client with endpoint fallback

    Usage:
        rpc = RpcClient("https://api.devnet.solana.com")
        rpc = RpcClient(["https://primary.example.com", "https://backup.example.com"])

        lamports = rpc.get_balance(owner)
        table = rpc.get_address_lookup_table(table_address)
    """

    def __init__(
        self,
        endpoint: Union[str, List[str], None] = None,
        config: Optional[RpcClientConfig] = None,
    ):
        """
        Args:
            endpoint: URL or list of URLs tried in order (default: SOLANA_RPC_URL)
            config: Timeout, retry and commitment overrides
        """
        urls = [endpoint or global_config.rpc.url] if not isinstance(endpoint, list) else endpoint
        self._endpoints = [url for url in urls if url]
        if not self._endpoints:
            raise ConfigurationError.missing("RPC endpoint")

        self._config = config or RpcClientConfig()
        self._active = 0
        self._http: Optional[httpx.Client] = None
        self._http_lock = threading.Lock()

    @property
    def endpoint(self) -> str:
        """Endpoint the next request goes to"""
        return self._endpoints[self._active]

    @property
    def commitment(self) -> str:
        return self._config.commitment

    def _session(self) -> httpx.Client:
        with self._http_lock:
            if self._http is None:
                self._http = httpx.Client(
                    timeout=self._config.timeout_seconds,
                    headers={"Content-Type": "application/json"},
                )
            return self._http

    def _next_endpoint(self):
        if len(self._endpoints) > 1:
            self._active = (self._active + 1) % len(self._endpoints)
            logger.info(f"Switching RPC endpoint to {self.endpoint}")

    def _backoff(self, attempt: int):
        time.sleep(self._config.retry_delay_seconds * (attempt + 1))

    def _attempt(self, body: Dict[str, Any], timeout: float) -> Any:
        """
        One POST to the active endpoint

        Raises:
            _Retryable: transport trouble (timeout, connection, HTTP status, 429, bad JSON)
            RpcError: the node answered with a JSON-RPC error object
        """
        url = self.endpoint
        try:
            response = self._session().post(url, json=body, timeout=timeout)
            if response.status_code == 429:
                raise _Retryable(RpcError.rate_limited(url))
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException:
            raise _Retryable(RpcError.timeout(url, timeout))
        except httpx.HTTPStatusError as e:
            raise _Retryable(RpcError(f"HTTP error {e.response.status_code}", endpoint=url, original_error=e))
        except httpx.RequestError as e:
            raise _Retryable(RpcError.connection_failed(url, e))
        except ValueError as e:
            raise _Retryable(RpcError.bad_payload(url, e))

        if "error" in payload:
            raise RpcError.from_node_error(payload["error"], url)
        return payload.get("result")

    def call(self, method: str, params: List[Any], timeout: Optional[float] = None) -> Any:
        """
        Make a JSON-RPC call

        Each endpoint gets max_retries attempts with linear backoff before the
        client moves on to the next one.

        Returns:
            The "result" member of the response

        Raises:
            RpcError: Node error, or the last transport failure once every endpoint is exhausted
        """
        body = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}
        timeout = timeout or self._config.timeout_seconds
        retries = self._config.max_retries
        failure: Optional[RpcError] = None

        for _ in self._endpoints:
            for attempt in range(retries):
                try:
                    return self._attempt(body, timeout)
                except _Retryable as e:
                    failure = e.error
                    logger.warning(f"{method} attempt {attempt + 1}/{retries} on {self.endpoint} failed: {failure}")
                if attempt + 1 < retries:
                    self._backoff(attempt)
            self._next_endpoint()

        raise failure or RpcError("All RPC endpoints failed")

    def _opts(self, commitment: Optional[str], **extra) -> Dict[str, Any]:
        return {"commitment": commitment or self.commitment, **extra}

    @staticmethod
    def _value(result: Any, default: Any) -> Any:
        return result.get("value", default) if result else default

    def get_account_info(self, address: str, encoding: str = "base64", commitment: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Raw account info, None if the account does not exist"""
        result = self.call("getAccountInfo", [address, self._opts(commitment, encoding=encoding)])
        return self._value(result, None)

    def get_balance(self, address: str, commitment: Optional[str] = None) -> int:
        """Native balance in lamports"""
        return self._value(self.call("getBalance", [address, self._opts(commitment)]), 0)

    def get_token_account_balance(self, token_account: str, commitment: Optional[str] = None) -> Dict[str, Any]:
        """
        SPL token account balance

        Returns:
            {"amount", "decimals", "uiAmount", "uiAmountString"}

        Raises:
            RpcError: Including "could not find account" for an account that was never created
        """
        return self._value(self.call("getTokenAccountBalance", [token_account, self._opts(commitment)]), {})

    def get_address_lookup_table(self, address: str, commitment: Optional[str] = None) -> Optional["AddressLookupTableAccount"]:
        """
        Fetch and decode an address lookup table

        Returns:
            AddressLookupTableAccount, or None when the account is missing or empty
        """
        info = self.get_account_info(address, commitment=commitment)
        data = (info or {}).get("data")
        if not data:
            return None
        # base64 encoding answers ["<data>", "base64"]
        raw = base64.b64decode(data[0] if isinstance(data, list) else data)
        return parse_lookup_table(address, raw) if raw else None

    def get_signatures_for_address(self, address: str, limit: int = 20, commitment: Optional[str] = None) -> List[Dict[str, Any]]:
        """Recent signatures involving address, newest first"""
        return self.call("getSignaturesForAddress", [address, self._opts(commitment, limit=limit)]) or []

    def get_latest_blockhash(self, commitment: Optional[str] = None) -> Dict[str, Any]:
        """{"blockhash", "lastValidBlockHeight"}"""
        return self._value(self.call("getLatestBlockhash", [self._opts(commitment)]), {})

    def send_transaction(
        self,
        transaction: bytes,
        skip_preflight: bool = False,
        preflight_commitment: Optional[str] = None,
    ) -> str:
        """
        Submit a signed transaction

        Returns:
            Signature (base58)
        """
        options = {
            "skipPreflight": skip_preflight,
            "preflightCommitment": preflight_commitment or self.commitment,
            "encoding": "base64",
        }
        return self.call("sendTransaction", [base64.b64encode(transaction).decode("ascii"), options])

    def close(self):
        if self._http:
            self._http.close()
            self._http = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
