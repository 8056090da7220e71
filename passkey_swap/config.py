"""
Configuration management for Passkey Swap

Every setting is read from the environment (a .env next to the package is
loaded first) when its dataclass is instantiated. Logging setup with
rotating file output lives here too.
"""

import os
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional, List

from dotenv import load_dotenv

_ENV_FILE = Path(__file__).parent.parent / ".env"
_TRUTHY = ("true", "1", "yes", "on")


def _load_env_file():
    if _ENV_FILE.exists():
        load_dotenv(_ENV_FILE)


_load_env_file()


def _env(key: str, default: Any) -> Any:
    """
    Read key from the environment, coerced to the type of default

    Unparseable numbers log a warning and yield default.
    """
    raw = os.getenv(key)
    if raw is None:
        return default
    if isinstance(default, bool):
        return raw.lower() in _TRUTHY
    if isinstance(default, (int, float)):
        try:
            return type(default)(raw)
        except ValueError:
            logging.getLogger(__name__).warning(f"Ignoring {key}={raw!r}, expected {type(default).__name__}; using {default}")
            return default
    return raw


def _setting(key: str, default: Any):
    return field(default_factory=lambda: _env(key, default))


@dataclass
class RpcConfig:
    """Solana RPC endpoint and transport retry settings"""
    url: str = _setting("SOLANA_RPC_URL", "https://api.devnet.solana.com")
    timeout_seconds: float = _setting("RPC_TIMEOUT_SECONDS", 30.0)
    max_retries: int = _setting("RPC_MAX_RETRIES", 3)
    retry_delay_seconds: float = _setting("RPC_RETRY_DELAY_SECONDS", 0.5)
    commitment: str = _setting("RPC_COMMITMENT", "confirmed")


@dataclass
class SwapApiConfig:
    """Raydium trade API (devnet host by default)"""
    swap_host: str = _setting("RAYDIUM_SWAP_HOST", "https://transaction-v1-devnet.raydium.io")
    timeout: float = _setting("SWAP_API_TIMEOUT", 30.0)
    # Priority fee hint for the build endpoint; stripped again before submission
    compute_unit_price: str = _setting("SWAP_COMPUTE_UNIT_PRICE", "100000")
    default_slippage_bps: int = _setting("DEFAULT_SLIPPAGE_BPS", 50)
    max_lookup_workers: int = _setting("SWAP_MAX_LOOKUP_WORKERS", 4)


@dataclass
class RelayConfig:
    """Passkey signer / paymaster relay"""
    compute_unit_limit: int = _setting("RELAY_COMPUTE_UNIT_LIMIT", 600_000)
    cluster: str = _setting("RELAY_CLUSTER", "devnet")
    redirect_url: str = _setting("RELAY_REDIRECT_URL", "exp://myapp")
    portal_url: str = _setting("PORTAL_URL", "https://portal.lazor.sh")
    paymaster_url: str = _setting("PAYMASTER_URL", "https://kora.devnet.lazorkit.com")
    skip_preflight: bool = _setting("RELAY_SKIP_PREFLIGHT", False)


@dataclass
class WalletConfig:
    """Balance, activity and price feed settings"""
    activity_limit: int = _setting("ACTIVITY_LIMIT", 20)
    refresh_interval_seconds: float = _setting("REFRESH_INTERVAL_SECONDS", 10.0)
    price_url: str = _setting("PRICE_URL", "https://api.coingecko.com/api/v3/simple/price")
    price_timeout: float = _setting("PRICE_TIMEOUT", 10.0)


@dataclass
class LoggingConfig:
    """
    Logging output settings

    Environment variables:
        LOG_FILE: Log file path, empty for console only
        LOG_LEVEL: DEBUG / INFO / WARNING / ERROR / CRITICAL (default INFO)
        LOG_FORMAT: logging.Formatter format string
        LOG_CONSOLE: Also log to stderr (default true)
        LOG_MAX_BYTES: Rotate the file past this size (default 10MB)
        LOG_BACKUP_COUNT: Rotated files kept (default 5)
    """
    log_file: str = _setting("LOG_FILE", "")
    log_level: str = _setting("LOG_LEVEL", "INFO")
    log_format: str = _setting("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    console_output: bool = _setting("LOG_CONSOLE", True)
    max_bytes: int = _setting("LOG_MAX_BYTES", 10 * 1024 * 1024)
    backup_count: int = _setting("LOG_BACKUP_COUNT", 5)

    @property
    def level(self) -> int:
        return getattr(logging, self.log_level.upper(), logging.INFO)


@dataclass
class Config:
    """
    Top-level settings container

    Usage:
        from passkey_swap.config import config

        print(config.rpc.url)
        print(config.swap.swap_host)
    """
    rpc: RpcConfig = field(default_factory=RpcConfig)
    swap: SwapApiConfig = field(default_factory=SwapApiConfig)
    relay: RelayConfig = field(default_factory=RelayConfig)
    wallet: WalletConfig = field(default_factory=WalletConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def reload(cls) -> "Config":
        _load_env_file()
        return cls()


config = Config()


def get_config() -> Config:
    return config


def reload_config() -> Config:
    """Re-read the environment and replace the module-level config"""
    global config
    config = Config.reload()
    return config


def _build_handlers(log_config: LoggingConfig) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    if log_config.log_file:
        Path(log_config.log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            log_config.log_file,
            maxBytes=log_config.max_bytes,
            backupCount=log_config.backup_count,
            encoding="utf-8",
        ))
    if log_config.console_output:
        handlers.append(logging.StreamHandler())

    formatter = logging.Formatter(log_config.log_format)
    for handler in handlers:
        handler.setLevel(log_config.level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(
    log_config: Optional[LoggingConfig] = None,
    logger_name: str = "passkey_swap",
) -> logging.Logger:
    """
    Configure the package logger from a LoggingConfig.

    Existing handlers on the logger are closed and replaced, so calling this
    again (for example after reload_config) does not duplicate output.

    Args:
        log_config: Settings to apply (default: config.logging)
        logger_name: Logger to configure

    Example:
        logger = setup_logging(LoggingConfig(log_file="swap.log", log_level="DEBUG"))
    """
    log_config = log_config or config.logging
    logger = logging.getLogger(logger_name)
    logger.setLevel(log_config.level)

    for old in list(logger.handlers):
        old.close()
        logger.removeHandler(old)
    for handler in _build_handlers(log_config):
        logger.addHandler(handler)

    if log_config.log_file:
        logger.info(f"Logging to {log_config.log_file} at {log_config.log_level}")
    return logger


def enable_file_logging(
    log_file: Optional[str] = None,
    level: str = "INFO",
    console: bool = True,
) -> logging.Logger:
    """
    Shortcut for file logging.

    Without log_file, writes to passkey_swap/log/passkey_swap_<utc timestamp>.log.
    """
    if not log_file:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        log_file = str(Path(__file__).parent / "log" / f"passkey_swap_{stamp}.log")
    return setup_logging(LoggingConfig(log_file=log_file, log_level=level, console_output=console))
