#!/usr/bin/env python3
"""
Bitget UTA Configuration
==================================================
Configuration for the REST client, loaded from the environment.

Load precedence: real environment variables → .env → config.env → defaults.
Every call to load_config() returns a fresh object; clients own their
configuration and nothing is cached process-wide.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union
from urllib.parse import urlparse

from dotenv import load_dotenv

from bitget_uta.shared.secrets import sanitize_secret, validate_secret_format

logger = logging.getLogger(__name__)

BASE_URL = "https://api.bitget.com"
DEFAULT_TIMEOUT = 30.0

_TRUE_VALUES = ("true", "1", "yes", "on")
_LOCAL_HOSTS = ("localhost", "127.0.0.1", "::1")


class ConfigError(ValueError):
    """Invalid configuration value"""

    def __init__(self, variable: str, message: str):
        self.variable = variable
        self.message = message
        super().__init__(f"{variable}: {message}")


@dataclass
class UTAConfig:
    """
    Settings for one UTA client.

    Credentials are held in memory only and never appear in repr() or
    in get_config_summary().
    """

    api_key: str = field(default="", repr=False)
    secret_key: str = field(default="", repr=False)
    passphrase: str = field(default="", repr=False)
    base_url: str = BASE_URL
    demo_trading: bool = False
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"
    secret_metadata: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key and self.secret_key and self.passphrase)

    def validate(self, require_credentials: bool = True) -> Tuple[bool, str]:
        """
        Validate configuration.

        Args:
            require_credentials: False for public market-data use

        Returns:
            (success, error_message)
        """
        if require_credentials:
            if not self.api_key:
                return False, "BITGET_API_KEY not set"

            if not self.secret_key:
                return False, "BITGET_SECRET_KEY not set"

            if not self.passphrase:
                return False, "BITGET_PASSPHRASE not set"

            valid, message = validate_secret_format(self.secret_key)
            if not valid:
                return False, f"BITGET_SECRET_KEY invalid: {message}"

        parsed = urlparse(self.base_url)
        if not parsed.scheme or not parsed.netloc:
            return False, f"Invalid base URL: {self.base_url!r}"

        if parsed.scheme != "https" and parsed.hostname not in _LOCAL_HOSTS:
            return False, "Base URL must use https outside localhost"

        if self.timeout <= 0:
            return False, f"Timeout must be positive (got {self.timeout})"

        return True, ""

    def get_config_summary(self) -> Dict[str, Any]:
        """Get configuration summary for logging"""
        return {
            "base_url": self.base_url,
            "demo_trading": self.demo_trading,
            "timeout": self.timeout,
            "log_level": self.log_level,
            "has_api_key": bool(self.api_key),
            "has_secret_key": bool(self.secret_key),
            "has_passphrase": bool(self.passphrase),
            "secret_len": len(self.secret_key) if self.secret_key else 0,
            "secret_sanitized": self.secret_metadata.get("sanitized", False),
        }


def _load_env_files(env_file: Optional[Union[str, Path]]) -> None:
    """Load .env style files without overriding real environment variables"""
    if env_file is not None:
        path = Path(env_file)
        if not path.exists():
            raise ConfigError("env_file", f"{path} does not exist")
        load_dotenv(path, override=False)
        return

    for candidate in (Path(".env"), Path("config.env")):
        if candidate.exists():
            load_dotenv(candidate, override=False)


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigError(name, f"expected a number, got {value!r}") from None


def load_config(env_file: Optional[Union[str, Path]] = None) -> UTAConfig:
    """
    Build a UTAConfig from the environment.

    Args:
        env_file: Explicit dotenv file; defaults to ./.env and ./config.env

    Returns:
        New UTAConfig instance

    Raises:
        ConfigError: On malformed numeric values or a missing env_file
    """
    _load_env_files(env_file)

    api_key, _ = sanitize_secret(os.getenv("BITGET_API_KEY", ""), label="api_key")

    raw_secret = os.getenv("BITGET_SECRET_KEY") or os.getenv("BITGET_API_SECRET") or ""
    secret_key, secret_metadata = sanitize_secret(raw_secret, label="secret_key")

    passphrase, _ = sanitize_secret(os.getenv("BITGET_PASSPHRASE", ""), label="passphrase")

    base_url = (os.getenv("BITGET_BASE_URL") or BASE_URL).strip().rstrip("/")

    config = UTAConfig(
        api_key=api_key,
        secret_key=secret_key,
        passphrase=passphrase,
        base_url=base_url,
        demo_trading=_get_bool("BITGET_DEMO_TRADING", False),
        timeout=_get_float("BITGET_TIMEOUT", DEFAULT_TIMEOUT),
        log_level=os.getenv("BITGET_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        secret_metadata=secret_metadata,
    )

    logger.debug(f"Configuration loaded: {config.get_config_summary()}")
    return config
