"""
config.py — Process-wide Configuration for the Relay

Settings are read once at startup (environment variables, optionally seeded
from a `.env` file) and handed to the components that need them. Nothing
below reads the environment after `load_settings()` returns.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

DEFAULT_PORT = 4000
DEFAULT_API_BASE_URL = "https://rest.gohighlevel.com/v1"


def _get(env: Mapping[str, str], name: str) -> Optional[str]:
    value = env.get(name)
    if value is None or not value.strip():
        return None
    return value


def _get_float(env: Mapping[str, str], name: str, fallback: float) -> float:
    raw_value = _get(env, name)
    if raw_value is None:
        return fallback
    try:
        return float(raw_value)
    except ValueError:
        return fallback


def _get_port(env: Mapping[str, str]) -> int:
    # PORT=0 or garbage falls back to the default port
    try:
        port = int(_get(env, "PORT") or 0)
    except ValueError:
        port = 0
    return port or DEFAULT_PORT


@dataclass(frozen=True)
class Settings:
    """
    Immutable runtime configuration.

    Attributes:
        api_key (str | None): Bearer key for the commerce API. Checked when an order is submitted.
        internal_token (str | None): Shared secret expected in the `x-internal-token` header.
        port (int): Listening port of the relay.
        api_base_url (str): Base URL of the commerce API.
        request_timeout (float): Per-attempt timeout in seconds.
        max_retries (int): Retries after the first attempt on 5xx responses.
        backoff_seconds (float): First backoff delay, doubled on every retry.
        log_level (str): Root log level.
        log_file (str | None): Optional log file next to the console output.
    """
    api_key: Optional[str] = None
    internal_token: Optional[str] = None
    port: int = DEFAULT_PORT
    api_base_url: str = DEFAULT_API_BASE_URL
    request_timeout: float = 15.0
    max_retries: int = 2
    backoff_seconds: float = 0.2
    log_level: str = "INFO"
    log_file: Optional[str] = None


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Builds `Settings` from the environment.

    When `env` is omitted, `.env` is loaded into `os.environ` first (existing
    variables win) and `os.environ` is used.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    try:
        max_retries = int(_get(env, "GHL_MAX_RETRIES") or 2)
    except ValueError:
        max_retries = 2

    return Settings(
        api_key=_get(env, "GHL_API_KEY"),
        internal_token=_get(env, "INTERNAL_TOKEN"),
        port=_get_port(env),
        api_base_url=(_get(env, "GHL_API_BASE_URL") or DEFAULT_API_BASE_URL).rstrip("/"),
        request_timeout=_get_float(env, "GHL_REQUEST_TIMEOUT", 15.0),
        max_retries=max(max_retries, 0),
        backoff_seconds=_get_float(env, "GHL_BACKOFF_SECONDS", 0.2),
        log_level=(_get(env, "LOG_LEVEL") or "INFO").upper(),
        log_file=_get(env, "LOG_FILE"),
    )
