"""
This module provides the client for the external commerce API (REST) used by the relay.
It encapsulates authentication, bounded retries on transient failures and the
normalization of the provider's loosely specified order response.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

import httpx

from .config import Settings
from .exceptions import (
    ConfigurationError,
    PermanentUpstreamError,
    TransientUpstreamError,
    UpstreamError,
)
from .models import OrderRequest, OrderResult

ORDERS_PATH = "/orders/"
FALLBACK_ERROR_MESSAGE = "GHL API error"
RETRIES_EXHAUSTED_MESSAGE = "Failed to create order after retries"

# Candidate locations of each field in the provider response, highest priority first
ORDER_ID_KEYS: Tuple[Tuple[str, ...], ...] = (("orderId",), ("order", "id"))
CHECKOUT_URL_KEYS: Tuple[Tuple[str, ...], ...] = (
    ("checkout_url",),
    ("checkoutUrl",),
    ("order", "checkoutUrl"),
)

log = logging.getLogger(__name__)


def is_transient(status: Optional[int]) -> bool:
    """Only 5xx responses are worth retrying."""
    return status is not None and 500 <= status < 600


def _lookup(data: Any, path: Tuple[str, ...]) -> Any:
    for key in path:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def extract_first(data: Any, candidates: Tuple[Tuple[str, ...], ...]) -> str:
    """
    Returns the first non-null value found under `candidates`, as a string.

    Args:
        data (Any): Decoded response body.
        candidates: Key paths to try in order.

    Returns:
        str: The value, or "" when none of the paths is present.
    """
    for path in candidates:
        value = _lookup(data, path)
        if value is not None:
            return value if isinstance(value, str) else str(value)
    return ""


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def error_message(exc: httpx.HTTPError) -> str:
    """
    Picks the message reported to the caller for a failed attempt.

    Priority: `message` field of the upstream JSON error body, then the
    transport error text, then a generic fallback.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        body = _json_or_none(exc.response)
        if isinstance(body, dict) and body.get("message") is not None:
            return str(body["message"])
        return f"Request failed with status code {exc.response.status_code}"
    return str(exc) or FALLBACK_ERROR_MESSAGE


class CommerceClient:
    """
    Client for the commerce platform's order API (REST).
    Creates unpaid orders and returns their hosted checkout URL.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: Optional[httpx.Client] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initializes the HTTP client with the configured base URL and timeout.

        Args:
            settings (Settings): Process configuration (API key, base URL, retry policy).
            http_client (httpx.Client | None): Preconfigured client, e.g. with a mock transport.
            sleep (Callable[[float], None]): Blocking delay used between retries.
        """
        self.settings = settings
        self.client = http_client or httpx.Client(
            base_url=settings.api_base_url,
            timeout=httpx.Timeout(settings.request_timeout),
        )
        self.sleep = sleep

    def close(self):
        """Closes the HTTP client session."""
        self.client.close()

    def _headers(self) -> Dict[str, str]:
        if not self.settings.api_key:
            raise ConfigurationError("GHL_API_KEY is not configured")
        return {
            "Authorization": f"Bearer {self.settings.api_key}",
            "Content-Type": "application/json",
        }

    def _to_result(self, response: httpx.Response, attempt: int) -> OrderResult:
        data = _json_or_none(response)
        result = OrderResult(
            orderId=extract_first(data, ORDER_ID_KEYS),
            checkoutUrl=extract_first(data, CHECKOUT_URL_KEYS),
        )
        if not result.orderId or not result.checkoutUrl:
            # Still reported as success; the caller decides what an empty URL means
            log.warning(
                f"Unexpected commerce API response payload (status={response.status_code}, attempt={attempt})"
            )
        return result

    def create_order(self, order: OrderRequest) -> OrderResult:
        """
        Submits an order to the commerce API.

        Attempts are retried only on 5xx responses, up to `settings.max_retries`
        times, waiting `backoff_seconds * 2 ** attempt` before each retry.

        Args:
            order (OrderRequest): Assembled order.

        Returns:
            OrderResult: Order id and checkout URL (possibly empty strings).

        Raises:
            ConfigurationError: If no API key is configured. Raised before any request.
            TransientUpstreamError: If every attempt returned a 5xx status.
            PermanentUpstreamError: On a non-5xx error status or a transport failure.
        """
        headers = self._headers()
        payload = order.to_payload()
        log_prefix = f"[Order: {order.contactId}]"
        max_retries = self.settings.max_retries

        attempt = 0
        while attempt <= max_retries:
            log.info(f"{log_prefix} Sending order to commerce API (attempt {attempt + 1}).")
            try:
                response = self.client.post(ORDERS_PATH, json=payload, headers=headers)
                response.raise_for_status()  # HTTPStatusError on 4xx/5xx
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                log.error(f"{log_prefix} Commerce API order creation failed (status={status}, attempt={attempt}).")

                if is_transient(status) and attempt < max_retries:
                    self.sleep(self.settings.backoff_seconds * 2 ** attempt)
                    attempt += 1
                    continue

                error_cls = TransientUpstreamError if is_transient(status) else PermanentUpstreamError
                raise error_cls(error_message(e), status=status, attempts=attempt + 1) from e
            except httpx.HTTPError as e:
                # Timeouts and connection errors carry no status and are not retried
                log.error(f"{log_prefix} Commerce API unreachable (status=None, attempt={attempt}): {e}")
                raise PermanentUpstreamError(error_message(e), status=None, attempts=attempt + 1) from e

            result = self._to_result(response, attempt)
            log.info(f"{log_prefix} Order created upstream. (ID: {result.orderId or '<missing>'})")
            return result

        raise UpstreamError(RETRIES_EXHAUSTED_MESSAGE, status=None, attempts=attempt)
