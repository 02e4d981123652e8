"""
workflow.py — Final Order Orchestration

Runs one final payment request through the relay:

1. Validate and coerce the inbound body
2. Assemble the order (balance, deposit, optional add-ons)
3. Submit it to the commerce API and return the checkout link

Errors propagate as `RelayError` subclasses; the HTTP layer maps them to responses.
"""

import logging
from typing import Any

from .assembler import assemble_order
from .clients import CommerceClient
from .exceptions import ConfigurationError, UpstreamError, ValidationError
from .models import OrderResult
from .validation import validate_final_order

log = logging.getLogger(__name__)


def process_final_order(body: Any, client: CommerceClient) -> OrderResult:
    """
    Creates the final payment order described by `body`.

    Args:
        body (Any): Decoded JSON request body.
        client (CommerceClient): Client used to submit the order.

    Returns:
        OrderResult: Order id and checkout URL from the commerce API.

    Raises:
        ValidationError: If the body is incomplete or not numeric. No request is sent.
        OrderCreationError: If the order could not be created upstream.
    """
    try:
        fields = validate_final_order(body)
    except ValidationError as e:
        log.warning(f"Final order rejected: {e.error}")
        raise

    log_prefix = f"[Order: {fields.contactId}]"
    order = assemble_order(fields)
    log.info(
        f"{log_prefix} Final order assembled: {len(order.items)} items, "
        f"total {order.totalAmount:.2f} {order.currency}."
    )

    try:
        return client.create_order(order)
    except ConfigurationError as e:
        log.critical(f"{log_prefix} Cannot create order: {e.message}")
        raise
    except UpstreamError as e:
        log.error(
            f"{log_prefix} Failed to create order (status={e.upstream_status}, attempts={e.attempts}): {e.message}"
        )
        raise
