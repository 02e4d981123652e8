"""
main.py — FastAPI Entry Point for the Final Order Relay

This module provides the REST API through which internal services request the
final payment order for a booking. Orders are created in the commerce
platform and the hosted checkout URL is returned to the caller.

Responsibilities:
    • Authenticate internal callers through the shared `x-internal-token` secret
    • Relay final payment requests to the commerce API
    • Translate relay errors into JSON error responses
    • Provide system health information
"""

import hmac
import json
from contextlib import asynccontextmanager
from typing import Any, Optional

import uvicorn
from fastapi import Depends, FastAPI, Header, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from .clients import CommerceClient
from .config import Settings, load_settings
from .exceptions import AuthError, RelayError
from .logging_config import get_logger, setup_logging
from .models import CreateFinalOrderResponse
from .workflow import process_final_order

log = get_logger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_order_client(request: Request) -> CommerceClient:
    return request.app.state.order_client


def verify_internal_token(
        x_internal_token: Optional[str] = Header(default=None),
        settings: Settings = Depends(get_settings),
):
    """
    Rejects the request unless `x-internal-token` equals the configured secret.

    Both values must be non-empty; comparison is exact and case-sensitive.

    Raises:
        AuthError: On a missing header, a missing secret, or a mismatch.
    """
    expected = settings.internal_token
    if not x_internal_token or not expected or not hmac.compare_digest(
            x_internal_token.encode("utf-8"), expected.encode("utf-8")
    ):
        log.warning("Rejected request with missing or invalid internal token.")
        raise AuthError()


async def _read_json(request: Request) -> Any:
    # Unparseable bodies are handled like an empty body by the validator
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return None


async def relay_error_handler(request: Request, exc: RelayError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def unexpected_error_handler(request: Request, exc: Exception):
    log.critical(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(settings: Optional[Settings] = None, order_client: Optional[CommerceClient] = None) -> FastAPI:
    """
    Builds the relay application.

    Args:
        settings (Settings | None): Configuration; loaded from the environment when omitted.
        order_client (CommerceClient | None): Client for the commerce API; built from `settings` when omitted.

    Returns:
        FastAPI: The configured application.
    """
    settings = settings or load_settings()
    order_client = order_client or CommerceClient(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        order_client.close()

    app = FastAPI(title="Final Order Relay", lifespan=lifespan)
    app.state.settings = settings
    app.state.order_client = order_client

    app.add_exception_handler(RelayError, relay_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    # Health Check Endpoint
    @app.get("/health")
    def health_check():
        """
        Simple health check endpoint for monitoring systems and container orchestrators.

        Returns:
            dict: A static JSON object indicating service availability.
        """
        return {"status": "ok"}

    # API Endpoint: internal services → commerce API
    @app.post(
        "/create-final-order",
        response_model=CreateFinalOrderResponse,
        dependencies=[Depends(verify_internal_token)],
    )
    async def create_final_order(
            request: Request,
            client: CommerceClient = Depends(get_order_client),
    ):
        """
        Creates the final payment order for a booking and returns its checkout URL.

        The body carries `locationId`, `contactId`, `balanceDue` and
        `securityDeposit`, and optionally `eventDate`, `bookingType`,
        `currency`, `addOnsTotal` and `addOnsDetails`.

        Returns:
            CreateFinalOrderResponse: `orderId` and `checkout_url`; either may be
            empty if the commerce API answered with an unexpected shape.

        Raises:
            AuthError(403): Bad or missing `x-internal-token`.
            ValidationError(400): Missing required fields or invalid numeric values.
            OrderCreationError: Upstream failure, reported with the upstream status.
        """
        body = await _read_json(request)
        # The client blocks (HTTP call, retry backoff), keep it off the event loop
        result = await run_in_threadpool(process_final_order, body, client)
        return CreateFinalOrderResponse(orderId=result.orderId, checkout_url=result.checkoutUrl)

    return app


# Initialization
# Configure logging and build the app from the process environment
_settings = load_settings()
setup_logging(_settings.log_level, _settings.log_file)
app = create_app(_settings)


def run():
    """Starts the relay with uvicorn on the configured port."""
    settings = app.state.settings
    log.info(f"Final order relay starting on port {settings.port}...")
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
