"""
mock_commerce_api.py — Mock Implementation of the Commerce Platform Order API (REST)

This module provides a simulated commerce API for running the relay locally and
for end-to-end tests. It exposes a small FastAPI application that mimics the
provider's order-creation behavior.

Simulation Scenarios (selected by `contactId` prefix):
    • Successful order creation (any other contactId)
    • "fail_5xx_" → Service unavailable (HTTP 503)
    • "reject_"   → Unknown contact (HTTP 422)
    • "odd_"      → HTTP 200 with a payload that has neither order id nor checkout URL

Endpoints:
    POST /orders/ — Creates an unpaid order and returns its checkout URL.

Port:
    Default: 8002 (HTTP)
"""

from fastapi import FastAPI, Header
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from typing import List, Optional
import logging
import uuid

app = FastAPI(title="Mock Commerce API")
logging.basicConfig(level=logging.INFO)

CHECKOUT_BASE_URL = "https://checkout.example.test/pay"


class MockOrderItem(BaseModel):
    name: str
    price: float
    quantity: int = 1
    description: Optional[str] = None


class MockOrder(BaseModel):
    status: str
    currency: str
    orderItems: List[MockOrderItem] = Field(..., min_length=1)
    totalAmount: float
    notes: Optional[str] = None


class CreateOrderRequest(BaseModel):
    """
    Represents an order-creation request payload.

    Attributes:
        locationId (str): Sub-account the order belongs to.
        contactId (str): Contact that will pay the order.
        order (MockOrder): Order status, currency, items, total and notes.
    """
    locationId: str
    contactId: str
    order: MockOrder


@app.post("/orders/")
def create_order(
        request: CreateOrderRequest,
        authorization: Optional[str] = Header(default=None)
):
    """
        Creates an order.

        Outcomes are selected by the `contactId` prefix, see the module docstring.

        Args:
            request (CreateOrderRequest): Location, contact and order details.
            authorization (str): Must be a `Bearer <key>` header.

        Returns:
            dict: On success, the created order with `id` and `checkoutUrl`.
            JSONResponse: On simulated failures, an error status with a `message` body.
    """
    if not authorization or not authorization.startswith("Bearer ") or not authorization[7:].strip():
        logging.warning(f"[CA] Order for {request.contactId} rejected: missing API key.")
        return JSONResponse(status_code=401, content={"message": "Unauthorized"})

    logging.info(f"[CA] Order request for {request.contactId} ({request.order.totalAmount} {request.order.currency})")

    # Scenario simulation
    if request.contactId.startswith("fail_5xx_"):
        logging.error(f"[CA] Simulating outage for {request.contactId}.")
        return JSONResponse(status_code=503, content={"message": "Upstream unavailable"})

    if request.contactId.startswith("reject_"):
        logging.warning(f"[CA] Contact {request.contactId} not found.")
        return JSONResponse(status_code=422, content={"message": "Contact not found"})

    if request.contactId.startswith("odd_"):
        logging.info(f"[CA] Answering {request.contactId} with an unexpected payload.")
        return {"ok": True}

    # Success case
    order_id = f"ord_{uuid.uuid4().hex[:12]}"
    logging.info(f"[CA] Order {order_id} created for {request.contactId}.")
    return {
        "order": {
            "id": order_id,
            "status": request.order.status,
            "checkoutUrl": f"{CHECKOUT_BASE_URL}/{order_id}",
        }
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8002)
