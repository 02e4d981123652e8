"""
models.py — Data Models for the Final Order Relay

Pydantic models for the order sent to the commerce API, the validated inbound
fields, and the normalized result returned to the caller.

Models:
    - OrderItem: A single line item of an order.
    - OrderRequest: The provider-agnostic order assembled from a final payment request.
    - OrderResult: Order identifier and checkout URL extracted from the provider response.
    - FinalOrderFields: Validated and typed inbound request fields.
    - CreateFinalOrderResponse: Success body of `POST /create-final-order`.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class OrderItem(BaseModel):
    """
    Represents a single line item of an order.

    Attributes:
        name (str): Display name shown on the checkout page.
        price (float): Unit price in major currency units. Never negative.
        quantity (int): Number of units. Must be greater than zero.
        description (str | None): Optional description forwarded to the provider.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    price: float = Field(..., ge=0)
    quantity: int = Field(1, gt=0)
    description: Optional[str] = None


class OrderRequest(BaseModel):
    """
    Represents an order ready to be submitted to the commerce API.

    `totalAmount` is computed by the assembler and is not re-checked here.
    """
    model_config = ConfigDict(frozen=True)

    locationId: str
    contactId: str
    currency: str
    items: List[OrderItem] = Field(..., min_length=1)
    totalAmount: float
    notes: str

    def to_payload(self) -> Dict[str, Any]:
        """Returns the JSON body expected by the provider's order-creation endpoint."""
        return {
            "locationId": self.locationId,
            "contactId": self.contactId,
            "order": {
                "status": "unpaid",
                "currency": self.currency,
                "orderItems": [item.model_dump(exclude_none=True) for item in self.items],
                "totalAmount": self.totalAmount,
                "notes": self.notes,
            },
        }


class OrderResult(BaseModel):
    """Either field is an empty string when the provider response did not contain it."""
    orderId: str = ""
    checkoutUrl: str = ""


class FinalOrderFields(BaseModel):
    """
    Inbound fields after validation and numeric coercion.

    Attributes:
        locationId (str): Provider location (sub-account) identifier.
        contactId (str): Provider contact the order belongs to.
        balanceDue (float): Final balance, finite and non-negative.
        securityDeposit (float): Refundable deposit, finite and non-negative.
        currency (str): Currency code, "USD" unless given.
        addOnsTotal (float): Add-ons amount, 0 when absent or not a number.
        addOnsDetails (str): Free text describing the add-ons.
        eventDate (str | None): Event date as sent by the caller.
        bookingType (str | None): Booking type as sent by the caller.
    """
    model_config = ConfigDict(frozen=True)

    locationId: str
    contactId: str
    balanceDue: float
    securityDeposit: float
    currency: str = "USD"
    addOnsTotal: float = 0.0
    addOnsDetails: str = ""
    eventDate: Optional[str] = None
    bookingType: Optional[str] = None


class CreateFinalOrderResponse(BaseModel):
    orderId: str
    checkout_url: str
