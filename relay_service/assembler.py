"""
assembler.py — Order Assembler

Pure mapping from validated final order fields to an `OrderRequest`. No I/O.
"""

from typing import List

from .models import FinalOrderFields, OrderItem, OrderRequest

EVENT_DATE_PLACEHOLDER = "Event Date TBD"
BOOKING_TYPE_PLACEHOLDER = "Booking"
SECURITY_DEPOSIT_ITEM_NAME = "Refundable Security Deposit"
ADD_ONS_ITEM_NAME = "Add-Ons"

ORDER_NOTES = (
    "Final balance + refundable $500 deposit. Surcharge handled by processor; "
    "ACH $0. Deposit refunded within 10 days."
)


def build_line_items(fields: FinalOrderFields) -> List[OrderItem]:
    """
    Returns the balance and deposit items, plus an add-ons item when
    `addOnsTotal` is strictly positive.
    """
    event_date = fields.eventDate if fields.eventDate is not None else EVENT_DATE_PLACEHOLDER
    booking_type = fields.bookingType if fields.bookingType is not None else BOOKING_TYPE_PLACEHOLDER

    items = [
        OrderItem(name=f"Final Balance — {event_date} — {booking_type}", price=fields.balanceDue, quantity=1),
        OrderItem(name=SECURITY_DEPOSIT_ITEM_NAME, price=fields.securityDeposit, quantity=1),
    ]

    if fields.addOnsTotal > 0:
        name = f"{ADD_ONS_ITEM_NAME} — {fields.addOnsDetails}" if fields.addOnsDetails else ADD_ONS_ITEM_NAME
        items.append(OrderItem(name=name, price=fields.addOnsTotal, quantity=1))

    return items


def assemble_order(fields: FinalOrderFields) -> OrderRequest:
    """
    Builds the order for a final payment.

    Args:
        fields (FinalOrderFields): Output of the request validator.

    Returns:
        OrderRequest: Order whose `totalAmount` is the sum of price × quantity of its items.
    """
    items = build_line_items(fields)
    return OrderRequest(
        locationId=fields.locationId,
        contactId=fields.contactId,
        currency=fields.currency,
        items=items,
        totalAmount=sum(item.price * item.quantity for item in items),
        notes=ORDER_NOTES,
    )
