"""
validation.py — Request Validator for `POST /create-final-order`

Turns the raw JSON body into `FinalOrderFields` or raises a `ValidationError`.
Numeric fields accept numbers or numeric strings and follow JavaScript
`Number()` coercion, since the callers are JavaScript services.
"""

import math
import re
from typing import Any

from .exceptions import InvalidNumericError, MissingFieldsError
from .models import FinalOrderFields

# Number() string grammar: ASCII digits only, "Infinity" as the only infinity spelling
DECIMAL_LITERAL = re.compile(r"[+-]?(?:Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)")
NON_DECIMAL_LITERAL = re.compile(r"0(?:[xX](?P<hex>[0-9a-fA-F]+)|[oO](?P<oct>[0-7]+)|[bB](?P<bin>[01]+))")


def _parse_numeric_string(text: str) -> float:
    if DECIMAL_LITERAL.fullmatch(text):
        return float(text)
    match = NON_DECIMAL_LITERAL.fullmatch(text)
    if match is None:
        return math.nan
    for name, base in (("hex", 16), ("oct", 8), ("bin", 2)):
        digits = match.group(name)
        if digits:
            return _to_float(int(digits, base))
    return math.nan


def _to_float(value: int) -> float:
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def to_number(value: Any) -> float:
    """
    Coerces a JSON value to a float the way `Number(value)` does.

    Returns NaN for values that are not numeric; never raises.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, int):
        return _to_float(value)
    if isinstance(value, float):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        return _parse_numeric_string(text)
    return math.nan


def _is_missing(value: Any) -> bool:
    # Falsy scalars (0, false, "") count as missing; empty arrays and objects do not
    return value is None or (isinstance(value, (str, bool, int, float)) and not value)


def _text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def validate_final_order(body: Any) -> FinalOrderFields:
    """
    Validates an inbound final order body.

    Args:
        body (Any): Decoded JSON body. Anything other than an object is treated as empty.

    Returns:
        FinalOrderFields: Typed fields with defaults applied.

    Raises:
        MissingFieldsError: If `locationId`, `contactId`, `balanceDue` or
            `securityDeposit` is absent, null or (for the ids) empty.
        InvalidNumericError: If `balanceDue` or `securityDeposit` is not a finite,
            non-negative number, or `addOnsTotal` is infinite.
    """
    if not isinstance(body, dict):
        body = {}

    location_id = body.get("locationId")
    contact_id = body.get("contactId")
    balance_due = body.get("balanceDue")
    security_deposit = body.get("securityDeposit")

    if _is_missing(location_id) or _is_missing(contact_id) or balance_due is None or security_deposit is None:
        raise MissingFieldsError()

    parsed_balance_due = to_number(balance_due)
    parsed_security_deposit = to_number(security_deposit)
    # An add-ons total that is not a number is ignored rather than rejected
    parsed_add_ons_total = to_number(body.get("addOnsTotal"))
    if math.isnan(parsed_add_ons_total):
        parsed_add_ons_total = 0.0

    if not all(math.isfinite(value) for value in (parsed_balance_due, parsed_security_deposit, parsed_add_ons_total)):
        raise InvalidNumericError()
    if parsed_balance_due < 0 or parsed_security_deposit < 0:
        raise InvalidNumericError()

    currency = body.get("currency")
    add_ons_details = body.get("addOnsDetails")
    event_date = body.get("eventDate")
    booking_type = body.get("bookingType")

    return FinalOrderFields(
        locationId=_text(location_id),
        contactId=_text(contact_id),
        balanceDue=parsed_balance_due,
        securityDeposit=parsed_security_deposit,
        currency=_text(currency) if currency is not None else "USD",
        addOnsTotal=parsed_add_ons_total,
        addOnsDetails=_text(add_ons_details) if add_ons_details is not None else "",
        eventDate=_text(event_date) if event_date is not None else None,
        bookingType=_text(booking_type) if booking_type is not None else None,
    )
