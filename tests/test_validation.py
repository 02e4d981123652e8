"""Unit tests for the final order request validator."""

import math

import pytest

from relay_service.exceptions import InvalidNumericError, MissingFieldsError, ValidationError
from relay_service.validation import to_number, validate_final_order


def _body(**overrides):
    body = {
        "locationId": "L1",
        "contactId": "C1",
        "balanceDue": 1000,
        "securityDeposit": 500,
    }
    body.update(overrides)
    return body


class TestToNumber:

    @pytest.mark.parametrize("value, expected", [
        (12, 12.0),
        (12.5, 12.5),
        ("42", 42.0),
        ("  7.25 ", 7.25),
        ("", 0.0),
        (None, 0.0),
        (True, 1.0),
        (False, 0.0),
        ("1e3", 1000.0),
    ])
    def test_coerces_like_javascript_number(self, value, expected):
        assert to_number(value) == expected

    @pytest.mark.parametrize("value, expected", [
        ("0x10", 16.0),
        ("0XfF", 255.0),
        ("0o17", 15.0),
        ("0b101", 5.0),
        (".5", 0.5),
        ("5.", 5.0),
        ("+3", 3.0),
    ])
    def test_accepts_javascript_literal_forms(self, value, expected):
        assert to_number(value) == expected

    @pytest.mark.parametrize("value", [
        "abc", "12abc", "1_000", [1], {"a": 1},
        "inf", "infinity", "+inf", "-inf", "nan", "NaN",
        "\u0661\u0662", "-0x10", "0x", "0b2", "1e", ".",
    ])
    def test_non_numeric_values_are_nan(self, value):
        assert math.isnan(to_number(value))

    @pytest.mark.parametrize("value, expected", [
        ("Infinity", math.inf),
        ("+Infinity", math.inf),
        ("-Infinity", -math.inf),
        ("1e999", math.inf),
        (10 ** 400, math.inf),
    ])
    def test_infinite_values(self, value, expected):
        assert to_number(value) == expected


class TestRequiredFields:

    @pytest.mark.parametrize("field", ["locationId", "contactId", "balanceDue", "securityDeposit"])
    def test_absent_field_is_rejected(self, field):
        body = _body()
        del body[field]
        with pytest.raises(MissingFieldsError):
            validate_final_order(body)

    @pytest.mark.parametrize("field", ["locationId", "contactId", "balanceDue", "securityDeposit"])
    def test_null_field_is_rejected(self, field):
        with pytest.raises(MissingFieldsError):
            validate_final_order(_body(**{field: None}))

    @pytest.mark.parametrize("field", ["locationId", "contactId"])
    def test_empty_identifier_is_rejected(self, field):
        with pytest.raises(MissingFieldsError):
            validate_final_order(_body(**{field: ""}))

    @pytest.mark.parametrize("field", ["locationId", "contactId"])
    @pytest.mark.parametrize("value", [0, False, 0.0])
    def test_falsy_identifier_is_rejected(self, field, value):
        with pytest.raises(MissingFieldsError):
            validate_final_order(_body(**{field: value}))

    def test_numeric_identifier_is_kept_as_text(self):
        assert validate_final_order(_body(locationId=17)).locationId == "17"

    @pytest.mark.parametrize("body", [None, [], "text", 42])
    def test_non_object_body_counts_as_empty(self, body):
        with pytest.raises(MissingFieldsError):
            validate_final_order(body)

    def test_missing_fields_error_message(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_final_order({})
        assert exc_info.value.error == "Missing required fields"
        assert exc_info.value.status_code == 400


class TestNumericFields:

    @pytest.mark.parametrize("field", ["balanceDue", "securityDeposit"])
    @pytest.mark.parametrize("value", ["abc", "NaN", "Infinity", "-Infinity", [1, 2], {}])
    def test_non_finite_amount_is_rejected(self, field, value):
        with pytest.raises(InvalidNumericError):
            validate_final_order(_body(**{field: value}))

    @pytest.mark.parametrize("field", ["balanceDue", "securityDeposit"])
    def test_negative_amount_is_rejected(self, field):
        with pytest.raises(InvalidNumericError):
            validate_final_order(_body(**{field: -1}))

    def test_numeric_strings_are_coerced(self):
        fields = validate_final_order(_body(balanceDue="1000.50", securityDeposit="500", addOnsTotal="25"))
        assert fields.balanceDue == 1000.5
        assert fields.securityDeposit == 500.0
        assert fields.addOnsTotal == 25.0

    def test_invalid_add_ons_total_defaults_to_zero(self):
        fields = validate_final_order(_body(addOnsTotal="lots"))
        assert fields.addOnsTotal == 0.0

    @pytest.mark.parametrize("value", ["inf", "infinity", "+inf", "nan"])
    def test_non_javascript_infinity_spellings_in_add_ons_become_zero(self, value):
        assert validate_final_order(_body(addOnsTotal=value)).addOnsTotal == 0.0

    def test_hex_amount_is_accepted(self):
        assert validate_final_order(_body(balanceDue="0x10")).balanceDue == 16.0

    def test_non_ascii_digits_are_rejected(self):
        with pytest.raises(InvalidNumericError):
            validate_final_order(_body(balanceDue="\u0661\u0662"))

    def test_infinite_add_ons_total_is_rejected(self):
        with pytest.raises(InvalidNumericError):
            validate_final_order(_body(addOnsTotal="Infinity"))

    def test_invalid_numeric_error_message(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_final_order(_body(balanceDue="abc"))
        assert exc_info.value.error == "Invalid numeric values"


class TestDefaults:

    def test_optional_fields_get_defaults(self):
        fields = validate_final_order(_body())
        assert fields.currency == "USD"
        assert fields.addOnsTotal == 0.0
        assert fields.addOnsDetails == ""
        assert fields.eventDate is None
        assert fields.bookingType is None

    def test_null_optional_fields_get_defaults(self):
        fields = validate_final_order(_body(currency=None, addOnsTotal=None, addOnsDetails=None))
        assert fields.currency == "USD"
        assert fields.addOnsTotal == 0.0
        assert fields.addOnsDetails == ""

    def test_given_optional_fields_are_kept(self):
        fields = validate_final_order(_body(
            currency="CAD",
            eventDate="2026-06-01",
            bookingType="Wedding",
            addOnsDetails="Chairs",
        ))
        assert fields.currency == "CAD"
        assert fields.eventDate == "2026-06-01"
        assert fields.bookingType == "Wedding"
        assert fields.addOnsDetails == "Chairs"

    def test_empty_event_date_is_kept_verbatim(self):
        assert validate_final_order(_body(eventDate="")).eventDate == ""
