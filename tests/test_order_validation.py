import pytest

from app.schemas.order import OrderRequest
from app.services.errors import InvalidPhoneError, MissingFieldsError
from app.services.order_validation import normalize_whatsapp_number, validate_order_request
from tests.fixtures_data import HAPPY_PATH_ORDER_PAYLOAD, INVALID_PHONE_NUMBERS, NORMALIZED_NUMBER


def _request(**overrides):
    payload = {**HAPPY_PATH_ORDER_PAYLOAD, **overrides}
    return OrderRequest(**payload)


def test_validate_normalizes_whatsapp_number():
    normalized = validate_order_request(_request())

    assert normalized.whatsapp_number == NORMALIZED_NUMBER
    assert normalized.customer_name == "Asha"
    assert normalized.orders == "2x Pizza"


def test_validate_passes_free_text_fields_through_untouched():
    normalized = validate_order_request(_request(address="  Flat 4, 12 MG Road  ", orders="2x Pizza\n1x Coke"))

    assert normalized.address == "  Flat 4, 12 MG Road  "
    assert normalized.orders == "2x Pizza\n1x Coke"


@pytest.mark.parametrize("field", ["customerName", "whatsappNumber", "address", "timing", "orders"])
def test_validate_rejects_missing_field(field: str):
    payload = dict(HAPPY_PATH_ORDER_PAYLOAD)
    payload.pop(field)

    with pytest.raises(MissingFieldsError):
        validate_order_request(OrderRequest(**payload))


@pytest.mark.parametrize("field", ["customerName", "whatsappNumber", "address", "timing", "orders"])
def test_validate_rejects_empty_field(field: str):
    with pytest.raises(MissingFieldsError):
        validate_order_request(_request(**{field: ""}))


@pytest.mark.parametrize("number", INVALID_PHONE_NUMBERS)
def test_validate_rejects_invalid_phone(number: str):
    with pytest.raises(InvalidPhoneError) as exc:
        validate_order_request(_request(whatsappNumber=number))

    assert exc.value.http_status == 400
    assert exc.value.client_message == "Please enter a valid 10-digit Indian mobile number."


def test_whitespace_only_number_is_an_invalid_phone():
    with pytest.raises(InvalidPhoneError):
        validate_order_request(_request(whatsappNumber="   "))


@pytest.mark.parametrize(
    "raw",
    ["91 98765 43210", " 919876543210 ", "91\t9876543210", "91 9876\n543210"],
)
def test_normalize_strips_every_whitespace_character(raw: str):
    assert normalize_whatsapp_number(raw) == NORMALIZED_NUMBER
    assert validate_order_request(_request(whatsappNumber=raw)).whatsapp_number == NORMALIZED_NUMBER


def test_validation_is_idempotent():
    request = _request()

    first = validate_order_request(request)
    second = validate_order_request(request)

    assert first == second
    assert validate_order_request(OrderRequest(**{**HAPPY_PATH_ORDER_PAYLOAD, "whatsappNumber": first.whatsapp_number})) == first
