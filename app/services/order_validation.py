from __future__ import annotations

import re

from app.schemas.order import NormalizedOrderRequest, OrderRequest
from app.services.errors import InvalidPhoneError, MissingFieldsError

REQUIRED_FIELDS = ("customer_name", "whatsapp_number", "address", "timing", "orders")
INDIAN_MOBILE_RE = re.compile(r"^91[0-9]{10}$")
_WHITESPACE_RE = re.compile(r"\s")


def normalize_whatsapp_number(raw: str) -> str:
    return _WHITESPACE_RE.sub("", raw)


def validate_order_request(request: OrderRequest) -> NormalizedOrderRequest:
    missing = [name for name in REQUIRED_FIELDS if not getattr(request, name)]
    if missing:
        raise MissingFieldsError(f"missing fields: {', '.join(missing)}", stage="received")

    number = normalize_whatsapp_number(request.whatsapp_number)
    if not INDIAN_MOBILE_RE.match(number):
        raise InvalidPhoneError(f"invalid phone number: {number!r}", stage="received")

    return NormalizedOrderRequest(
        customer_name=request.customer_name,
        whatsapp_number=number,
        address=request.address,
        timing=request.timing,
        orders=request.orders,
    )
