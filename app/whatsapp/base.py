from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.whatsapp.session import GatewaySession


class GatewayState(str, enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    AUTHENTICATED = "authenticated"
    READY = "ready"
    FAILED = "failed"


class GatewayError(Exception):
    pass


class GatewayNotReadyError(GatewayError):
    def __init__(self, state: GatewayState) -> None:
        super().__init__(f"WhatsApp gateway is not ready (state={state.value})")
        self.state = state


class GatewaySendError(GatewayError):
    def __init__(self, address: str, detail: str) -> None:
        super().__init__(f"Failed to send WhatsApp message to {address}: {detail}")
        self.address = address
        self.detail = detail


@dataclass
class SentMessage:
    address: str
    text: str
    provider_message_id: str | None = None
    sent_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class MessagingGateway(Protocol):
    async def send_text(self, address: str, text: str) -> SentMessage:
        ...


class WhatsAppProvider(Protocol):
    async def connect(self, session: GatewaySession) -> None:
        ...

    async def send_text(self, address: str, text: str) -> SentMessage:
        ...

    async def close(self) -> None:
        ...


_ADDRESS_SUFFIX_RE = re.compile(r"@.*$")


def address_to_phone(address: str) -> str:
    """'919876543210@c.us' -> '919876543210'."""
    return _ADDRESS_SUFFIX_RE.sub("", address).lstrip("+").strip()


SENSITIVE_KEYS = {"access_token", "authorization", "token"}


def _mask_value(value: Any) -> Any:
    if value is None:
        return None
    text = str(value)
    if len(text) <= 4:
        return "****"
    return f"****{text[-4:]}"


def sanitize_payload(payload: dict[str, Any]) -> dict[str, Any]:
    def _sanitize(value: Any) -> Any:
        if isinstance(value, dict):
            return {key: _sanitize_value(key, inner) for key, inner in value.items()}
        if isinstance(value, list):
            return [_sanitize(item) for item in value]
        return value

    def _sanitize_value(key: str, value: Any) -> Any:
        if str(key).lower() in SENSITIVE_KEYS:
            return _mask_value(value)
        return _sanitize(value)

    return _sanitize(payload)
