from __future__ import annotations

import logging
import uuid
from collections import deque

from app.whatsapp.base import GatewaySendError, GatewayState, SentMessage
from app.whatsapp.session import GatewaySession

logger = logging.getLogger(__name__)

OUTBOX_MAX_MESSAGES = 100


class MockWhatsAppProvider:
    """Keeps the most recent sent messages in memory. Used in dev and in tests."""

    def __init__(
        self,
        *,
        fail_on_send: bool = False,
        fail_addresses: set[str] | None = None,
        outbox_size: int = OUTBOX_MAX_MESSAGES,
    ) -> None:
        self.fail_on_send = fail_on_send
        self.fail_addresses = set(fail_addresses or ())
        self.outbox: deque[SentMessage] = deque(maxlen=outbox_size)

    async def connect(self, session: GatewaySession) -> None:
        session.transition(GatewayState.AUTHENTICATED)
        session.transition(GatewayState.READY)

    async def send_text(self, address: str, text: str) -> SentMessage:
        if self.fail_on_send or address in self.fail_addresses:
            raise GatewaySendError(address, "mock provider configured to fail")
        message = SentMessage(address=address, text=text, provider_message_id=f"mock-{uuid.uuid4().hex[:10]}")
        self.outbox.append(message)
        logger.info("WhatsApp mock send to=%s chars=%s", address, len(text))
        return message

    async def close(self) -> None:
        return None
