from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable
from zoneinfo import ZoneInfo

from app.models.order import Order
from app.services.errors import NotifyError
from app.services.whatsapp_templates import format_locale_timestamp, render_template
from app.whatsapp.base import GatewayError, MessagingGateway

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NotificationDispatcher:
    def __init__(
        self,
        gateway: MessagingGateway,
        *,
        owner_address: str,
        customer_suffix: str = "c.us",
        display_timezone: str | None = None,
        clock: Clock = _utcnow,
    ) -> None:
        self.gateway = gateway
        self.owner_address = owner_address
        self.customer_suffix = customer_suffix
        self._tz = ZoneInfo(display_timezone) if display_timezone else None
        self._clock = clock

    def customer_address(self, number: str) -> str:
        return f"{number}@{self.customer_suffix}"

    def _sent_at(self) -> str:
        now = self._clock()
        local = now.astimezone(self._tz) if self._tz else now.astimezone()
        return format_locale_timestamp(local)

    def owner_message(self, order: Order) -> str:
        return render_template(
            "owner_new_order",
            {
                "customer_name": order.customer_name,
                "whatsapp_number": order.whatsapp_number,
                "address": order.address,
                "timing": order.timing,
                "orders": order.orders,
                "sent_at": self._sent_at(),
            },
        )

    def customer_message(self, order: Order) -> str:
        return render_template(
            "customer_confirmation",
            {
                "customer_name": order.customer_name,
                "address": order.address,
                "timing": order.timing,
                "orders": order.orders,
            },
        )

    async def notify_owner(self, order: Order) -> None:
        if not self.owner_address:
            raise NotifyError("OWNER_NUMBER is not configured", stage="persisted")
        logger.info("Sending to owner: %s", self.owner_address)
        await self._send(self.owner_address, self.owner_message(order), stage="persisted")
        logger.info("Message sent to owner order=%s", order.id)

    async def notify_customer(self, order: Order) -> None:
        address = self.customer_address(order.whatsapp_number)
        logger.info("Sending to customer: %s", address)
        await self._send(address, self.customer_message(order), stage="owner_notified")
        logger.info("Confirmation sent to customer order=%s", order.id)

    async def send_test_message(self) -> None:
        if not self.owner_address:
            raise NotifyError("OWNER_NUMBER is not configured")
        logger.info("Sending test message to: %s", self.owner_address)
        await self._send(self.owner_address, render_template("owner_test", {"sent_at": self._sent_at()}))

    async def _send(self, address: str, text: str, *, stage: str | None = None) -> None:
        try:
            await self.gateway.send_text(address, text)
        except GatewayError as exc:
            raise NotifyError(str(exc), stage=stage) from exc
