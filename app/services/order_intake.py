from __future__ import annotations

import asyncio
import enum
import logging
from datetime import datetime, timezone
from typing import Callable

from app.core.metrics import request_metrics
from app.core.request_context import set_request_context
from app.models.order import Order, OrderStatus
from app.schemas.order import OrderRequest
from app.services.duplicate_guard import DuplicateGuard
from app.services.errors import DuplicateOrderError, OrderIntakeError, PipelineTimeoutError
from app.services.notifications import NotificationDispatcher
from app.services.order_store import OrderStore
from app.services.order_validation import validate_order_request

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class IntakeStage(str, enum.Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    DEDUP_CHECKED = "dedup_checked"
    PERSISTED = "persisted"
    OWNER_NOTIFIED = "owner_notified"
    CUSTOMER_NOTIFIED = "customer_notified"
    COMPLETED = "completed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderIntakePipeline:
    """Validate -> dedup check -> persist -> notify owner -> notify customer.

    Steps run strictly in order and nothing is rolled back: if a notification
    fails the order stays stored and the submission still fails. Shares no
    state between submissions.
    """

    def __init__(
        self,
        *,
        store: OrderStore,
        guard: DuplicateGuard,
        dispatcher: NotificationDispatcher,
        timeout: float | None = None,
        clock: Clock = _utcnow,
    ) -> None:
        self.store = store
        self.guard = guard
        self.dispatcher = dispatcher
        self.timeout = timeout
        self._clock = clock

    async def submit(self, request: OrderRequest) -> Order:
        progress = {"stage": IntakeStage.RECEIVED}
        try:
            if self.timeout is None:
                order = await self._run(request, progress)
            else:
                order = await asyncio.wait_for(self._run(request, progress), self.timeout)
        except asyncio.TimeoutError as exc:
            stage = progress["stage"].value
            request_metrics.record_outcome(PipelineTimeoutError.kind)
            logger.error("Order intake timed out after %ss", self.timeout, extra={"stage": stage})
            raise PipelineTimeoutError(f"order intake timed out after {self.timeout}s", stage=stage) from exc
        except OrderIntakeError as exc:
            if exc.stage is None:
                exc.stage = progress["stage"].value
            request_metrics.record_outcome(exc.kind)
            raise
        request_metrics.record_outcome(IntakeStage.COMPLETED.value)
        return order

    async def _run(self, request: OrderRequest, progress: dict[str, IntakeStage]) -> Order:
        normalized = validate_order_request(request)
        progress["stage"] = IntakeStage.VALIDATED

        now = self._clock()
        if await self.guard.is_duplicate(normalized.whatsapp_number, normalized.orders, now):
            raise DuplicateOrderError(
                f"duplicate of a recent order from {normalized.whatsapp_number}",
                stage=IntakeStage.VALIDATED.value,
            )
        progress["stage"] = IntakeStage.DEDUP_CHECKED

        order = Order(
            customer_name=normalized.customer_name,
            whatsapp_number=normalized.whatsapp_number,
            address=normalized.address,
            timing=normalized.timing,
            orders=normalized.orders,
            status=OrderStatus.PENDING.value,
            created_at=now,
        )
        order_id = await self.store.create(order)
        progress["stage"] = IntakeStage.PERSISTED
        set_request_context(order_id=order_id)
        logger.info("Order saved to database: %s", order_id, extra={"stage": IntakeStage.PERSISTED.value})

        await self.dispatcher.notify_owner(order)
        progress["stage"] = IntakeStage.OWNER_NOTIFIED

        await self.dispatcher.notify_customer(order)
        progress["stage"] = IntakeStage.CUSTOMER_NOTIFIED

        progress["stage"] = IntakeStage.COMPLETED
        return order
