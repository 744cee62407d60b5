# app/deps.py
from __future__ import annotations

from datetime import timedelta

from fastapi import Depends, Request

from app.core.config import (
    DISPLAY_TIMEZONE,
    DUPLICATE_WINDOW_SECONDS,
    ORDER_TIMEOUT_SECONDS,
    OWNER_NUMBER,
    WHATSAPP_ADDRESS_SUFFIX,
)
from app.core.database import SessionLocal
from app.services.duplicate_guard import DuplicateGuard
from app.services.notifications import NotificationDispatcher
from app.services.order_intake import OrderIntakePipeline
from app.services.order_store import OrderStore
from app.whatsapp.session import GatewaySession

_order_store = OrderStore(SessionLocal)


def get_order_store() -> OrderStore:
    return _order_store


def get_whatsapp_session(request: Request) -> GatewaySession:
    """The process-wide session started in the app lifespan."""
    return request.app.state.whatsapp_session


def get_notification_dispatcher(
    session: GatewaySession = Depends(get_whatsapp_session),
) -> NotificationDispatcher:
    return NotificationDispatcher(
        session,
        owner_address=OWNER_NUMBER,
        customer_suffix=WHATSAPP_ADDRESS_SUFFIX,
        display_timezone=DISPLAY_TIMEZONE,
    )


def get_order_pipeline(
    store: OrderStore = Depends(get_order_store),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> OrderIntakePipeline:
    guard = DuplicateGuard(store, window=timedelta(seconds=DUPLICATE_WINDOW_SECONDS))
    return OrderIntakePipeline(
        store=store,
        guard=guard,
        dispatcher=dispatcher,
        timeout=ORDER_TIMEOUT_SECONDS,
    )
