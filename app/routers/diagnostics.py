from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.deps import get_notification_dispatcher, get_order_store
from app.services.errors import StorageError
from app.services.notifications import NotificationDispatcher
from app.services.order_store import OrderStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["diagnostics"])


@router.get("/test")
async def server_health(store: OrderStore = Depends(get_order_store)):
    try:
        total_orders = await store.count()
    except StorageError as exc:
        logger.exception("Health check failed to reach the order store")
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Database connection failed", "error": str(exc)},
        )
    return {
        "success": True,
        "message": "Server is running!",
        # kept verbatim for existing clients
        "database": "Connected to MongoDB",
        "totalOrders": total_orders,
    }


@router.get("/test-whatsapp")
async def whatsapp_test(dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher)):
    try:
        await dispatcher.send_test_message()
    except Exception as exc:
        logger.exception("WhatsApp test error")
        return {"success": False, "message": "Failed to send test message", "error": str(exc)}
    return {"success": True, "message": "Test message sent to owner! Check your WhatsApp."}
