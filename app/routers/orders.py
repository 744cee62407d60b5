from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from app.deps import get_order_pipeline
from app.schemas.order import ApiResponse, OrderRequest
from app.services.errors import OrderIntakeError
from app.services.order_intake import OrderIntakePipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["orders"])

ORDER_PLACED_MESSAGE = "Order placed successfully! Check WhatsApp for confirmation."
ORDER_FAILED_MESSAGE = "Error placing order. Please try again."


def error_response(exc: OrderIntakeError) -> JSONResponse:
    if exc.is_client_error:
        body = ApiResponse(success=False, message=exc.client_message)
    else:
        body = ApiResponse(success=False, message=ORDER_FAILED_MESSAGE, error=str(exc))
    return JSONResponse(status_code=exc.http_status, content=body.model_dump(exclude_none=True))


@router.post("/order", response_model=ApiResponse, response_model_exclude_none=True)
async def place_order(
    payload: OrderRequest = Body(...),
    pipeline: OrderIntakePipeline = Depends(get_order_pipeline),
):
    try:
        await pipeline.submit(payload)
    except OrderIntakeError as exc:
        if exc.is_client_error:
            logger.info("Order rejected kind=%s detail=%s", exc.kind, exc, extra={"stage": exc.stage})
        else:
            logger.exception("Order error kind=%s", exc.kind, extra={"stage": exc.stage})
        return error_response(exc)
    except Exception as exc:
        logger.exception("Order error kind=unexpected")
        body = ApiResponse(success=False, message=ORDER_FAILED_MESSAGE, error=str(exc))
        return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))
    return ApiResponse(success=True, message=ORDER_PLACED_MESSAGE)
