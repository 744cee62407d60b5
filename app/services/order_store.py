from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.models.order import Order
from app.services.errors import StorageError

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class OrderStore:
    """Persistence for orders. Create and read only; records are never updated."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    async def create(self, order: Order) -> str:
        return await run_in_threadpool(self._create, order)

    async def find_recent_match(self, number: str, orders_text: str, since: datetime) -> Order | None:
        return await run_in_threadpool(self._find_recent_match, number, orders_text, since)

    async def count(self) -> int:
        return await run_in_threadpool(self._count)

    def _create(self, order: Order) -> str:
        if order.created_at is not None:
            order.created_at = _as_utc(order.created_at)
        db = self._session_factory()
        try:
            db.add(order)
            db.commit()
            db.refresh(order)
            order.created_at = _as_utc(order.created_at)
            return order.id
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Order insert failed number=%s", order.whatsapp_number)
            raise StorageError(str(exc)) from exc
        finally:
            db.close()

    def _find_recent_match(self, number: str, orders_text: str, since: datetime) -> Order | None:
        db = self._session_factory()
        try:
            match = db.execute(
                select(Order)
                .where(
                    Order.whatsapp_number == number,
                    Order.orders == orders_text,
                    Order.created_at >= _as_utc(since),
                )
                .order_by(Order.created_at.desc())
                .limit(1)
            ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            logger.exception("Recent order lookup failed number=%s", number)
            raise StorageError(str(exc)) from exc
        finally:
            db.close()
        if match is not None:
            match.created_at = _as_utc(match.created_at)
        return match

    def _count(self) -> int:
        db = self._session_factory()
        try:
            return db.execute(select(func.count()).select_from(Order)).scalar_one()
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc
        finally:
            db.close()
