from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Index, String, Text

from app.core.database import Base


class OrderStatus(str, enum.Enum):
    # Orders are only ever created here; no transitions are defined yet.
    PENDING = "pending"


def _new_order_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True, default=_new_order_id)

    customer_name = Column(String, nullable=False)
    whatsapp_number = Column(String(20), nullable=False)
    address = Column(Text, nullable=False)
    timing = Column(String, nullable=False)
    orders = Column(Text, nullable=False)  # free text, stored as submitted

    status = Column(String(20), default=OrderStatus.PENDING.value, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)


Index("ix_orders_number_created", Order.whatsapp_number, Order.created_at)
