import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from app.models.order import Order, OrderStatus
from app.services.errors import StorageError
from app.services.order_store import OrderStore
from tests.fakes import build_sqlite_store
from tests.fixtures_data import NORMALIZED_NUMBER

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


def _order(created_at: datetime = NOW, orders: str = "2x Pizza") -> Order:
    return Order(
        customer_name="Asha",
        whatsapp_number=NORMALIZED_NUMBER,
        address="12 MG Road",
        timing="7pm",
        orders=orders,
        created_at=created_at,
    )


def test_create_assigns_opaque_id_and_pending_status():
    store = build_sqlite_store()
    order = _order()

    order_id = asyncio.run(store.create(order))

    assert isinstance(order_id, str) and len(order_id) == 32
    assert order.id == order_id
    assert order.status == OrderStatus.PENDING.value
    assert order.created_at == NOW
    assert asyncio.run(store.count()) == 1


def test_find_recent_match_respects_number_text_and_window():
    store = build_sqlite_store()
    asyncio.run(store.create(_order(created_at=NOW - timedelta(seconds=30))))

    match = asyncio.run(store.find_recent_match(NORMALIZED_NUMBER, "2x Pizza", NOW - timedelta(minutes=2)))
    other_text = asyncio.run(store.find_recent_match(NORMALIZED_NUMBER, "1x Pizza", NOW - timedelta(minutes=2)))
    other_number = asyncio.run(store.find_recent_match("919999999999", "2x Pizza", NOW - timedelta(minutes=2)))
    too_old = asyncio.run(store.find_recent_match(NORMALIZED_NUMBER, "2x Pizza", NOW))

    assert match is not None
    assert match.created_at == NOW - timedelta(seconds=30)
    assert other_text is None
    assert other_number is None
    assert too_old is None


def test_find_recent_match_window_is_inclusive():
    store = build_sqlite_store()
    since = NOW - timedelta(minutes=2)
    asyncio.run(store.create(_order(created_at=since)))

    assert asyncio.run(store.find_recent_match(NORMALIZED_NUMBER, "2x Pizza", since)) is not None


class FailingSession:
    def add(self, _obj):
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    def execute(self, *_args, **_kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    def rollback(self):
        return None

    def close(self):
        return None


def test_driver_errors_surface_as_storage_error():
    store = OrderStore(FailingSession)

    with pytest.raises(StorageError):
        asyncio.run(store.create(_order()))
    with pytest.raises(StorageError):
        asyncio.run(store.find_recent_match(NORMALIZED_NUMBER, "2x Pizza", NOW))
    with pytest.raises(StorageError):
        asyncio.run(store.count())
