import asyncio
from datetime import datetime, timezone

import pytest

from app.models.order import Order
from app.services.errors import NotifyError
from app.services.notifications import NotificationDispatcher
from app.services.whatsapp_templates import format_locale_timestamp, render_template
from app.whatsapp.base import GatewayState
from app.whatsapp.mock_provider import MockWhatsAppProvider
from app.whatsapp.session import GatewaySession
from tests.fakes import FakeClock, ready_session
from tests.fixtures_data import CUSTOMER_ADDRESS, NORMALIZED_NUMBER, OWNER_ADDRESS


def _order() -> Order:
    return Order(
        id="abc123",
        customer_name="Asha",
        whatsapp_number=NORMALIZED_NUMBER,
        address="12 MG Road",
        timing="7pm",
        orders="2x Pizza",
    )


def _dispatcher(provider=None, session=None, owner=OWNER_ADDRESS):
    clock = FakeClock(datetime(2026, 10, 19, 9, 34, 5, tzinfo=timezone.utc))
    return NotificationDispatcher(
        session or ready_session(provider or MockWhatsAppProvider()),
        owner_address=owner,
        display_timezone="Asia/Kolkata",
        clock=clock,
    )


@pytest.mark.parametrize(
    "value,expected",
    [
        (datetime(2026, 1, 5, 0, 7, 9), "1/5/2026, 12:07:09 AM"),
        (datetime(2026, 10, 19, 12, 0, 0), "10/19/2026, 12:00:00 PM"),
        (datetime(2026, 10, 19, 15, 4, 5), "10/19/2026, 3:04:05 PM"),
    ],
)
def test_format_locale_timestamp(value, expected):
    assert format_locale_timestamp(value) == expected


def test_render_template_rejects_unknown_template():
    with pytest.raises(KeyError):
        render_template("order_shipped", {})


def test_owner_message_matches_template():
    message = _dispatcher().owner_message(_order())

    assert message == (
        "📦 *NEW ORDER RECEIVED* 📦\n\n"
        "👤 *Customer:* Asha\n"
        "📞 *WhatsApp:* +919876543210\n"
        "🏠 *Address:* 12 MG Road\n"
        "⏰ *Timing:* 7pm\n"
        "📋 *Orders:* 2x Pizza\n\n"
        "🕒 *Order Time:* 10/19/2026, 3:04:05 PM"
    )


def test_customer_message_matches_template():
    message = _dispatcher().customer_message(_order())

    assert message == (
        "✅ *Order Confirmed!*\n\n"
        "Thank you Asha! Your order has been received.\n\n"
        "📋 *Orders:* 2x Pizza\n"
        "⏰ *Timing:* 7pm\n"
        "🏠 *Address:* 12 MG Road\n\n"
        "We'll contact you shortly on this number."
    )


def test_messages_keep_braces_in_free_text():
    order = _order()
    order.orders = "1x {special} combo"

    assert "1x {special} combo" in _dispatcher().customer_message(order)


def test_notify_owner_and_customer_addresses():
    provider = MockWhatsAppProvider()
    dispatcher = _dispatcher(provider)

    asyncio.run(dispatcher.notify_owner(_order()))
    asyncio.run(dispatcher.notify_customer(_order()))

    assert [m.address for m in provider.outbox] == [OWNER_ADDRESS, CUSTOMER_ADDRESS]
    assert dispatcher.customer_address(NORMALIZED_NUMBER) == CUSTOMER_ADDRESS


def test_gateway_failure_becomes_notify_error():
    dispatcher = _dispatcher(MockWhatsAppProvider(fail_on_send=True))

    with pytest.raises(NotifyError) as exc:
        asyncio.run(dispatcher.notify_owner(_order()))

    assert OWNER_ADDRESS in str(exc.value)


def test_gateway_not_ready_becomes_notify_error():
    session = GatewaySession(MockWhatsAppProvider())
    session.transition(GatewayState.CONNECTING)
    dispatcher = _dispatcher(session=session)

    with pytest.raises(NotifyError) as exc:
        asyncio.run(dispatcher.notify_customer(_order()))

    assert "connecting" in str(exc.value)


def test_missing_owner_address_fails_owner_notification():
    provider = MockWhatsAppProvider()
    dispatcher = _dispatcher(provider, owner="")

    with pytest.raises(NotifyError):
        asyncio.run(dispatcher.notify_owner(_order()))
    assert not provider.outbox


def test_send_test_message():
    provider = MockWhatsAppProvider()

    asyncio.run(_dispatcher(provider).send_test_message())

    assert provider.outbox[0].address == OWNER_ADDRESS
    assert provider.outbox[0].text == (
        "🔧 TEST MESSAGE\n\nThis is a test from your order system!\nTime: 10/19/2026, 3:04:05 PM"
    )
