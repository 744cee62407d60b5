from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

TEMPLATES: dict[str, str] = {
    "owner_new_order": (
        "📦 *NEW ORDER RECEIVED* 📦\n\n"
        "👤 *Customer:* {customer_name}\n"
        "📞 *WhatsApp:* +{whatsapp_number}\n"
        "🏠 *Address:* {address}\n"
        "⏰ *Timing:* {timing}\n"
        "📋 *Orders:* {orders}\n\n"
        "🕒 *Order Time:* {sent_at}"
    ),
    "customer_confirmation": (
        "✅ *Order Confirmed!*\n\n"
        "Thank you {customer_name}! Your order has been received.\n\n"
        "📋 *Orders:* {orders}\n"
        "⏰ *Timing:* {timing}\n"
        "🏠 *Address:* {address}\n\n"
        "We'll contact you shortly on this number."
    ),
    "owner_test": "🔧 TEST MESSAGE\n\nThis is a test from your order system!\nTime: {sent_at}",
}


def render_template(template: str, variables: Mapping[str, Any]) -> str:
    if template not in TEMPLATES:
        raise KeyError(f"Unknown template: {template}")
    return TEMPLATES[template].format(**variables)


def format_locale_timestamp(value: datetime) -> str:
    """Renders like a browser's default toLocaleString(): 10/19/2026, 3:04:05 PM."""
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{value.month}/{value.day}/{value.year}, {hour}:{value.minute:02d}:{value.second:02d} {meridiem}"
