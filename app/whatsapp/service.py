from __future__ import annotations

import logging

from app.core.config import (
    META_WA_ACCESS_TOKEN,
    META_WA_PHONE_NUMBER_ID,
    WHATSAPP_ALLOW_MOCK,
    WHATSAPP_FAIL_ON_SEND,
    WHATSAPP_PROVIDER,
)
from app.whatsapp.base import WhatsAppProvider
from app.whatsapp.cloud_provider import CloudWhatsAppProvider
from app.whatsapp.mock_provider import MockWhatsAppProvider
from app.whatsapp.session import GatewaySession, log_state_changes

logger = logging.getLogger(__name__)


def select_provider(name: str = WHATSAPP_PROVIDER, *, allow_mock: bool = WHATSAPP_ALLOW_MOCK) -> WhatsAppProvider:
    if name == "cloud":
        if META_WA_ACCESS_TOKEN and META_WA_PHONE_NUMBER_ID:
            return CloudWhatsAppProvider(
                access_token=META_WA_ACCESS_TOKEN,
                phone_number_id=META_WA_PHONE_NUMBER_ID,
            )
        if not allow_mock:
            raise RuntimeError("WHATSAPP_PROVIDER=cloud requires META_WA_ACCESS_TOKEN and META_WA_PHONE_NUMBER_ID")
        logger.warning("WhatsApp Cloud credentials missing, using mock provider")
    elif name != "mock":
        raise RuntimeError(f"Unknown WHATSAPP_PROVIDER: {name}")
    elif not allow_mock:
        # mock never delivers anything; outside dev it has to be asked for explicitly
        raise RuntimeError("WHATSAPP_PROVIDER=mock is only allowed in dev; set WHATSAPP_ALLOW_MOCK=1 to force it")
    return MockWhatsAppProvider(fail_on_send=WHATSAPP_FAIL_ON_SEND)


def build_session(provider: WhatsAppProvider | None = None) -> GatewaySession:
    session = GatewaySession(provider or select_provider())
    session.subscribe(log_state_changes)
    return session
