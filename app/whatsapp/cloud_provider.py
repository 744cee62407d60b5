from __future__ import annotations

import json
import logging

import httpx

from app.core.config import META_API_TIMEOUT_SECONDS, META_API_VERSION
from app.whatsapp.base import (
    GatewaySendError,
    GatewayState,
    SentMessage,
    address_to_phone,
    sanitize_payload,
)
from app.whatsapp.session import GatewaySession

logger = logging.getLogger(__name__)

GRAPH_BASE_URL = "https://graph.facebook.com"


class CloudWhatsAppProvider:
    """WhatsApp Cloud API (Meta Graph) provider.

    Addresses in ``<number>@<suffix>`` form are reduced to the bare number the
    Graph API expects. Sends are attempted once.
    """

    def __init__(
        self,
        *,
        access_token: str,
        phone_number_id: str,
        api_version: str = META_API_VERSION,
        timeout: float = META_API_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.access_token = access_token
        self.phone_number_id = phone_number_id
        self._client = client or httpx.AsyncClient(
            base_url=f"{GRAPH_BASE_URL}/{api_version}",
            timeout=timeout,
        )

    @property
    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}", "Content-Type": "application/json"}

    async def connect(self, session: GatewaySession) -> None:
        if not self.access_token or not self.phone_number_id:
            session.transition(GatewayState.FAILED, "WhatsApp Cloud credentials are incomplete")
            return
        try:
            response = await self._client.get(f"/{self.phone_number_id}", headers=self._headers)
        except httpx.HTTPError as exc:
            session.transition(GatewayState.FAILED, f"Graph API unreachable: {exc}")
            return
        if response.status_code in {401, 403}:
            session.transition(GatewayState.FAILED, f"Graph API rejected credentials: {response.status_code}")
            return
        if response.status_code >= 400:
            session.transition(GatewayState.FAILED, f"Graph API error: {response.status_code}")
            return
        session.transition(GatewayState.AUTHENTICATED)
        session.transition(GatewayState.READY)

    async def send_text(self, address: str, text: str) -> SentMessage:
        to_phone = address_to_phone(address)
        payload = {
            "messaging_product": "whatsapp",
            "to": to_phone,
            "type": "text",
            "text": {"preview_url": False, "body": text},
        }
        try:
            response = await self._client.post(
                f"/{self.phone_number_id}/messages",
                headers=self._headers,
                json=payload,
            )
        except httpx.HTTPError as exc:
            raise GatewaySendError(address, str(exc)) from exc

        if response.status_code >= 400:
            logger.warning(
                "WhatsApp Cloud send failed status=%s body=%s",
                response.status_code,
                json.dumps(sanitize_payload(_safe_json(response)), ensure_ascii=False),
            )
            raise GatewaySendError(address, f"HTTP {response.status_code}")

        data = _safe_json(response)
        messages = data.get("messages") or [{}]
        return SentMessage(address=address, text=text, provider_message_id=messages[0].get("id"))

    async def close(self) -> None:
        await self._client.aclose()


def _safe_json(response: httpx.Response) -> dict:
    try:
        data = response.json()
    except ValueError:
        return {"raw": response.text}
    return data if isinstance(data, dict) else {"raw": data}
