from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from app.whatsapp.base import (
    GatewayNotReadyError,
    GatewayState,
    SentMessage,
    WhatsAppProvider,
)

logger = logging.getLogger(__name__)

StateListener = Callable[[GatewayState, Optional[str]], None]


class GatewaySession:
    """Process-wide WhatsApp session.

    Owns the connection lifecycle of a provider and exposes it as a state plus
    listener callbacks. Request handling only ever calls ``send_text``.
    """

    def __init__(self, provider: WhatsAppProvider) -> None:
        self.provider = provider
        self._state = GatewayState.DISCONNECTED
        self._listeners: list[StateListener] = []
        self._ready = asyncio.Event()
        self.last_detail: str | None = None

    @property
    def state(self) -> GatewayState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is GatewayState.READY

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def transition(self, state: GatewayState, detail: str | None = None) -> None:
        previous = self._state
        self._state = state
        self.last_detail = detail
        if state is GatewayState.READY:
            self._ready.set()
        else:
            self._ready.clear()
        logger.info(
            "WhatsApp session %s -> %s",
            previous.value,
            state.value,
            extra={"gateway_state": state.value},
        )
        for listener in list(self._listeners):
            try:
                listener(state, detail)
            except Exception:
                logger.exception("WhatsApp state listener failed state=%s", state.value)

    async def start(self) -> None:
        if self._state in {GatewayState.CONNECTING, GatewayState.READY}:
            return
        self.transition(GatewayState.CONNECTING)
        try:
            await self.provider.connect(self)
        except Exception as exc:
            self.transition(GatewayState.FAILED, str(exc))
            logger.exception("WhatsApp session failed to start")

    async def wait_until_ready(self, timeout: float | None = None) -> bool:
        if self._state is GatewayState.FAILED:
            return False
        try:
            await asyncio.wait_for(self._ready.wait(), timeout)
        except asyncio.TimeoutError:
            return False
        return True

    async def send_text(self, address: str, text: str) -> SentMessage:
        if not self.is_ready:
            raise GatewayNotReadyError(self._state)
        return await self.provider.send_text(address, text)

    async def close(self) -> None:
        await self.provider.close()
        self.transition(GatewayState.DISCONNECTED)


def log_state_changes(state: GatewayState, detail: str | None) -> None:
    if state is GatewayState.AUTHENTICATED:
        logger.info("WhatsApp authenticated")
    elif state is GatewayState.READY:
        logger.info("WhatsApp client is ready")
    elif state is GatewayState.FAILED:
        logger.error("WhatsApp session failed: %s", detail or "unknown error")
