from __future__ import annotations

import logging
from datetime import datetime, timedelta

from app.services.order_store import OrderStore

logger = logging.getLogger(__name__)

DUPLICATE_WINDOW = timedelta(minutes=2)


class DuplicateGuard:
    """Suppresses bursts of identical submissions from the same number.

    The lookback is measured from the moment of the check. It is a best-effort
    query, not a uniqueness constraint: two identical requests racing each other
    can both pass before either one is stored.
    """

    def __init__(self, store: OrderStore, *, window: timedelta = DUPLICATE_WINDOW) -> None:
        self._store = store
        self.window = window

    async def is_duplicate(self, number: str, orders_text: str, now: datetime) -> bool:
        since = now - self.window
        match = await self._store.find_recent_match(number, orders_text, since)
        if match is not None:
            logger.info("Duplicate order suppressed number=%s previous_order=%s", number, match.id)
            return True
        return False
