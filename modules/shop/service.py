"""
Shop Module - Service Layer
==============================
Per-browser shopping sessions. Each session owns its cart, its order
submission rate limiter and its checkout controller; nothing is shared
between sessions and nothing outlives the process.
"""

import logging
import secrets
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, Optional

from config.settings import (
    ORDER_RATE_LIMIT_MAX_ATTEMPTS, ORDER_RATE_LIMIT_WINDOW_MS,
    SESSION_IDLE_MINUTES, SESSION_MAX_COUNT, WHATSAPP_NUMBER,
)
from common.helpers import monotonic_ms
from common.security import RateLimiter
from modules.cart.service import CartStore
from modules.checkout.service import CheckoutController

logger = logging.getLogger("storefront.shop")


@dataclass
class ShopSession:
    session_id: str
    cart: CartStore = field(default_factory=CartStore)
    limiter: RateLimiter = field(default_factory=lambda: RateLimiter(
        max_attempts=ORDER_RATE_LIMIT_MAX_ATTEMPTS,
        window_ms=ORDER_RATE_LIMIT_WINDOW_MS,
    ))
    checkout: Optional[CheckoutController] = None
    last_seen_ms: float = field(default_factory=monotonic_ms)
    order_link: Optional[str] = None

    def __post_init__(self):
        if self.checkout is None:
            self.checkout = CheckoutController(
                self.cart, self.limiter,
                transport=self.queue_order_link,
                whatsapp_number=WHATSAPP_NUMBER,
            )

    def queue_order_link(self, url: str):
        """Checkout transport: the next catalog page opens `url` in a new tab."""
        self.order_link = url

    def take_order_link(self) -> Optional[str]:
        url, self.order_link = self.order_link, None
        return url


class SessionRegistry:
    """
    In-memory session_id -> ShopSession map, least recently seen first.

    Idle sessions are dropped from the front on every lookup; when the map is
    full the least recently seen session is evicted to make room.
    """

    def __init__(
        self,
        idle_minutes: int = SESSION_IDLE_MINUTES,
        max_sessions: int = SESSION_MAX_COUNT,
        clock: Callable[[], float] = monotonic_ms,
    ):
        self.idle_ms = idle_minutes * 60 * 1000
        self.max_sessions = max_sessions
        self._clock = clock
        self._sessions: "OrderedDict[str, ShopSession]" = OrderedDict()

    def __len__(self):
        return len(self._sessions)

    def __contains__(self, session_id):
        return session_id in self._sessions

    @staticmethod
    def new_session_id() -> str:
        return secrets.token_urlsafe(24)

    def get_or_create(self, session_id: Optional[str]) -> ShopSession:
        now = self._clock()
        self._expire_idle(now)

        shop = self._sessions.get(session_id) if session_id else None
        if shop is None:
            while len(self._sessions) >= self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info("Session limit %d reached, evicted %s…", self.max_sessions, evicted[:6])
            shop = ShopSession(session_id or self.new_session_id())
            self._sessions[shop.session_id] = shop
            logger.debug("New shopping session %s…", shop.session_id[:6])
        else:
            self._sessions.move_to_end(shop.session_id)
        shop.last_seen_ms = now
        return shop

    def _expire_idle(self, now: float):
        expired = 0
        while self._sessions:
            oldest = next(iter(self._sessions.values()))
            if now - oldest.last_seen_ms <= self.idle_ms:
                break
            self._sessions.popitem(last=False)
            expired += 1
        if expired:
            logger.info("Expired %d idle shopping sessions", expired)

    def clear(self):
        self._sessions.clear()


# Singleton
session_registry = SessionRegistry()
