"""
Warung Storefront - Security Utilities
=======================================
Input sanitization and validation, sliding-window rate limiting, and CSRF
protection.

Every user-supplied field goes through sanitize_and_validate() before it can
reach a pattern check, the cart, a template or the outbound order message.
"""

import html
import logging
import re
import secrets
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from fastapi import Request, HTTPException

from config.settings import CSRF_ENABLED
from common.helpers import monotonic_ms, safe_int

logger = logging.getLogger("storefront.security")


# ==========================================
# Sanitization & Validation
# ==========================================

@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    value: Any
    error: Optional[str] = None


PATTERNS = {
    "name": re.compile(r"[a-zA-Z\s\u00C0-\u017F]{2,50}"),
    "phone": re.compile(r"(\+62|62|0)[0-9]{8,13}"),
    "quantity": re.compile(r"[1-9][0-9]{0,2}"),
    "id": re.compile(r"[1-9][0-9]*"),
}


def sanitize_html(raw) -> str:
    """Trim and encode `& < >` the way a browser text node does; quotes stay as typed."""
    if not isinstance(raw, str):
        return ""
    return html.escape(raw.strip(), quote=False)


def validate_input(text, kind: str) -> bool:
    """Check a value against the shape rule for `kind`. Unknown kinds never match."""
    if not text or not isinstance(text, str):
        return False
    pattern = PATTERNS.get(kind)
    if pattern is None:
        return False
    return pattern.fullmatch(text.strip()) is not None


def sanitize_and_validate(raw, kind: Optional[str] = None, max_length: int = 1000) -> ValidationResult:
    """
    Sanitize, then bound-check, then (optionally) pattern-check a raw value.
    Returns the first failing reason only.
    """
    if raw is None or raw == "":
        return ValidationResult(False, "", "Input is required")

    sanitized = sanitize_html(raw)

    if len(sanitized) == 0:
        return ValidationResult(False, "", "Input cannot be empty")

    if len(sanitized) > max_length:
        return ValidationResult(False, "", f"Input too long (max {max_length} characters)")

    if kind and not validate_input(sanitized, kind):
        return ValidationResult(False, "", f"Invalid {kind} format")

    return ValidationResult(True, sanitized, None)


def validate_number(raw, min_value: int, max_value: int) -> ValidationResult:
    """Parse an integer and check it lies within [min_value, max_value]."""
    num = safe_int(raw)
    if num is None or num < min_value or num > max_value:
        return ValidationResult(False, 0, f"Number must be between {min_value} and {max_value}")
    return ValidationResult(True, num, None)


# ==========================================
# Rate Limiting (sliding window, in-memory)
# ==========================================

class RateLimiter:
    """
    Sliding-window attempt counter keyed by action.

    Per-session throttle for repeated submissions, not abuse protection.
    """

    def __init__(
        self,
        max_attempts: int = 5,
        window_ms: float = 60_000,
        clock: Callable[[], float] = monotonic_ms,
    ):
        self.max_attempts = max_attempts
        self.window_ms = window_ms
        self._clock = clock
        self._attempts: Dict[str, List[float]] = defaultdict(list)

    def _prune(self, key: str, now: float) -> List[float]:
        valid = [t for t in self._attempts[key] if now - t < self.window_ms]
        self._attempts[key] = valid
        return valid

    def is_allowed(self, key: str) -> bool:
        """
        Record an attempt for `key` if the window has room.
        Returns True if allowed, False if rate limited. Rejected attempts are not recorded.
        """
        now = self._clock()
        valid = self._prune(key, now)

        if len(valid) >= self.max_attempts:
            logger.info("Rate limit hit for %s (%d attempts in %sms)", key, len(valid), self.window_ms)
            return False

        valid.append(now)
        return True

    def remaining(self, key: str) -> int:
        """Attempts still available for `key` in the current window (does not record)."""
        valid = self._prune(key, self._clock())
        return max(self.max_attempts - len(valid), 0)

    def reset(self, key: Optional[str] = None):
        if key is None:
            self._attempts.clear()
        else:
            self._attempts.pop(key, None)


# ==========================================
# CSRF
# ==========================================

def new_csrf_token() -> str:
    """Generate a new random CSRF token."""
    return secrets.token_urlsafe(32)


def csrf_check(request: Request, form_token: Optional[str] = None):
    """
    Verify CSRF token from cookie matches the one in header or form.
    Raises HTTPException(403) on mismatch.
    """
    if not CSRF_ENABLED:
        return

    cookie_token = request.cookies.get("csrf_token")
    header_token = request.headers.get("X-CSRF-Token")
    token = header_token or form_token

    if not cookie_token or not token or not secrets.compare_digest(cookie_token, token):
        raise HTTPException(403, "CSRF token missing or invalid")


def get_cookie_kwargs(max_age: Optional[int] = None) -> dict:
    """Standard cookie settings for storefront cookies."""
    from config.settings import COOKIE_SECURE, COOKIE_SAMESITE
    kwargs = dict(httponly=True, secure=COOKIE_SECURE, samesite=COOKIE_SAMESITE)
    if max_age is not None:
        kwargs["max_age"] = max_age
    return kwargs
