"""
Warung Storefront - Shared Helpers
===================================
Pure utility functions with NO session or module dependencies.
"""

import re
import time
from typing import Optional

from config.settings import CURRENCY_PREFIX


def monotonic_ms() -> float:
    """Milliseconds from a monotonic clock (never jumps with wall-clock changes)."""
    return time.monotonic() * 1000


def safe_int(value) -> Optional[int]:
    """Safely convert a value to int. Returns None on failure."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (ValueError, TypeError):
        return None


def format_rupiah(value) -> str:
    """Format an integer amount the id-ID way: 'Rp 90.000' (dot grouping, no decimals)."""
    if value is None:
        value = 0
    try:
        v = int(value)
    except (ValueError, TypeError):
        return str(value)
    return CURRENCY_PREFIX + "{:,}".format(v).replace(",", ".")


_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """'Main Dishes' -> 'main-dishes'."""
    return _SLUG_STRIP.sub("-", str(text).lower()).strip("-")
