"""
Warung Storefront - Centralized Configuration
==============================================
All environment variables and constants are loaded here.
No other module should call os.getenv() directly.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent


# ==========================================
# 🏪 Store
# ==========================================
STORE_NAME = os.getenv("STORE_NAME", "Warung Storefront")

# Catalog dataset: {"Category": [product, ...], ...}
CATALOG_PATH = os.getenv("CATALOG_PATH", str(BASE_DIR / "data" / "catalog.json"))

CURRENCY_PREFIX = "Rp "


# ==========================================
# 💬 Order Transport (WhatsApp deep link)
# ==========================================
WHATSAPP_NUMBER = os.getenv("WHATSAPP_NUMBER", "62895332782122")
WHATSAPP_BASE_URL = "https://wa.me"


# ==========================================
# 🔐 Security
# ==========================================
COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false").lower() == "true"
COOKIE_SAMESITE = os.getenv("COOKIE_SAMESITE", "lax")
CSRF_ENABLED = os.getenv("CSRF_ENABLED", "true").lower() == "true"

SESSION_COOKIE = "storefront_session"
SESSION_IDLE_MINUTES = int(os.getenv("SESSION_IDLE_MINUTES") or "120")
SESSION_MAX_COUNT = int(os.getenv("SESSION_MAX_COUNT") or "10000")

# Order submission rate limit (sliding window)
ORDER_RATE_LIMIT_MAX_ATTEMPTS = int(os.getenv("ORDER_RATE_LIMIT_MAX_ATTEMPTS") or "5")
ORDER_RATE_LIMIT_WINDOW_MS = int(os.getenv("ORDER_RATE_LIMIT_WINDOW_MS") or "60000")
ORDER_RATE_LIMIT_KEY = "order_submission"


# ==========================================
# 🛒 Cart & Checkout Bounds
# ==========================================
MAX_ITEM_QUANTITY = 999
MAX_PRODUCT_ID = 999999

NAME_MAX_LENGTH = 50
PHONE_MAX_LENGTH = 20
ADDRESS_MAX_LENGTH = 200
ADDRESS_MIN_LENGTH = 10
NOTES_MAX_LENGTH = 500


# ==========================================
# 🔧 App
# ==========================================
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO").upper()

TEMPLATE_DIR = str(BASE_DIR / "templates")

# Error notices disappear from the page after this delay
NOTICE_DISMISS_MS = 5000
