"""
Warung Storefront - Template Configuration
===========================================
Jinja2 templates setup with custom filters and globals.
Autoescaping is on for every .html template, so catalog and cart text always
renders as literal text.
"""

from fastapi.templating import Jinja2Templates

from config.settings import TEMPLATE_DIR, STORE_NAME, NOTICE_DISMISS_MS, MAX_ITEM_QUANTITY
from common.helpers import format_rupiah

templates = Jinja2Templates(directory=TEMPLATE_DIR)


# ==========================================
# Register Filters & Globals
# ==========================================

# Filters (usage in template: {{ value | rupiah }})
templates.env.filters["rupiah"] = format_rupiah

templates.env.globals["store_name"] = STORE_NAME
templates.env.globals["notice_dismiss_ms"] = NOTICE_DISMISS_MS
templates.env.globals["max_item_quantity"] = MAX_ITEM_QUANTITY
