"""
Shop Module - Dependencies
===========================
FastAPI dependencies injected into storefront route handlers via Depends(),
plus the shared page renderer.
"""

from typing import Optional

from fastapi import Request

from common.flash import get_flashed_messages
from common.security import new_csrf_token
from common.templating import templates
from modules.catalog.models import Catalog
from modules.shop.service import ShopSession, session_registry


def get_shop_session(request: Request) -> ShopSession:
    """The ShopSession bound to this browser (cookie assigned by the session middleware)."""
    session_id: Optional[str] = getattr(request.state, "shop_session_id", None)
    return session_registry.get_or_create(session_id)


def get_catalog(request: Request) -> Catalog:
    return request.app.state.catalog


def render_page(request: Request, shop: ShopSession, template: str, context: dict, status_code: int = 200):
    """Render a storefront page with cart badge, notices and a fresh CSRF cookie."""
    csrf = new_csrf_token()
    ctx = {
        "cart_count": shop.cart.count(),
        "csrf_token": csrf,
        "notices": get_flashed_messages(request),
    }
    ctx.update(context)
    response = templates.TemplateResponse(request, template, ctx, status_code=status_code)
    response.set_cookie("csrf_token", csrf, httponly=True, samesite="lax")
    return response
