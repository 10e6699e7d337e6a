"""
Checkout Routes
=====================
Checkout form, order submission (back to the catalog, which opens the
WhatsApp deep link in a new tab) and per-field validation for on-blur feedback.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Request, Depends, Form
from fastapi.responses import HTMLResponse, RedirectResponse, JSONResponse

from common.exceptions import ValidationFailure
from common.flash import SUCCESS, flash
from common.security import csrf_check
from modules.checkout.models import CheckoutOutcome, CheckoutState
from modules.order.service import order_composer
from modules.shop.deps import get_shop_session, render_page
from modules.shop.service import ShopSession

router = APIRouter(tags=["checkout"])

_OUTCOME_STATUS = {
    CheckoutState.BLOCKED: 429,
    CheckoutState.INVALID: 400,
    CheckoutState.FAILED: 500,
}


def _render_checkout(request: Request, shop: ShopSession, outcome: Optional[CheckoutOutcome] = None):
    if outcome and outcome.notice:
        flash(request, outcome.notice)
    status_code = _OUTCOME_STATUS.get(outcome.state, 200) if outcome else 200
    return render_page(request, shop, "shop/checkout.html", {
        "lines": order_composer.summary(shop.cart.items()),
        "total_price": shop.cart.total(),
        "errors": outcome.errors if outcome else {},
        "values": outcome.values if outcome else {},
        "state": shop.checkout.state.value,
    }, status_code=status_code)


# ==========================================
# ✅ Checkout Page
# ==========================================

@router.get("/checkout", response_class=HTMLResponse)
async def checkout_page(
    request: Request,
    shop: ShopSession = Depends(get_shop_session),
):
    if shop.cart.is_empty:
        flash(request, "Your cart is empty. Please add items to your cart before checkout.")
        return RedirectResponse("/cart", status_code=303)
    return _render_checkout(request, shop)


# ==========================================
# 📤 Place Order
# ==========================================

@router.post("/checkout")
async def place_order(
    request: Request,
    name: str = Form(""),
    address: str = Form(""),
    phone: str = Form(""),
    notes: str = Form(""),
    csrf_token: Optional[str] = Form(None),
    shop: ShopSession = Depends(get_shop_session),
):
    csrf_check(request, csrf_token)

    outcome = shop.checkout.submit({
        "name": name,
        "address": address,
        "phone": phone,
        "notes": notes,
    })

    if outcome.ok:
        flash(request, "Thank you for your order! We will confirm it on WhatsApp.", SUCCESS)
        return RedirectResponse("/", status_code=303)

    return _render_checkout(request, shop, outcome)


# ==========================================
# 🔎 Field Validation (API, for on-blur)
# ==========================================

@router.post("/api/checkout/validate")
async def api_validate_field(
    data: Dict[str, Any],
    shop: ShopSession = Depends(get_shop_session),
):
    try:
        result = shop.checkout.validate_field(str(data.get("field", "")), data.get("value"))
    except ValidationFailure as e:
        return JSONResponse({"field": e.field, "is_valid": False, "error": e.message}, status_code=400)

    return JSONResponse({
        "field": data.get("field"),
        "is_valid": result.is_valid,
        "error": result.error,
    })
