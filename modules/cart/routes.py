"""
Cart Routes
=====================
Cart view, add to cart, quantity update (form + API) and removal.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Request, Depends, Form
from fastapi.responses import HTMLResponse, RedirectResponse, JSONResponse

from config.settings import MAX_ITEM_QUANTITY, MAX_PRODUCT_ID
from common.exceptions import InvalidProductError, StorefrontError
from common.flash import flash
from common.security import csrf_check, validate_number
from modules.cart.models import QuantityAction
from modules.catalog.models import Catalog
from modules.catalog.service import resolve_product
from modules.shop.deps import get_catalog, get_shop_session, render_page
from modules.shop.service import ShopSession

router = APIRouter(tags=["cart"])

INVALID_QUANTITY_NOTICE = f"Invalid quantity. Please enter a number between 1 and {MAX_ITEM_QUANTITY}."


def apply_cart_action(shop: ShopSession, raw_id, action: str, raw_quantity=None) -> int:
    """
    Validate the id/quantity coming from the page and apply one cart action.
    Returns the product id. Raises StorefrontError on bad input.
    """
    id_check = validate_number(raw_id, 1, MAX_PRODUCT_ID)
    if not id_check.is_valid:
        raise InvalidProductError()
    product_id = id_check.value

    if action == "remove":
        shop.cart.remove(product_id)
    elif action == QuantityAction.SET:
        qty_check = validate_number(raw_quantity, 1, MAX_ITEM_QUANTITY)
        if not qty_check.is_valid:
            raise StorefrontError(INVALID_QUANTITY_NOTICE)
        shop.cart.adjust_quantity(product_id, QuantityAction.SET, qty_check.value)
    elif action in (QuantityAction.INCREASE, QuantityAction.DECREASE):
        shop.cart.adjust_quantity(product_id, action)
    else:
        raise StorefrontError(f"Unknown cart action: {action}")
    return product_id


# ==========================================
# 🛒 View Cart
# ==========================================

@router.get("/cart", response_class=HTMLResponse)
async def view_cart(
    request: Request,
    shop: ShopSession = Depends(get_shop_session),
):
    return render_page(request, shop, "shop/cart.html", {
        "items": shop.cart.items(),
        "total_price": shop.cart.total(),
    })


# ==========================================
# ➕ Add to Cart
# ==========================================

@router.post("/cart/add")
async def add_to_cart(
    request: Request,
    product_id: str = Form(""),
    csrf_token: Optional[str] = Form(None),
    catalog: Catalog = Depends(get_catalog),
    shop: ShopSession = Depends(get_shop_session),
):
    csrf_check(request, csrf_token)
    try:
        product = resolve_product(catalog, product_id)
        shop.cart.add(product)
    except StorefrontError as e:
        flash(request, e.message)

    referer = request.headers.get("referer", "/")
    return RedirectResponse(referer, status_code=303)


# ==========================================
# ➕➖ Update Cart (Form-based)
# ==========================================

@router.post("/cart/update")
async def update_cart_form(
    request: Request,
    product_id: str = Form(""),
    action: str = Form(...),
    quantity: Optional[str] = Form(None),
    csrf_token: Optional[str] = Form(None),
    shop: ShopSession = Depends(get_shop_session),
):
    csrf_check(request, csrf_token)
    try:
        apply_cart_action(shop, product_id, action, quantity)
    except StorefrontError as e:
        flash(request, e.message)
    return RedirectResponse("/cart", status_code=303)


# ==========================================
# ➕➖ Update Cart (API, for AJAX)
# ==========================================

@router.post("/api/cart/update")
async def api_update_cart(
    data: Dict[str, Any],
    request: Request,
    shop: ShopSession = Depends(get_shop_session),
):
    csrf_check(request, request.headers.get("X-CSRF-Token"))

    try:
        product_id = apply_cart_action(shop, data.get("product_id"), data.get("action", ""), data.get("quantity"))
    except StorefrontError as e:
        return JSONResponse({"status": "error", "detail": e.message}, status_code=400)

    item = shop.cart.get(product_id)
    return JSONResponse({
        "status": "success",
        "new_quantity": item.quantity if item else 0,
        "cart_count": shop.cart.count(),
        "cart_total": shop.cart.total(),
    })
