"""
Shop Module - Routes
======================
Public storefront: catalog listing (with category filter) and product detail.
"""

from fastapi import APIRouter, Request, Depends, Query
from fastapi.responses import HTMLResponse, RedirectResponse

from common.exceptions import StorefrontError
from common.flash import flash
from modules.catalog.models import Catalog
from modules.catalog.service import resolve_product
from modules.shop.deps import get_catalog, get_shop_session, render_page
from modules.shop.service import ShopSession

router = APIRouter(tags=["shop"])


@router.get("/", response_class=HTMLResponse)
async def home_page(
    request: Request,
    category: str = Query("all"),
    catalog: Catalog = Depends(get_catalog),
    shop: ShopSession = Depends(get_shop_session),
):
    """Catalog grouped by category; `category` is a filter slug ('all', 'drinks', ...)."""
    return render_page(request, shop, "shop/index.html", {
        "categories": catalog.categories(category),
        "filters": catalog.filters(),
        "current_filter": category,
        "icon_for": catalog.icon_for,
        "order_link": shop.take_order_link(),
    })


@router.get("/product/{product_id}", response_class=HTMLResponse)
async def product_detail(
    request: Request,
    product_id: str,
    catalog: Catalog = Depends(get_catalog),
    shop: ShopSession = Depends(get_shop_session),
):
    try:
        product = resolve_product(catalog, product_id)
    except StorefrontError as e:
        flash(request, e.message)
        return RedirectResponse("/", status_code=303)

    return render_page(request, shop, "shop/product.html", {"product": product})
