"""
Warung Storefront - Application Entry Point
=============================================
FastAPI app initialization, middleware, and router registration.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse

from config import settings
from common.exceptions import StorefrontError
from common.flash import carry_notices, flash
from common.security import get_cookie_kwargs
from modules.catalog.service import load_catalog
from modules.shop.service import SessionRegistry

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("storefront")


# ==========================================
# Import routers
# ==========================================
from modules.shop.routes import router as shop_router
from modules.cart.routes import router as cart_router
from modules.checkout.routes import router as checkout_router


@asynccontextmanager
async def lifespan(app):
    # Catalog may be injected before startup (tests, embedding)
    if getattr(app.state, "catalog", None) is None:
        app.state.catalog = load_catalog(settings.CATALOG_PATH)
    logger.info("%s ready with %d products", settings.STORE_NAME, len(app.state.catalog))
    yield
    logger.info("%s stopped", settings.STORE_NAME)


# ==========================================
# Create App
# ==========================================
app = FastAPI(
    title=settings.STORE_NAME,
    description="Storefront with cart, checkout validation and WhatsApp order hand-off",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
    lifespan=lifespan,
)
app.state.catalog = None


# ==========================================
# Exception handler: business errors
# ==========================================
@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    """HTML requests get a notice and go back to the catalog; API requests get JSON."""
    logger.warning("Unhandled storefront error on %s: %s", request.url.path, exc.message)
    if "text/html" in request.headers.get("accept", ""):
        flash(request, exc.message)
        return RedirectResponse("/", status_code=303)
    return JSONResponse({"detail": exc.message}, status_code=400)


# ==========================================
# Middleware: Flash Notices
# ==========================================
@app.middleware("http")
async def flash_message_middleware(request: Request, call_next):
    """Carry notices across redirects; drop them once a page has shown them."""
    response = await call_next(request)
    return carry_notices(request, response)


# ==========================================
# Middleware: Shopping Session Cookie
# ==========================================
@app.middleware("http")
async def shop_session_cookie(request: Request, call_next):
    """Bind every request to a shopping session id, issuing one on first visit."""
    session_id = request.cookies.get(settings.SESSION_COOKIE)
    is_new = not session_id
    if is_new:
        session_id = SessionRegistry.new_session_id()
    request.state.shop_session_id = session_id

    response = await call_next(request)
    if is_new:
        response.set_cookie(settings.SESSION_COOKIE, session_id, **get_cookie_kwargs())
    return response


# ==========================================
# Register Routers
# ==========================================
app.include_router(shop_router)
app.include_router(cart_router)
app.include_router(checkout_router)


# ==========================================
# Health check
# ==========================================
@app.get("/health")
async def health():
    return {"status": "ok", "version": "1.0.0", "products": len(app.state.catalog or ())}
