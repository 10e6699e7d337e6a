import pytest
from fastapi.testclient import TestClient

from common.security import RateLimiter
from modules.cart.service import CartStore
from modules.catalog.models import Product
from modules.catalog.service import load_catalog
from modules.checkout.service import CheckoutController
from modules.shop.service import session_registry


class FakeClock:
    """Manually advanced millisecond clock for the rate limiter."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float):
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return RateLimiter(max_attempts=5, window_ms=60_000, clock=clock)


@pytest.fixture
def nasi_goreng():
    return Product(id=1, name="Nasi Goreng Special", price=45000, description="Fried rice")


@pytest.fixture
def es_teh():
    return Product(id=7, name="Es Teh Manis", price=8000)


@pytest.fixture
def cart():
    return CartStore()


@pytest.fixture
def sent_urls():
    return []


@pytest.fixture
def controller(cart, limiter, sent_urls):
    return CheckoutController(cart, limiter, transport=sent_urls.append, whatsapp_number="62895332782122")


@pytest.fixture
def valid_form():
    return {
        "name": "Budi Santoso",
        "address": "Jl. Sudirman No. 10",
        "phone": "081234567890",
        "notes": "",
    }


@pytest.fixture(scope="session")
def catalog():
    return load_catalog()


@pytest.fixture
def client(catalog):
    from main import app

    app.state.catalog = catalog
    session_registry.clear()
    with TestClient(app) as c:
        yield c
    session_registry.clear()


@pytest.fixture
def csrf(client):
    """Load a page so the server issues a CSRF cookie, then return it."""
    def _token() -> str:
        client.get("/")
        return client.cookies.get("csrf_token")
    return _token
