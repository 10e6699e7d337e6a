import html
import re
import urllib.parse

from config.settings import SESSION_COOKIE


def _add(client, csrf, product_id):
    return client.post("/cart/add", data={"product_id": str(product_id), "csrf_token": csrf()})


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": "1.0.0", "products": 18}


def test_catalog_page_issues_session_and_lists_products(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "Nasi Goreng Special" in response.text
    assert "Rp 45.000" in response.text
    assert client.cookies.get(SESSION_COOKIE)


def test_category_filter(client):
    response = client.get("/", params={"category": "drinks"})
    assert "Es Teh Manis" in response.text
    assert "Rendang" not in response.text


def test_product_detail(client):
    response = client.get("/product/13")
    assert response.status_code == 200
    assert "Es Krim Goreng" in response.text
    assert "New" in response.text


def test_product_detail_invalid_id_redirects_with_notice(client):
    response = client.get("/product/abc", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/"

    page = client.get("/")
    assert "Invalid product selected" in page.text


def test_add_requires_csrf(client):
    response = client.post("/cart/add", data={"product_id": "1"})
    assert response.status_code == 403


def test_add_and_view_cart(client, csrf):
    _add(client, csrf, 1)
    _add(client, csrf, 1)
    _add(client, csrf, 7)

    page = client.get("/cart")
    assert page.status_code == 200
    assert "Nasi Goreng Special" in page.text
    assert "Es Teh Manis" in page.text
    assert "Rp 98.000" in page.text


def test_sessions_do_not_share_carts(client, csrf):
    from fastapi.testclient import TestClient

    _add(client, csrf, 1)
    with TestClient(client.app) as other:
        page = other.get("/cart")
        assert "Your cart is empty." in page.text


def test_form_update_actions(client, csrf):
    _add(client, csrf, 1)

    client.post("/cart/update", data={"product_id": "1", "action": "increase", "csrf_token": csrf()})
    client.post("/cart/update", data={"product_id": "1", "action": "set", "quantity": "4", "csrf_token": csrf()})
    assert "Rp 180.000" in client.get("/cart").text

    client.post("/cart/update", data={"product_id": "1", "action": "remove", "csrf_token": csrf()})
    assert "Your cart is empty." in client.get("/cart").text


def test_form_update_invalid_quantity_shows_notice(client, csrf):
    _add(client, csrf, 1)

    page = client.post("/cart/update", data={
        "product_id": "1", "action": "set", "quantity": "1000", "csrf_token": csrf(),
    })

    assert "Invalid quantity. Please enter a number between 1 and 999." in page.text


def test_api_update_cart(client, csrf):
    _add(client, csrf, 7)
    token = csrf()

    response = client.post(
        "/api/cart/update",
        json={"product_id": 7, "action": "set", "quantity": 3},
        headers={"X-CSRF-Token": token},
    )
    assert response.status_code == 200
    assert response.json() == {"status": "success", "new_quantity": 3, "cart_count": 3, "cart_total": 24000}

    response = client.post(
        "/api/cart/update",
        json={"product_id": "x", "action": "increase"},
        headers={"X-CSRF-Token": token},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid product selected"


def test_checkout_page_redirects_when_cart_empty(client):
    response = client.get("/checkout", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/cart"


def test_checkout_page_shows_summary(client, csrf):
    _add(client, csrf, 1)
    _add(client, csrf, 1)

    page = client.get("/checkout")

    assert page.status_code == 200
    assert "Rp 90.000" in page.text


def test_place_order_returns_to_catalog_with_whatsapp_link(client, csrf):
    _add(client, csrf, 1)
    _add(client, csrf, 1)

    response = client.post("/checkout", data={
        "name": "Budi Santoso",
        "address": "Jl. Sudirman No. 10",
        "phone": "081234567890",
        "notes": "",
        "csrf_token": csrf(),
    }, follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/"

    page = client.get("/")
    assert "Thank you for your order!" in page.text
    match = re.search(r'href="(https://wa\.me/62895332782122\?text=[^"]+)" target="_blank"', page.text)
    assert match
    text = urllib.parse.unquote(html.unescape(match.group(1)).split("?text=", 1)[1])
    assert "Nasi Goreng Special x 2 - Rp 90.000" in text
    assert "*Total: Rp 90.000*" in text

    assert "Your cart is empty." in client.get("/cart").text
    assert "wa.me" not in client.get("/").text


def test_place_order_with_invalid_fields_keeps_input(client, csrf):
    _add(client, csrf, 1)

    response = client.post("/checkout", data={
        "name": "Budi Santoso",
        "address": "short",
        "phone": "081234567890",
        "csrf_token": csrf(),
    })

    assert response.status_code == 400
    assert "Address must be at least 10 characters long" in response.text
    assert 'value="Budi Santoso"' in response.text
    assert "Rp 45.000" in client.get("/cart").text


def test_place_order_rate_limited(client, csrf):
    _add(client, csrf, 1)
    form = {"name": "B", "address": "x", "phone": "1"}

    statuses = [client.post("/checkout", data={**form, "csrf_token": csrf()}).status_code for _ in range(6)]

    assert statuses == [400] * 5 + [429]


def test_api_validate_field(client):
    ok = client.post("/api/checkout/validate", json={"field": "phone", "value": "+6281234567890"})
    assert ok.json() == {"field": "phone", "is_valid": True, "error": None}

    bad = client.post("/api/checkout/validate", json={"field": "address", "value": "short"})
    assert bad.json()["error"] == "Address must be at least 10 characters long"

    unknown = client.post("/api/checkout/validate", json={"field": "email", "value": "x"})
    assert unknown.status_code == 400
