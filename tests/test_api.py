"""End-to-end API behaviour over the file-backed store."""

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from tests.conftest import ADMIN_PASSWORD, make_settings

CHECKOUT = {
    "customer": {"name": "A", "phone": "03123456", "address": "Beirut"},
    "items": [{"id": "x", "name": "Cake", "price": 5, "qty": 2}],
}


# =============================================================================
# HEALTH & LOGIN
# =============================================================================

def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {
        "name": "delights-by-jummy",
        "version": "2.1.0",
        "database": "local-json",
        "requireAdminPassword": True,
    }


def test_login_with_wrong_password(client):
    response = client.post("/api/admin/login", json={"password": "nope"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid password"}


def test_login_then_list_orders(client):
    login = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD})
    assert login.status_code == 200
    token = login.json()["token"]
    assert token

    response = client.get("/api/orders", headers={"X-Admin-Token": token})

    assert response.status_code == 200
    assert response.json() == []


def test_bearer_header_is_accepted(client, admin_headers):
    token = admin_headers["X-Admin-Token"]
    response = client.get("/api/orders", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200


def test_logout_invalidates_token(client, admin_headers):
    assert client.post("/api/admin/logout", headers=admin_headers).json() == {"ok": True}
    assert client.get("/api/orders", headers=admin_headers).status_code == 401


def test_login_without_body(client):
    response = client.post("/api/admin/login")
    assert response.status_code == 401


@pytest.mark.parametrize(
    "method, path, body",
    [
        ("GET", "/api/orders", None),
        ("GET", "/api/contact", None),
        ("POST", "/api/menu", {"name": "Soup", "price": 4}),
        ("PUT", "/api/menu/item_1", {"name": "Soup", "price": 4}),
        ("DELETE", "/api/menu/item_1", None),
        ("PUT", "/api/orders/ord_1/status", {"status": "completed"}),
        ("DELETE", "/api/orders/ord_1", None),
        ("DELETE", "/api/contact/msg_1", None),
    ],
)
def test_admin_routes_require_token(client, method, path, body):
    response = client.request(method, path, json=body, headers={"X-Admin-Token": "adm_forged"})

    assert response.status_code == 401
    assert response.json() == {"error": "Admin auth required"}


# =============================================================================
# MENU
# =============================================================================

def test_menu_crud(client, admin_headers):
    created = client.post(
        "/api/menu",
        json={"name": "Maamoul", "price": 3.5, "description": "Date cookies", "category": "Sweets"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    item = created.json()
    assert item["id"]
    assert item["category"] == "sweets"
    assert item["image"] == "assets/images/menu1.jpg"

    assert client.get("/api/menu").json() == [item]

    updated = client.put(
        f"/api/menu/{item['id']}",
        json={"name": "Maamoul Box", "price": 12},
        headers=admin_headers,
    )
    assert updated.status_code == 200
    assert updated.json() == {**item, "name": "Maamoul Box", "price": 12.0}

    deleted = client.delete(f"/api/menu/{item['id']}", headers=admin_headers)
    assert deleted.status_code == 200
    assert deleted.json() == {"ok": True}
    assert client.get("/api/menu").json() == []

    again = client.delete(f"/api/menu/{item['id']}", headers=admin_headers)
    assert again.status_code == 404
    assert again.json() == {"error": "Not found"}


@pytest.mark.parametrize(
    "body, field",
    [
        ({"price": 4}, "name"),
        ({"name": "", "price": 4}, "name"),
        ({"name": "   ", "price": 4}, "name"),
        ({"name": "Soup"}, "price"),
        ({"name": "Soup", "price": "4"}, "price"),
        ({"name": "Soup", "price": -1}, "price"),
        ({"name": "Soup", "price": True}, "price"),
    ],
)
def test_menu_validation(client, admin_headers, body, field):
    response = client.post("/api/menu", json=body, headers=admin_headers)

    assert response.status_code == 400
    assert field in response.json()["error"]


def test_non_finite_prices_are_rejected(client, admin_headers):
    headers = {**admin_headers, "Content-Type": "application/json"}

    menu = client.post("/api/menu", content='{"name": "Soup", "price": Infinity}', headers=headers)
    assert menu.status_code == 400
    assert "price" in menu.json()["error"]

    order = client.post(
        "/api/orders",
        content='{"customer": {"phone": "03123456", "address": "Beirut"},'
                ' "items": [{"id": "x", "price": NaN, "qty": 1}]}',
        headers={"Content-Type": "application/json"},
    )
    assert order.status_code == 400
    assert "price" in order.json()["error"]


def test_update_unknown_menu_item(client, admin_headers):
    response = client.put(
        "/api/menu/item_missing", json={"name": "Soup", "price": 4}, headers=admin_headers
    )
    assert response.status_code == 404


# =============================================================================
# ORDERS
# =============================================================================

def test_checkout(client):
    response = client.post("/api/orders", json=CHECKOUT)

    assert response.status_code == 201
    order = response.json()
    assert order["total"] == 10.0
    assert order["customer"] == {"name": "A", "phone": "+96103123456", "address": "Beirut"}
    assert order["status"] == "pending"
    assert order["id"].startswith("ord_")
    assert "createdAt" in order


def test_checkout_round_trip_ignores_menu_edits(client, admin_headers):
    dish = client.post(
        "/api/menu", json={"name": "Cake", "price": 5}, headers=admin_headers
    ).json()
    placed = client.post("/api/orders", json={
        "customer": CHECKOUT["customer"],
        "items": [{"id": dish["id"], "name": "Cake", "price": 5, "qty": 3}],
    }).json()

    client.put(f"/api/menu/{dish['id']}", json={"name": "Cheesecake", "price": 9}, headers=admin_headers)

    [listed] = client.get("/api/orders", headers=admin_headers).json()
    assert listed["items"] == placed["items"]
    assert listed["total"] == placed["total"] == 15.0
    assert listed["customer"] == placed["customer"]


@pytest.mark.parametrize(
    "body, message",
    [
        ({}, "Cart is empty"),
        ({**CHECKOUT, "items": []}, "Cart is empty"),
        ({**CHECKOUT, "items": [{"id": "x", "price": 5, "qty": 0}]}, "Cart is empty"),
        ({**CHECKOUT, "customer": {"phone": "1234567", "address": "Beirut"}}, "Phone number is required"),
        ({**CHECKOUT, "customer": {"phone": "03123456", "address": " "}}, "Delivery address is required"),
    ],
)
def test_checkout_validation(client, admin_headers, body, message):
    response = client.post("/api/orders", json=body)

    assert response.status_code == 400
    assert response.json() == {"error": message}
    assert client.get("/api/orders", headers=admin_headers).json() == []


def test_checkout_keeps_sub_cent_total(client, admin_headers):
    response = client.post("/api/orders", json={
        **CHECKOUT, "items": [{"id": "x", "name": "Sample", "price": 0.125, "qty": 1}],
    })

    assert response.status_code == 201
    assert response.json()["total"] == 0.125
    [listed] = client.get("/api/orders", headers=admin_headers).json()
    assert listed["total"] == 0.125


def test_checkout_rejects_overflowing_total(client, admin_headers):
    response = client.post("/api/orders", json={
        **CHECKOUT, "items": [{"id": "x", "name": "Cake", "price": 1e308, "qty": 10}],
    })

    assert response.status_code == 400
    assert response.json() == {"error": "Order total is out of range"}
    assert client.get("/api/orders", headers=admin_headers).json() == []


def test_order_status_and_delete(client, admin_headers):
    order = client.post("/api/orders", json=CHECKOUT).json()

    done = client.put(
        f"/api/orders/{order['id']}/status", json={"status": "completed"}, headers=admin_headers
    )
    assert done.status_code == 200
    assert done.json()["status"] == "completed"

    bad = client.put(
        f"/api/orders/{order['id']}/status", json={"status": "shipped"}, headers=admin_headers
    )
    assert bad.status_code == 400

    missing = client.put(
        "/api/orders/ord_missing/status", json={"status": "pending"}, headers=admin_headers
    )
    assert missing.status_code == 404

    assert client.delete(f"/api/orders/{order['id']}", headers=admin_headers).json() == {"ok": True}
    assert client.delete(f"/api/orders/{order['id']}", headers=admin_headers).status_code == 404


# =============================================================================
# CONTACT
# =============================================================================

def test_contact_messages(client, admin_headers):
    first = client.post(
        "/api/contact", json={"name": "Rana", "email": "rana@example.com", "message": "Hi"}
    )
    assert first.status_code == 201
    assert first.json() == {"ok": True}
    client.post("/api/contact", json={"name": "Sami", "email": "sami@example.com", "message": "Yo"})

    messages = client.get("/api/contact", headers=admin_headers).json()
    assert [m["name"] for m in messages] == ["Sami", "Rana"]

    assert client.delete(f"/api/contact/{messages[0]['id']}", headers=admin_headers).status_code == 200
    assert len(client.get("/api/contact", headers=admin_headers).json()) == 1


def test_contact_requires_all_fields(client):
    response = client.post("/api/contact", json={"name": "Rana", "email": "", "message": "Hi"})

    assert response.status_code == 400
    assert response.json() == {"error": "Name, email, and message are required"}


# =============================================================================
# DEPLOYMENT MODES
# =============================================================================

def test_development_bypass(tmp_path):
    settings = make_settings(tmp_path, admin_password="")
    with TestClient(create_app(settings)) as client:
        assert client.get("/api/health").json()["requireAdminPassword"] is False
        assert client.get("/api/orders").status_code == 200
        assert client.post("/api/admin/login", json={"password": "x"}).json()["token"]


def test_signed_tokens(tmp_path):
    settings = make_settings(tmp_path, admin_jwt_secret="s3cret")
    with TestClient(create_app(settings)) as client:
        token = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD}).json()["token"]

    # A fresh process with the same secret still accepts the token
    with TestClient(create_app(settings)) as client:
        response = client.get("/api/orders", headers={"X-Admin-Token": token})
        assert response.status_code == 200


def test_hosted_without_database(tmp_path):
    settings = make_settings(tmp_path, env_mode="production", admin_password="")
    with TestClient(create_app(settings)) as client:
        health = client.get("/api/health").json()
        assert health["database"] == "unconfigured"
        assert health["requireAdminPassword"] is False

        menu = client.get("/api/menu")
        assert menu.status_code == 500
        assert menu.json() == {"error": "Database not configured"}

        login = client.post("/api/admin/login", json={"password": "x"})
        assert login.status_code == 500
        assert login.json() == {"error": "Admin auth is not configured"}


def test_sql_backend(tmp_path):
    settings = make_settings(tmp_path, database_url=f"sqlite+aiosqlite:///{tmp_path / 'app.db'}")
    with TestClient(create_app(settings)) as client:
        assert client.get("/api/health").json()["database"] == "sqlite"
        assert client.post("/api/orders", json=CHECKOUT).status_code == 201

        token = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD}).json()["token"]
        [order] = client.get("/api/orders", headers={"X-Admin-Token": token}).json()
        assert order["customer"]["phone"] == "+96103123456"


def test_function_prefix_is_stripped(client):
    assert client.get("/.netlify/functions/api/health").json()["name"] == "delights-by-jummy"
    assert client.get("/.netlify/functions/api/api/menu").json() == []
    assert client.post("/.netlify/functions/api/orders", json=CHECKOUT).status_code == 201


# =============================================================================
# ROUTING FALLBACKS
# =============================================================================

def test_unknown_api_route(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json() == {"error": "Not found"}


@pytest.mark.parametrize(
    "method, path",
    [
        ("PATCH", "/api/menu"),
        ("PUT", "/api/menu"),
        ("GET", "/api/orders/ord_1/status"),
        ("DELETE", "/api/health"),
    ],
)
def test_wrong_method_on_known_route(client, method, path):
    response = client.request(method, path)

    assert response.status_code == 405
    assert "error" in response.json()
    assert response.headers["allow"]


def test_wrong_method_through_function_prefix(client):
    assert client.patch("/.netlify/functions/api/menu").status_code == 405


def test_options_preflight(client):
    assert client.options("/api/menu").status_code == 200
    preflight = client.options(
        "/api/orders",
        headers={
            "Origin": "http://example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "X-Admin-Token",
        },
    )
    assert preflight.status_code == 200
    assert preflight.headers["access-control-allow-origin"] == "*"


@pytest.fixture
def site(tmp_path):
    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text("<h1>Menu</h1>", encoding="utf-8")
    (public / "admin.html").write_text("<h1>Admin</h1>", encoding="utf-8")
    return public


def test_spa_fallback_and_static_files(client, site):
    assert client.get("/").text == "<h1>Menu</h1>"
    assert client.get("/menu/sweets").text == "<h1>Menu</h1>"

    admin = client.get("/admin.html")
    assert admin.text == "<h1>Admin</h1>"
    assert admin.headers["cache-control"] == "no-store"


@pytest.mark.parametrize("path", ["/admin", "/isadmin", "/isadmin.html"])
def test_admin_redirects(client, site, path):
    response = client.get(path, follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/admin.html"
