"""
Where: services/catalog/tests/test_routes.py
What: End-to-end behavior of the catalog HTTP surface.
Why: Each route must apply its own interceptor chain in the fixed order.
"""

import logging
import os
from datetime import datetime, timedelta, timezone

import pytest

from services.catalog.core.security import create_access_token


def test_root_greeting(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.text == "Welcome to my API!"
    assert response.headers["content-type"].startswith("text/plain")


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_list_products(client):
    response = client.get("/api/products")

    assert response.status_code == 200
    assert response.json() == [
        {"id": 1, "name": "Laptop", "price": 3500},
        {"id": 2, "name": "Smartphone", "price": 1800},
        {"id": 3, "name": "Headphones", "price": 350},
    ]


def test_get_product(client):
    response = client.get("/api/products/2")

    assert response.status_code == 200
    assert response.json() == {"id": 2, "name": "Smartphone", "price": 1800}


def test_get_unknown_product_is_404(client):
    response = client.get("/api/products/999")

    assert response.status_code == 404
    assert response.json() == {"message": "not found"}


def test_get_non_numeric_product_id_is_404(client):
    assert client.get("/api/products/abc").status_code == 404


def test_create_product(client):
    response = client.post("/api/products", json={"name": "Tablet", "price": 999})

    assert response.status_code == 201
    assert response.json() == {"id": 4, "name": "Tablet", "price": 999}
    assert client.get("/api/products/4").json()["name"] == "Tablet"


def test_create_product_reports_first_violation(client):
    response = client.post("/api/products", json={"name": "ab", "price": -1})

    assert response.status_code == 400
    assert response.json() == {"message": "name must be at least 3 characters long"}
    assert len(client.get("/api/products").json()) == 3


def test_create_product_rejects_non_json_body(client):
    response = client.post(
        "/api/products", content=b"name=Tablet", headers={"Content-Type": "text/plain"}
    )

    assert response.status_code == 400
    assert response.json() == {"message": "request body must be a JSON object"}


def test_login_success(client):
    response = client.post("/api/login", json={"username": "admin", "password": "password"})

    assert response.status_code == 200
    token = response.json()["token"]
    assert isinstance(token, str) and token


def test_login_wrong_password(client):
    response = client.post("/api/login", json={"username": "admin", "password": "wrong"})

    assert response.status_code == 401
    assert response.json() == {"message": "invalid credentials"}


def test_login_without_body(client):
    response = client.post("/api/login")

    assert response.status_code == 401
    assert response.json() == {"message": "invalid credentials"}


def test_secure_products_without_token_is_403(client):
    response = client.get("/api/products/secure")

    assert response.status_code == 403
    assert response.json() == {"message": "missing token"}


def test_secure_products_with_garbage_token_is_401(client):
    response = client.get("/api/products/secure", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 401
    assert response.json() == {"message": "invalid token"}


def test_secure_products_with_expired_token_is_401(client):
    issued_at = datetime.now(timezone.utc) - timedelta(hours=2)
    token = create_access_token(
        "admin", os.environ["JWT_SECRET_KEY"], expires_delta=3600, now=issued_at
    )

    response = client.get("/api/products/secure", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_secure_products_with_valid_token(client, auth_headers):
    response = client.get("/api/products/secure", headers=auth_headers)

    assert response.status_code == 200
    assert [p["id"] for p in response.json()] == [1, 2, 3]


def test_cors_permissive_reflects_origin(client):
    response = client.get("/api/products", headers={"Origin": "https://shop.example"})

    assert response.headers["access-control-allow-origin"] == "https://shop.example"


def test_cors_absent_without_origin(client):
    response = client.get("/api/products")

    assert "access-control-allow-origin" not in response.headers


def test_cors_restricted_group_denies_foreign_origin(client, auth_headers):
    headers = dict(auth_headers, Origin="https://shop.example")

    response = client.get("/api/products/secure", headers=headers)

    # Served, but the browser is left without permission headers.
    assert response.status_code == 200
    assert "access-control-allow-origin" not in response.headers


def test_cors_restricted_group_allows_configured_origin(client, auth_headers):
    headers = dict(auth_headers, Origin="http://localhost:8080")

    response = client.get("/api/products/secure", headers=headers)

    assert response.headers["access-control-allow-origin"] == "http://localhost:8080"
    assert response.headers["access-control-allow-methods"] == "GET"


def test_cors_headers_on_rejection(client):
    response = client.get("/api/products/secure", headers={"Origin": "http://localhost:8080"})

    assert response.status_code == 403
    assert response.headers["access-control-allow-origin"] == "http://localhost:8080"


def test_preflight_allowed(client):
    response = client.options(
        "/api/products",
        headers={
            "Origin": "https://shop.example",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )

    assert response.status_code == 204
    assert response.headers["access-control-allow-origin"] == "https://shop.example"
    assert response.headers["access-control-allow-headers"] == "content-type"
    assert response.headers["access-control-max-age"] == "600"


def test_preflight_denied_on_secure_group(client):
    response = client.options(
        "/api/products/secure",
        headers={
            "Origin": "http://localhost:8080",
            "Access-Control-Request-Method": "DELETE",
        },
    )

    assert response.status_code == 204
    assert "access-control-allow-origin" not in response.headers


@pytest.mark.parametrize("raw_price", [b"NaN", b"Infinity", b"1e400"])
def test_create_product_rejects_non_finite_price(client, raw_price):
    response = client.post(
        "/api/products",
        content=b'{"name": "Ghost", "price": ' + raw_price + b"}",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"message": "price must be a number"}

    listing = client.get("/api/products")
    assert listing.status_code == 200
    assert len(listing.json()) == 3


def test_preflight_is_access_logged(client, caplog):
    caplog.set_level(logging.INFO)

    response = client.options(
        "/api/products",
        headers={"Origin": "https://shop.example", "Access-Control-Request-Method": "POST"},
    )

    assert response.status_code == 204
    exits = [r for r in caplog.records if getattr(r, "event", None) == "request.exit"]
    assert len(exits) == 1
    assert exits[0].status == 204


def test_secure_preflight_skips_token_check(client, caplog):
    caplog.set_level(logging.INFO)

    response = client.options(
        "/api/products/secure",
        headers={"Origin": "http://localhost:8080", "Access-Control-Request-Method": "GET"},
    )

    assert response.status_code == 204
    assert response.headers["access-control-allow-origin"] == "http://localhost:8080"
    statuses = [r.status for r in caplog.records if getattr(r, "event", None) == "request.exit"]
    assert statuses == [204]


def test_request_id_header(client):
    first = client.get("/")
    second = client.get("/")

    assert first.headers["x-request-id"]
    assert first.headers["x-request-id"] != second.headers["x-request-id"]
