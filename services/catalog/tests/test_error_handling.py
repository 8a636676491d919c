"""
Where: services/catalog/tests/test_error_handling.py
What: Unexpected failures through the full app.
Why: One failure must give one 500 and one error record, and the app keeps serving.
"""

import logging

import pytest
from fastapi.testclient import TestClient


def _error_records(caplog):
    return [r for r in caplog.records if r.levelno >= logging.ERROR]


def test_store_failure_returns_one_sanitized_500(client, product_store, monkeypatch, caplog):
    caplog.set_level(logging.INFO)

    async def broken_list():
        raise RuntimeError("connection pool exhausted at 10.0.0.7")

    monkeypatch.setattr(product_store, "list", broken_list)

    response = client.get("/api/products")

    assert response.status_code == 500
    assert response.json() == {"message": "server error"}
    assert "10.0.0.7" not in response.text

    errors = _error_records(caplog)
    assert len(errors) == 1
    assert errors[0].name == "catalog.errors"
    assert "connection pool exhausted" in errors[0].getMessage()

    exits = [r for r in caplog.records if getattr(r, "event", None) == "request.exit"]
    assert len(exits) == 1
    assert exits[0].status == 500
    assert exits[0].error_message == "connection pool exhausted at 10.0.0.7"


def test_app_keeps_serving_after_failure(client, product_store, monkeypatch):
    original = product_store.list
    calls = {"n": 0}

    async def flaky_list():
        calls["n"] += 1
        if calls["n"] == 1:
            raise RuntimeError("transient")
        return await original()

    monkeypatch.setattr(product_store, "list", flaky_list)

    assert client.get("/api/products").status_code == 500
    second = client.get("/api/products")
    assert second.status_code == 200
    assert len(second.json()) == 3


def test_client_rejections_are_not_error_records(client, caplog):
    caplog.set_level(logging.INFO)

    client.get("/api/products/secure")
    client.get("/api/products/secure", headers={"Authorization": "Bearer garbage"})
    client.get("/api/products/999")
    client.post("/api/products", json={"name": "ab", "price": 1})
    client.post("/api/login", json={"username": "admin", "password": "wrong"})

    assert _error_records(caplog) == []
    statuses = [r.status for r in caplog.records if getattr(r, "event", None) == "request.exit"]
    assert statuses == [403, 401, 404, 400, 401]


def test_failure_keeps_cors_headers(client, product_store, monkeypatch):
    async def broken_get(product_id):
        raise KeyError(product_id)

    monkeypatch.setattr(product_store, "get", broken_get)

    response = client.get("/api/products/1", headers={"Origin": "https://shop.example"})

    assert response.status_code == 500
    assert response.headers["access-control-allow-origin"] == "https://shop.example"


def test_failure_outside_pipeline_uses_global_handler(main_app, caplog):
    caplog.set_level(logging.INFO)

    @main_app.get("/boom")
    async def boom():
        raise RuntimeError("outside pipeline")

    with TestClient(main_app, raise_server_exceptions=False) as test_client:
        response = test_client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"message": "server error"}
    errors = [r for r in _error_records(caplog) if r.name == "catalog.errors"]
    assert len(errors) == 1


def test_unknown_route_is_json_404(client):
    response = client.get("/api/unknown")

    assert response.status_code == 404
    assert response.json() == {"message": "not found"}


@pytest.mark.parametrize("path", ["/api/unknown", "/api/products/1/reviews", "/nope/deeper"])
def test_unrouted_paths_are_404_for_get_and_options(client, path):
    for response in (client.get(path), client.options(path)):
        assert response.status_code == 404
        assert response.json() == {"message": "not found"}


def test_wrong_method_on_known_path_is_405(client):
    assert client.delete("/api/products").status_code == 405
