import os

import pytest

# Config is initialized at import time, so set env vars at the top level.
# JWT_SECRET_KEY must be at least 32 characters.
os.environ["JWT_SECRET_KEY"] = "test-secret-key-must-be-at-least-32-chars"
os.environ["AUTH_USER"] = "admin"
os.environ["AUTH_PASS"] = "password"
os.environ["LOG_CONFIG_PATH"] = "/tmp/catalog-missing-logging.yml"

from fastapi.testclient import TestClient  # noqa: E402

from services.catalog.config import CatalogConfig  # noqa: E402
from services.catalog.main import create_app  # noqa: E402
from services.catalog.services.product_store import InMemoryProductStore  # noqa: E402


@pytest.fixture
def catalog_config():
    return CatalogConfig(_env_file=None)


@pytest.fixture
def product_store():
    return InMemoryProductStore()


@pytest.fixture
def main_app(catalog_config, product_store):
    return create_app(catalog_config, product_store=product_store)


@pytest.fixture
def client(main_app):
    with TestClient(main_app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    response = client.post("/api/login", json={"username": "admin", "password": "password"})
    return {"Authorization": f"Bearer {response.json()['token']}"}
