"""Shared fixtures: isolated settings, a file-backed app and an admin token."""

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app
from app.services.storage import JsonRecordStore

ADMIN_PASSWORD = "admin123"


def make_settings(tmp_path, **overrides) -> Settings:
    values = {
        "env_mode": "development",
        "admin_password": ADMIN_PASSWORD,
        "allow_any_password": False,
        "admin_jwt_secret": None,
        "database_url": None,
        "data_directory": str(tmp_path / "data"),
        "static_directory": str(tmp_path / "public"),
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def admin_headers(client) -> dict[str, str]:
    response = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return {"X-Admin-Token": response.json()["token"]}


@pytest.fixture
def json_store(tmp_path) -> JsonRecordStore:
    return JsonRecordStore(str(tmp_path / "data"), default_image="assets/images/menu1.jpg")
