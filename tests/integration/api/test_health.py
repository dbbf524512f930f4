import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from mbc_cms.core.config import Settings
from mbc_cms.infrastructure.api import app as app_module
from mbc_cms.infrastructure.api.app import app, create_app
from mbc_cms.infrastructure.persistence.database import DatabaseManager


@pytest_asyncio.fixture
async def plain_client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.mark.asyncio
async def test_health_check_endpoint(plain_client):
    response = await plain_client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "MBC CMS API"
    assert data["version"] == "1.0.0"


@pytest.mark.asyncio
async def test_liveness_check_endpoint(plain_client):
    response = await plain_client.get("/live")

    assert response.status_code == 200
    assert response.json()["status"] == "alive"


@pytest.mark.asyncio
async def test_readiness_with_database(plain_client, monkeypatch):
    manager = DatabaseManager(Settings(database_url="sqlite+aiosqlite:///:memory:"))
    monkeypatch.setattr(app_module, "get_db_manager", lambda: manager)

    response = await plain_client.get("/ready")
    await manager.disconnect()

    assert response.status_code == 200
    assert response.json()["database"] == "connected"


@pytest.mark.asyncio
async def test_readiness_without_database(plain_client, monkeypatch, tmp_path):
    manager = DatabaseManager(
        Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'db.sqlite'}")
    )
    monkeypatch.setattr(app_module, "get_db_manager", lambda: manager)

    response = await plain_client.get("/ready")
    await manager.disconnect()

    assert response.status_code == 503
    assert response.json()["status"] == "not_ready"


@pytest.mark.asyncio
async def test_api_root(plain_client):
    response = await plain_client.get("/api")

    assert response.status_code == 200
    assert response.json() == {"name": "MBC CMS API", "version": "1.0.0"}


@pytest.mark.asyncio
async def test_openapi_metadata(plain_client):
    response = await plain_client.get("/openapi.json")

    assert response.status_code == 200
    info = response.json()["info"]
    assert info["title"] == "Mountain Backpackers CMS API Documentation"
    assert info["contact"]["email"] == "chairman@mountainbackpackers.co.za"
    assert info["license"]["name"] == "GPL-3.0"


def test_docs_hidden_in_production(monkeypatch):
    production = Settings(environment="production")
    monkeypatch.setattr(app_module, "get_settings", lambda: production)

    production_app = create_app()

    assert production_app.openapi_url is None
    assert production_app.docs_url is None
