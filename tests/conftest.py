# tests/conftest.py
import os
import tempfile
from datetime import timedelta

# database.py builds its engine at import time, so these must be set first
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{os.path.join(tempfile.gettempdir(), 'lazada_erp_test.db')}",
)
os.environ.setdefault("LAZADA_APP_KEY", "test-app-key")
os.environ.setdefault("LAZADA_APP_SECRET", "test-app-secret")
os.environ.setdefault("LAZADA_CALLBACK_URL", "https://erp.example.com/lazada/callback")

import pytest
from unittest.mock import AsyncMock, MagicMock
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from lazada_erp import models  # noqa: F401
from lazada_erp.core.config import Settings
from lazada_erp.core.utils import utc_now
from lazada_erp.database import Base
from lazada_erp.services.lazada.credential_store import Credential, CredentialStore


@pytest.fixture
def settings():
    """Provide test settings"""
    return Settings(
        DATABASE_URL="sqlite+aiosqlite://",
        LAZADA_APP_KEY="test-app-key",
        LAZADA_APP_SECRET="test-app-secret",
        LAZADA_API_URL="https://api.lazada.test/rest",
        LAZADA_AUTH_URL="https://auth.lazada.test/oauth/authorize",
        LAZADA_AUTH_API_URL="https://auth.lazada.test/rest",
        LAZADA_CALLBACK_URL="https://erp.example.com/lazada/callback",
    )


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
def session_factory(db_url):
    """
    Sessions on a fresh SQLite file per test.

    Tables are created through the sync driver and the async engine uses
    NullPool, so the factory works from any event loop (TestClient included).
    """
    sync_engine = create_engine(db_url.replace("+aiosqlite", ""))
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()

    engine = create_async_engine(db_url, poolclass=NullPool)
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    """Provide a database session for tests"""
    async with session_factory() as session:
        yield session


@pytest.fixture
def credential_store(session_factory):
    return CredentialStore(session_factory)


@pytest.fixture
def make_credential():
    """Build a Credential expiring `expires_in` from now"""
    def _make(access_token="stored-access-token", refresh_token="stored-refresh-token",
              expires_in=timedelta(hours=1)):
        return Credential(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=utc_now() + expires_in,
        )
    return _make


@pytest.fixture
def mock_token_manager():
    """TokenManager stand-in that always hands out the same token"""
    manager = MagicMock()
    manager.get_valid_token = AsyncMock(return_value="test-access-token")
    manager.is_authorized = AsyncMock(return_value=True)
    return manager


@pytest.fixture
def mock_httpx(mocker):
    """
    Patch httpx.AsyncClient and return the inner client whose .post is awaited.

    Set `.post.return_value` (or `.post.side_effect`) in the test.
    """
    async_client_mock = AsyncMock()
    mocker.patch("httpx.AsyncClient", return_value=async_client_mock)
    return async_client_mock.__aenter__.return_value


@pytest.fixture
def make_response():
    """Build MagicMocks shaped like an httpx.Response"""
    def _make(json_data=None, status_code=200, text=None):
        response = MagicMock()
        response.status_code = status_code
        response.text = text if text is not None else str(json_data)
        if isinstance(json_data, Exception):
            response.json.side_effect = json_data
        else:
            response.json.return_value = json_data
        return response
    return _make


@pytest.fixture
def sample_item_data():
    """Provide sample inventory data for tests"""
    return {
        "sku": "LZ-GTR-001",
        "name": "Test Guitar",
        "description": "A test guitar",
        "price": 999.99,
        "quantity": 5,
        "category": "10001",
        "images": ["https://img.example.com/guitar-front.jpg"],
    }
