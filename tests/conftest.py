# =============================================================================
# MIPARQUEO BACKEND - TEST CONFIGURATION
# =============================================================================
# File: tests/conftest.py
# Description: Pytest fixtures backed by a temporary SQLite file
# =============================================================================

from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from miparqueo.core.config import Settings
from miparqueo.db.database import Database
from miparqueo.db.drivers import SQLiteDriver
from miparqueo.db.factory import database_initializer
from miparqueo.db.gate import InitializationGate
from miparqueo.main import create_application


def make_settings(**overrides) -> Settings:
    """Settings isolated from any local .env file."""
    values = {
        "app_env": "development",
        "db_type": "sqlite",
        "log_level": "DEBUG",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


# =============================================================================
# SETTINGS FIXTURES
# =============================================================================

@pytest.fixture
def sqlite_path(tmp_path: Path) -> str:
    """Data file inside a not-yet-existing directory."""
    return str(tmp_path / "data" / "test.db")


@pytest.fixture
def sqlite_settings(sqlite_path: str) -> Settings:
    return make_settings(sqlite_path=sqlite_path)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest_asyncio.fixture
async def sqlite_driver(sqlite_settings: Settings) -> AsyncGenerator[SQLiteDriver, None]:
    """
    Connected SQLite driver with the schema applied.

    Yields fresh database for each test.
    """
    driver = SQLiteDriver(sqlite_settings)
    await driver.connect()
    await driver.apply_schema()

    yield driver

    await driver.disconnect()


@pytest_asyncio.fixture
async def database(sqlite_driver: SQLiteDriver) -> Database:
    """Ready adapter over the SQLite driver."""
    return Database(sqlite_driver)


# =============================================================================
# APPLICATION FIXTURES
# =============================================================================

@pytest_asyncio.fixture
async def app_gate(sqlite_settings: Settings) -> AsyncGenerator[InitializationGate, None]:
    gate = InitializationGate(
        database_initializer(sqlite_settings),
        timeout=sqlite_settings.db_init_timeout,
    )

    yield gate

    await gate.close()


@pytest_asyncio.fixture
async def client(
    sqlite_settings: Settings,
    app_gate: InitializationGate,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client for API testing.

    The lifespan does not run under ASGITransport, so the database is built
    lazily by the first /api request, as in a serverless deployment.
    """
    app = create_application(settings=sqlite_settings, gate=app_gate)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as async_client:
        yield async_client


# =============================================================================
# DATA FIXTURES
# =============================================================================

@pytest.fixture
def sample_lot_payload():
    """Request body for creating a parking lot."""
    return {
        "name": "Parqueadero Centro",
        "location": "Calle 50 #15-20",
        "totalSpaces": 150,
        "pricePerHour": 5000,
    }


@pytest.fixture
def settings_factory():
    """Build isolated Settings with field overrides."""
    return make_settings
