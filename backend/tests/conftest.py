"""Pytest configuration and shared fixtures.

This module provides centralized test fixtures for:
- A throwaway SQLite record store per test
- A store pre-loaded with a small, known dataset
- HTTP client for API testing
- Raw source rows in the CMS CSV layout
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from drg_explorer.database import StoreClient, get_store
from drg_explorer.main import app
from drg_explorer.services.etl import load_observations, transform_rows
from helpers import HEART_FAILURE, HIP_FEMUR, HIP_KNEE, make_raw_row


# =============================================================================
# Source Data Fixtures
# =============================================================================


@pytest.fixture
def sample_rows() -> list[dict[str, str]]:
    """Raw source rows spanning two levels, four geographies and four DRGs."""
    return [
        make_raw_row(),
        make_raw_row(
            code="NaN", drg="470", drg_desc=HIP_KNEE, discharges="100000",
            submitted="70000.50", total_pay="15000.25", medicare_pay="12000.75",
        ),
        make_raw_row(
            drg="480", drg_desc=HIP_FEMUR, discharges="2000",
            submitted="150000", total_pay="40000", medicare_pay="35000",
        ),
        make_raw_row(
            level="State", code="01", geo="Alabama", drg="470", drg_desc=HIP_KNEE,
            discharges="5000", submitted="60000", total_pay="14000", medicare_pay="12500",
        ),
        make_raw_row(
            level="State", code="01", geo="Alabama", drg="001",
            discharges="5", submitted="400000", total_pay="120000", medicare_pay="110000",
        ),
        make_raw_row(
            level="State", code="02", geo="Alaska", drg="470", drg_desc=HIP_KNEE,
            discharges="300", submitted="90000", total_pay="20000", medicare_pay="18000",
        ),
        make_raw_row(
            level="State", code="05", geo="Arkansas", drg="291", drg_desc=HEART_FAILURE,
            discharges="1200", submitted="55000", total_pay="13000", medicare_pay="11000",
        ),
    ]


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def store(tmp_path) -> StoreClient:
    """Empty record store backed by a SQLite file under tmp_path."""
    client = StoreClient.from_url(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await client.create_schema()
    yield client
    await client.dispose()


@pytest_asyncio.fixture
async def db_session(store):
    """Session on the empty test store."""
    async with store.session() as session:
        yield session


@pytest_asyncio.fixture
async def seeded_store(store, sample_rows) -> StoreClient:
    """Test store loaded with sample_rows."""
    await load_observations(store, transform_rows(sample_rows), on_batch=None)
    return store


@pytest_asyncio.fixture
async def seeded_session(seeded_store):
    """Session on the seeded test store."""
    async with seeded_store.session() as session:
        yield session


# =============================================================================
# HTTP Client Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def client(seeded_store):
    """Async test client for the FastAPI app backed by the seeded store.

    Overrides get_store so every session comes from the test database.
    The app lifespan does not run under ASGITransport.
    """
    app.dependency_overrides[get_store] = lambda: seeded_store

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.pop(get_store, None)
