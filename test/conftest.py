"""
Test Configuration and Fixtures

This module provides:
- A throwaway SQLite database (aiosqlite) shared by every integration test
- Per-test schema reset for integration tests
- The ASGI client used by HTTP tests

Architecture:
- Unit tests (marked `unit`): no database, collaborators are AsyncMocks
- Integration tests: real repositories on SQLite, schema recreated per test
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings are read at import time (core_setting.settings, loguru sinks)
# =============================================================================
import os
from pathlib import Path
import tempfile


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    worker_id = os.environ.get('PYTEST_XDIST_WORKER', 'master')
    db_path = Path(tempfile.gettempdir()) / f'flight_booking_test_{worker_id}.db'
    os.environ['DATABASE_URL'] = f'sqlite+aiosqlite:///{db_path}'

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ.setdefault('DEBUG', 'true')
    os.environ.setdefault('SECRET_KEY', 'test_secret_key')


# Call immediately to set env vars before any imports
_early_setup_test_environment()

from collections.abc import AsyncIterator  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from src.platform.database.orm_db_setting import Base, dispose_engine, get_engine  # noqa: E402


# =============================================================================
# Pytest Hooks
# =============================================================================
def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        markers = [m.name for m in item.iter_markers()]
        if 'unit' not in markers:
            # Reset the schema before any fixture seeds data
            item.fixturenames.insert(0, 'clean_database')


# =============================================================================
# Database
# =============================================================================
@pytest_asyncio.fixture
async def clean_database() -> AsyncIterator[None]:
    """Drop and recreate every table, then release the engine bound to this test's loop"""
    import src.service.booking.driven_adapter.model  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield

    await dispose_engine()


# =============================================================================
# HTTP
# =============================================================================
@pytest_asyncio.fixture
async def client() -> AsyncIterator[httpx.AsyncClient]:
    """ASGI client with the test app's lifespan running (DI wired, tables created)"""
    from test.test_main import app

    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url='http://test') as http_client:
            yield http_client
