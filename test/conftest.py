"""
Test Configuration and Fixtures

This module provides:
- Environment setup before any application import (SQLite record store, log dir)
- A TestClient per test on a fresh SQLite database
- Shared payload fixtures for products and orders

Architecture:
- Unit tests (test/**/unit/): mock repositories / transports, no database
- Integration tests: real app, real SQL record store on a temporary SQLite file
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings and the loguru sinks are built at import time
# =============================================================================
import os
from pathlib import Path
import tempfile


_TEST_DB_DIR = Path(tempfile.mkdtemp(prefix='marketplace_test_'))
TEST_DB_PATH = _TEST_DB_DIR / 'marketplace_test.db'


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ['RECORD_STORE_BACKEND'] = 'sql'
    os.environ['DATABASE_URL'] = f'sqlite+aiosqlite:///{TEST_DB_PATH}'
    os.environ['DB_AUTO_CREATE_TABLES'] = 'true'


# Call immediately to set env vars before any imports
_early_setup_test_environment()

from collections.abc import Generator  # noqa: E402
import contextlib  # noqa: E402
from typing import Any  # noqa: E402

from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402


def _remove_test_database() -> None:
    with contextlib.suppress(FileNotFoundError):
        TEST_DB_PATH.unlink()


# =============================================================================
# Integration Test Fixtures
# =============================================================================
@pytest.fixture(scope='function')
def client() -> Generator[TestClient, None, None]:
    """App with a fresh database; lifespan creates the tables on entry."""
    from test.test_main import app

    _remove_test_database()
    with TestClient(app) as test_client:
        yield test_client

    _remove_test_database()


@pytest.fixture
def product_payload() -> dict[str, Any]:
    return {
        'name': 'Widget',
        'description': 'A very useful widget',
        'price': 9.99,
        'imageUrl': 'https://example.com/widget.png',
        'sellerId': 's1',
    }


@pytest.fixture
def create_product(client: TestClient, product_payload: dict[str, Any]):
    """Factory: create a product through the API and return its JSON."""

    def _create(**overrides: Any) -> dict[str, Any]:
        response = client.post('/api/products', json={**product_payload, **overrides})
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_order(client: TestClient):
    """Factory: create an order through the API and return its JSON."""

    def _create(product_id: str, **overrides: Any) -> dict[str, Any]:
        payload = {
            'productId': product_id,
            'buyerId': 'b1',
            'quantity': 1,
            'shippingAddress': '1 Main St, Springfield',
            **overrides,
        }
        response = client.post('/api/orders', json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create
