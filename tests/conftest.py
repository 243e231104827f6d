"""Pytest configuration and fixtures."""

import os
from collections.abc import Generator
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing application modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")
os.environ.setdefault("SESSION_COOKIE_SECURE", "false")


SALES_REPS = [
    {"id": 1, "name": "Alice"},
    {"id": 2, "name": "Bob"},
    {"id": 3, "name": "Carla"},
]

COHORTS = [
    {"id": 10, "name": "Leadership EMEA 2025", "course": "Leadership", "region": "EMEA", "date": "2025-03-01", "seats": 20},
    {"id": 11, "name": "Leadership EMEA 2099", "course": "Leadership", "region": "EMEA", "date": "2099-03-01", "seats": 10},
    {"id": 12, "name": "Strategy NAMER 2099", "course": "Strategy", "region": "NAMER", "date": "2099-06-01", "seats": 0},
]

INVITATIONS = [
    {"id": 100, "company": "Acme", "name": "Ann", "sales_rep": "Alice", "course": "Leadership", "region": "EMEA", "cohort_date": "2099-03-01", "status": "Confirmed"},
    {"id": 101, "company": "Globex", "name": "Gus", "sales_rep": "Alice", "course": "Leadership", "region": "EMEA", "cohort_date": "2099-03-01", "status": "Invited"},
    {"id": 102, "company": "Initech", "name": "Ivy", "sales_rep": "Bob", "course": "Strategy", "region": "NAMER", "cohort_date": "2099-06-01", "status": "Confirmed"},
    {"id": 103, "company": "Umbrella", "name": "Uma", "sales_rep": "Bob", "course": "Leadership", "region": "EMEA", "cohort_date": "2026-02-01", "status": "Confirmed"},
    {"id": 104, "company": "Hooli", "name": "Hal", "sales_rep": "Carla", "course": "Leadership", "region": "EMEA", "cohort_date": "2026-02-01", "status": "To be contacted"},
]


def build_store_client(
    tables: dict[str, list[dict[str, Any]]] | None = None,
    failing: set[str] | None = None,
) -> MagicMock:
    """Build a mocked Supabase client with per-table canned rows.

    Args:
        tables: Rows returned by select-all for each table.
        failing: Tables whose select-all raises.

    Returns:
        MagicMock: Client whose ``table(name)`` returns a stable mock per table.
    """
    tables = tables or {}
    failing = failing or set()
    table_mocks: dict[str, MagicMock] = {}

    def table(name: str) -> MagicMock:
        if name not in table_mocks:
            mock_table = MagicMock()
            execute = mock_table.select.return_value.order.return_value.execute
            if name in failing:
                execute.side_effect = Exception(f"relation {name} unavailable")
            else:
                execute.return_value = MagicMock(data=list(tables.get(name, [])))
            mock_table.insert.return_value.execute.return_value = MagicMock(data=[{"id": 999}])
            mock_table.update.return_value.eq.return_value.execute.return_value = MagicMock(data=[{"id": 1}])
            mock_table.delete.return_value.eq.return_value.execute.return_value = MagicMock(data=[{"id": 1}])
            table_mocks[name] = mock_table
        return table_mocks[name]

    client = MagicMock()
    client.table.side_effect = table
    return client


@pytest.fixture(scope="session")
def test_settings() -> Generator[Any, None, None]:
    """Provide test settings with cleared cache.

    Yields:
        Settings: Test configuration settings.
    """
    from src.core.config import get_settings

    get_settings.cache_clear()
    settings = get_settings()
    yield settings
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_sessions() -> Generator[None, None, None]:
    """Drop dashboard sessions between tests."""
    yield
    from src.services.session_registry import get_session_registry

    get_session_registry().clear()


@pytest.fixture
def store_data() -> dict[str, list[dict[str, Any]]]:
    """Rows served by the mocked record store."""
    return {
        "invitations": [dict(row) for row in INVITATIONS],
        "sales_reps": [dict(row) for row in SALES_REPS],
        "cohorts": [dict(row) for row in COHORTS],
    }


@pytest.fixture
def mock_supabase_client(store_data: dict[str, list[dict[str, Any]]]) -> Generator[MagicMock, None, None]:
    """Provide a mocked Supabase client serving ``store_data``.

    Yields:
        MagicMock: Mocked Supabase client for testing.
    """
    mock_client = build_store_client(store_data)

    with patch("src.services.record_store.get_supabase_client", return_value=mock_client), patch(
        "src.core.supabase.get_supabase_client", return_value=mock_client
    ):
        yield mock_client


@pytest.fixture
def client(mock_supabase_client: MagicMock) -> Generator[TestClient, None, None]:
    """Provide a test client for the FastAPI application.

    Args:
        mock_supabase_client: Mocked Supabase client fixture.

    Yields:
        TestClient: FastAPI test client.
    """
    from src.main import app

    with TestClient(app) as test_client:
        yield test_client
