"""Shared pytest fixtures for the test suites."""

from collections.abc import Generator
from pathlib import Path
import sys

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.config import Settings  # noqa: E402

ACCESS_SECRET = "test-access-secret-0123456789abcdef"
REFRESH_SECRET = "test-refresh-secret-0123456789abcdef"


@pytest.fixture
def settings() -> Settings:
    """Settings for an isolated in-memory database."""
    return Settings(
        database_url="sqlite+pysqlite:///:memory:",
        access_token_secret=ACCESS_SECRET,
        refresh_token_secret=REFRESH_SECRET,
        cors_origins=("http://localhost:3000",),
        environment="test",
    )


@pytest.fixture
def app(settings: Settings) -> Generator[FastAPI, None, None]:
    """Provide an application with its schema created."""
    from app.db.base import Base
    from app.main import create_app

    application = create_app(settings)
    Base.metadata.create_all(application.state.engine)
    yield application
    application.state.engine.dispose()


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Provide an API test client for contract suites."""
    with TestClient(app) as test_client:
        yield test_client
