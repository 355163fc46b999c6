"""Pytest configuration: every test gets its own SQLite database and application."""

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from finance_tracker.core.settings import Settings
from main import create_app


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a per-test database file, ignoring any local .env."""
    return Settings(_env_file=None, database_url=f"sqlite:///{tmp_path / 'transactions.db'}")


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    """A fresh application bound to the per-test database."""
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """A TestClient that runs the application lifespan."""
    with TestClient(app) as test_client:
        yield test_client
