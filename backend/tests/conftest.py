"""Shared fixtures for API and pipeline tests."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from app.main import app
from pipeline.attribution.colors import AuthorColorRegistry


@pytest.fixture
def client() -> Iterator[TestClient]:
    """TestClient with the app lifespan running."""
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def registry() -> AuthorColorRegistry:
    """A color registry with two fixed authors."""
    return AuthorColorRegistry({"alice": "red", "bob": "blue"})
