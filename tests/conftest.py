"""Shared fixtures: a scripted model client, in-memory storage and an ASGI test client."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from core.config import settings
from fakes import FakeModelClient
from main import create_app
from services.path_generator import PathGenerator
from services.path_store import PathStore
from utils.storage import InMemoryStorage


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def store(storage) -> PathStore:
    return PathStore(storage)


@pytest.fixture
def fake_client() -> FakeModelClient:
    return FakeModelClient()


@pytest.fixture
def generator(fake_client) -> PathGenerator:
    return PathGenerator(fake_client, settings)


@pytest.fixture
def app(fake_client, storage):
    return create_app(model_client=fake_client, storage=storage)


@pytest.fixture
async def async_client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
