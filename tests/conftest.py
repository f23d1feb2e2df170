"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import Generator
from datetime import datetime
from typing import Any
from unittest.mock import MagicMock

import pytest

from firestore_directives.config import DEFAULT_PROVIDER_NAME, Settings
from firestore_directives.resolvers import ResolverConfig, install_resolvers
from firestore_directives.schema import build_directive_schema
from firestore_directives.store import MemoryDocumentStore, StoreProvider
from firestore_directives.walker import walk

SCHEMA_SDL = """
type User @collection(path: "users") {
  id: ID @documentID
  name: String
  createdAt: DateTime @timestamp
}

type Order @collection(path: "users/{userId}/orders") {
  id: ID @documentID
  item: String
  status: String
}

type Preferences {
  theme: String
}

type Query {
  user(id: ID): User @getDoc
  users: [User] @getDocs
  orders(userId: ID @pathID, status: String @where): [Order] @getDocs
  order(userId: ID @pathID, id: ID): Order @getDoc
  preferences(scope: String): Preferences @getDoc(path: "preferences/{scope}")
}
"""


class FakeTimestamp:
    """Stand-in for a protobuf Timestamp returned by the store client."""

    def __init__(self, value: datetime):
        self._value = value

    def ToDatetime(self) -> datetime:  # noqa: N802
        return self._value


@pytest.fixture
def fake_timestamp() -> type[FakeTimestamp]:
    return FakeTimestamp


@pytest.fixture
def schema_sdl() -> str:
    return SCHEMA_SDL


@pytest.fixture
def settings() -> Settings:
    return Settings(store_backend="memory", _env_file=None)


@pytest.fixture
def schema(schema_sdl):
    """Schema with directive resolvers installed."""
    built = build_directive_schema(schema_sdl)
    install_resolvers(built, ResolverConfig(registry=walk(built)))
    return built


@pytest.fixture
def registry(schema):
    return walk(schema)


@pytest.fixture
def store() -> MemoryDocumentStore:
    return MemoryDocumentStore()


@pytest.fixture
def context(store) -> dict[str, Any]:
    return {"providers": [StoreProvider(name=DEFAULT_PROVIDER_NAME, app=store)]}


@pytest.fixture
def make_info(schema, context):
    """Build a minimal resolve-info mock for a Query field."""

    def _make(field_name: str, ctx: Any = None) -> MagicMock:
        info = MagicMock()
        info.return_type = schema.query_type.fields[field_name].type
        info.context = context if ctx is None else ctx
        return info

    return _make


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")
