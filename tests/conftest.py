# tests/conftest.py
"""
Shared fixtures for the hostlite test-suite.

Every test gets:
- its own SQLite database file (under pytest's `tmp_path`) holding an `items` table
- its own `ConfigurationManager`, initialized for the Development tier
- its own `ProviderRegistry`

Nothing here touches the process-wide `configuration_manager` or
`provider_registry`, so tests stay isolated from each other.
"""

from typing import Callable, List

import pytest
from sqlalchemy import create_engine, text

from hostlite.config.configuration_manager import ConfigurationManager
from hostlite.config.connection_descriptor import ConnectionDescriptor
from hostlite.config.environment import EnvironmentTier
from hostlite.database.config.connection_engine import dispose_engines
from hostlite.database.providers.registry import SQLALCHEMY_PROVIDER, ProviderRegistry
from hostlite.database.providers.sqlalchemy_provider import SqlAlchemyConnection, SqlAlchemyProviderFactory


class CountingProviderFactory(SqlAlchemyProviderFactory):
    """SQLAlchemy provider that remembers every connection it opened."""

    def __init__(self):
        self.opened: List[SqlAlchemyConnection] = []

    def open_connection(self, connection_string: str, autocommit: bool = False) -> SqlAlchemyConnection:
        connection = super().open_connection(connection_string, autocommit=autocommit)
        self.opened.append(connection)
        return connection


@pytest.fixture(autouse=True)
def _dispose_cached_engines():
    yield
    dispose_engines()


@pytest.fixture
def database_url(tmp_path) -> str:
    """SQLite URL of a fresh database containing an empty `items` table."""
    url = f"sqlite:///{tmp_path / 'hostlite.db'}"
    engine = create_engine(url)
    with engine.begin() as connection:
        connection.execute(text("CREATE TABLE items (id INTEGER PRIMARY KEY, name TEXT NOT NULL)"))
    engine.dispose()
    return url


@pytest.fixture
def configuration(database_url) -> ConfigurationManager:
    manager = ConfigurationManager()
    manager.init(
        EnvironmentTier.Development,
        settings={"ApplicationName": "hostlite-tests"},
        connections=[ConnectionDescriptor(name="ConnectionString", connection_string=database_url)],
    )
    return manager


@pytest.fixture
def counting_factory() -> CountingProviderFactory:
    return CountingProviderFactory()


@pytest.fixture
def providers(counting_factory) -> ProviderRegistry:
    return ProviderRegistry({SQLALCHEMY_PROVIDER: counting_factory})


@pytest.fixture
def read_names(database_url) -> Callable[[], List[str]]:
    """Read `items.name` through a brand-new connection, i.e. only committed rows."""

    def _read() -> List[str]:
        engine = create_engine(database_url)
        try:
            with engine.connect() as connection:
                return [row[0] for row in connection.execute(text("SELECT name FROM items ORDER BY id"))]
        finally:
            engine.dispose()

    return _read
