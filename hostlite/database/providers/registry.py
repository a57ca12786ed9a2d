"""
Provider registry: provider identifier → `ProviderFactory`.

The registry is populated explicitly at startup. Lookups of an identifier that
was never registered raise `UnknownProviderError`.
"""

import logging
from typing import Dict, List, Mapping, Optional

from hostlite.database.providers.base import ProviderFactory
from hostlite.database.providers.sqlalchemy_provider import SqlAlchemyProviderFactory
from hostlite.errors import UnknownProviderError

logger = logging.getLogger(__name__)

SQLALCHEMY_PROVIDER = "sqlalchemy"


class ProviderRegistry:
    """Explicit mapping from provider identifier to capability set."""

    def __init__(self, factories: Optional[Mapping[str, ProviderFactory]] = None):
        self._factories: Dict[str, ProviderFactory] = dict(factories or {})

    def register(self, identifier: str, factory: ProviderFactory) -> None:
        if identifier in self._factories:
            logger.debug("Replacing provider registered under %r", identifier)
        self._factories[identifier] = factory

    def resolve(self, identifier: str) -> ProviderFactory:
        try:
            return self._factories[identifier]
        except KeyError:
            raise UnknownProviderError(identifier) from None

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._factories

    @property
    def identifiers(self) -> List[str]:
        return sorted(self._factories)


def default_registry() -> ProviderRegistry:
    """A registry holding the SQLAlchemy provider under `"sqlalchemy"`."""
    registry = ProviderRegistry()
    registry.register(SQLALCHEMY_PROVIDER, SqlAlchemyProviderFactory())
    return registry


provider_registry = default_registry()
"""Process-wide registry used when no registry is injected."""
