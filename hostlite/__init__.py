"""
hostlite: tier-aware configuration and lightweight transactional data access.

Contents:
    - config:
        Deployment tiers, their fallback chains, and the write-once
        configuration manager that merges tier-prefixed settings and
        connection descriptors for the running tier.

    - database:
        Provider registry, `DatabaseContext` (one connection, optional
        transaction), and single-call atomic helpers.

    - errors:
        Exceptions raised by hostlite itself.
"""

from hostlite.config.configuration_manager import ConfigurationManager, configuration_manager, init, init_from_host
from hostlite.config.connection_descriptor import ConnectionDescriptor
from hostlite.config.environment import EnvironmentTier
from hostlite.database.core.context import DatabaseContext
from hostlite.database.entities.data_set import DataSet, DataTable
from hostlite.database.helpers.transactionManagement import command, non_query, query, transactional

__all__ = [
    "ConfigurationManager",
    "ConnectionDescriptor",
    "DataSet",
    "DataTable",
    "DatabaseContext",
    "EnvironmentTier",
    "command",
    "configuration_manager",
    "init",
    "init_from_host",
    "non_query",
    "query",
    "transactional",
]
