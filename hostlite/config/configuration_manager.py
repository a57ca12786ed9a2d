"""
Configuration Manager: write-once, tier-aware settings store
=============================================================

Purpose
-------
Merges raw, possibly tier-prefixed settings and connection descriptors into a
single view for the tier the process runs in.

Resolution rules
----------------
1. Universal keys (no `.`) are taken first and always win.
2. Tier-prefixed keys are then considered tier by tier along the fallback chain
   of the running tier, highest priority first. A localized key is only added
   the first time it is seen.

Example, running on a developer machine (chain: DeveloperMachine → Development)::

    raw = {
        "Timeout": "30",
        "Development.Timeout": "60",        # ignored, universal key wins
        "Development.Endpoint": "dev-api",  # used, nothing else defines it
        "QA.Endpoint": "qa-api",            # ignored, QA is not in the chain
    }
    resolve(raw, EnvironmentTier.DeveloperMachine)
    # {"Timeout": "30", "Endpoint": "dev-api"}

Lifecycle
---------
`ConfigurationManager.init(...)` builds the store exactly once. Later calls are
no-ops, whatever tier they pass. Initialization is serialized with a lock, so
two threads racing through `init` cannot both build the store.

Usage
-----
.. code-block:: python

    from hostlite.config.configuration_manager import init, configuration_manager
    from hostlite.config.connection_descriptor import ConnectionDescriptor

    init(
        "QA",
        settings={"QA.ApiUrl": "https://qa.example.com"},
        connections=[ConnectionDescriptor(name="Production.ConnectionString", connection_string="sqlite:///prod.db")],
    )
    configuration_manager.settings["ApiUrl"]
"""

import logging
import threading
from collections import abc
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, TypeVar, Union

from hostlite.config.config import HostSettings, host_settings
from hostlite.config.connection_descriptor import ConnectionDescriptor
from hostlite.config.environment import (
    EnvironmentTier,
    SynonymEntry,
    TierLike,
    is_universal_key,
    localize_key,
    synonyms_for,
    tier_from_server_role,
)
from hostlite.errors import ConfigurationNotInitializedError, UnknownConnectionError

logger = logging.getLogger(__name__)

V = TypeVar("V")

DEFAULT_CONNECTION_SETTINGS = ("AdoLite.DefaultConnectionString", "DefaultConnectionString")
"""Resolved settings that name the default connection, checked in order.

`AdoLite.DefaultConnectionString` contains a dot, so it only reaches the store
tier-prefixed (e.g. `Production.AdoLite.DefaultConnectionString`)."""

ConnectionsSource = Union[Mapping[str, ConnectionDescriptor], Iterable[ConnectionDescriptor]]


def resolve(raw: Mapping[str, V], tier: TierLike) -> Dict[str, V]:
    """
    Merge raw tier-prefixed entries into a localized mapping.

    Parameters
    ----------
    raw : Mapping[str, V]
        Raw key → value. Values are carried through untouched, so the same
        function serves plain settings and connection descriptors.
    tier : EnvironmentTier | str
        The running tier.

    Returns
    -------
    dict[str, V]
        Localized key → value. Keys that cannot be resolved are simply absent.
    """
    chain = synonyms_for(tier)
    chain_tiers = [entry.tier for entry in chain]

    resolved: Dict[str, V] = {}
    for raw_key, value in raw.items():
        if is_universal_key(raw_key):
            resolved[raw_key] = value

    for entry in chain:
        prefix = entry.tier.prefix
        for raw_key, value in raw.items():
            if not raw_key.startswith(prefix):
                continue
            localized = localize_key(raw_key, chain_tiers)
            if localized in resolved:
                continue
            resolved[localized] = value

    return resolved


def _connections_by_name(connections: Optional[ConnectionsSource]) -> Dict[str, ConnectionDescriptor]:
    if connections is None:
        return {}
    if isinstance(connections, abc.Mapping):
        return dict(connections)
    return {descriptor.name: descriptor for descriptor in connections}


class ConfigurationManager:
    """
    Write-once holder of the resolved settings and connection registry.

    One instance normally lives for the whole process (`configuration_manager`),
    but any number can be created, e.g. one per test.

    Parameters
    ----------
    default_connection_name : str
        Connection name used by contexts created without one, unless the
        resolved settings define `AdoLite.DefaultConnectionString` or `DefaultConnectionString`.
    """

    def __init__(self, default_connection_name: str = "ConnectionString"):
        self._lock = threading.Lock()
        self._initialized = False
        self._fallback_connection_name = default_connection_name
        self._hosting_environment: Optional[EnvironmentTier] = None
        self._settings: Mapping[str, str] = MappingProxyType({})
        self._connections: Mapping[str, ConnectionDescriptor] = MappingProxyType({})

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def hosting_environment(self) -> Optional[EnvironmentTier]:
        """The tier passed to the first successful `init`, `None` before that."""
        return self._hosting_environment

    @property
    def synonymous_environments(self) -> List[SynonymEntry]:
        if self._hosting_environment is None:
            return []
        return synonyms_for(self._hosting_environment)

    @property
    def settings(self) -> Mapping[str, str]:
        """Read-only localized settings."""
        return self._settings

    @property
    def connections(self) -> Mapping[str, ConnectionDescriptor]:
        """Read-only localized connection registry."""
        return self._connections

    def init(
        self,
        tier: TierLike,
        settings: Optional[Mapping[str, str]] = None,
        connections: Optional[ConnectionsSource] = None,
    ) -> bool:
        """
        Build the store for `tier`, once.

        Parameters
        ----------
        tier : EnvironmentTier | str
            The tier the process runs in.
        settings : Mapping[str, str], optional
            Raw, possibly tier-prefixed settings.
        connections : Mapping[str, ConnectionDescriptor] | Iterable[ConnectionDescriptor], optional
            Raw connection descriptors, keyed (or named) by their raw name.

        Returns
        -------
        bool
            True if this call built the store, False if it was already built.
        """
        with self._lock:
            if self._initialized:
                logger.debug(
                    "Configuration already initialized for %s; ignoring init(%s).",
                    self._hosting_environment, tier,
                )
                return False

            running = EnvironmentTier(tier)
            resolved_connections = resolve(_connections_by_name(connections), running)
            resolved_settings = resolve(dict(settings or {}), running)

            self._hosting_environment = running
            self._connections = MappingProxyType(resolved_connections)
            self._settings = MappingProxyType(resolved_settings)
            self._initialized = True

        logger.debug(
            "Configuration initialized for %s: %d settings, %d connections.",
            running, len(resolved_settings), len(resolved_connections),
        )
        return True

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return a resolved setting or `default` when it is absent."""
        return self._settings.get(key, default)

    def connection(self, name: str) -> ConnectionDescriptor:
        """
        Look up a connection descriptor by localized name.

        Raises
        ------
        ConfigurationNotInitializedError
            If `init` has not run yet.
        UnknownConnectionError
            If no descriptor resolves to `name`.
        """
        if not self._initialized:
            raise ConfigurationNotInitializedError(
                f"Connection '{name}' requested before the configuration was initialized."
            )
        try:
            return self._connections[name]
        except KeyError:
            raise UnknownConnectionError(name) from None

    @property
    def default_connection_name(self) -> str:
        for key in DEFAULT_CONNECTION_SETTINGS:
            configured = self._settings.get(key)
            if configured and configured.strip():
                return configured
        return self._fallback_connection_name


# Process-wide instance used when no configuration is injected
configuration_manager = ConfigurationManager(host_settings.DEFAULT_CONNECTION_NAME)
"""Shared configuration manager of this process."""


def init(
    tier: TierLike,
    settings: Optional[Mapping[str, str]] = None,
    connections: Optional[ConnectionsSource] = None,
) -> bool:
    """Initialize the process-wide `configuration_manager`. See `ConfigurationManager.init`."""
    return configuration_manager.init(tier, settings, connections)


def init_from_host(
    settings: Optional[Mapping[str, str]] = None,
    connections: Optional[ConnectionsSource] = None,
    host: Optional[HostSettings] = None,
    manager: Optional[ConfigurationManager] = None,
) -> bool:
    """
    Detect the running tier from the host settings and initialize a manager.

    Parameters
    ----------
    settings, connections
        Raw sources, as for `ConfigurationManager.init`.
    host : HostSettings, optional
        Defaults to the `host_settings` singleton.
    manager : ConfigurationManager, optional
        Defaults to the process-wide `configuration_manager`.
    """
    host = host or host_settings
    manager = manager or configuration_manager
    tier = tier_from_server_role(host.SERVER_ROLE, host.SERVER_NAME)
    logger.info("Host role %r resolved to tier %s.", host.SERVER_ROLE, tier)
    return manager.init(tier, settings, connections)
