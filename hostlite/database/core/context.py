"""
Database Context
================

`DatabaseContext` is the unit of atomicity: it owns at most one open connection
and, when created with `use_transaction=True`, at most one live transaction.

Lifecycle
~~~~~~~~~
- Construction performs no I/O.
- The connection descriptor and provider are resolved lazily. The connection
  is opened on the first `execute_*` call, and the transaction is begun right
  after the connection opens.
- `commit()` commits and immediately begins a new transaction on the same
  connection, so the context stays usable.
- `rollback()` rolls back and does NOT begin a new transaction. Executing on the
  context afterwards raises `TransactionInactiveError`.
- `close()` (or leaving a `with` block) COMMITS the active transaction before
  closing the connection. This includes work never explicitly committed and
  exits caused by an exception. Call `rollback()` first to discard work.

Thread safety
~~~~~~~~~~~~~
A context is not safe for concurrent use. Keep one context per thread of work.

Usage
-----
.. code-block:: python

    from hostlite.database.core.context import DatabaseContext

    with DatabaseContext(use_transaction=True) as context:
        cmd = context.create_command("INSERT INTO items (name) VALUES (:name)", {"name": "a"})
        context.execute_non_query(cmd)
        context.commit()
"""

import logging
from typing import Any, Mapping, Optional

from hostlite.config.configuration_manager import ConfigurationManager, configuration_manager
from hostlite.database.entities.data_set import DataSet
from hostlite.database.providers.base import DbCommand, ProviderConnection, ProviderFactory, ProviderTransaction
from hostlite.database.providers.registry import ProviderRegistry, provider_registry
from hostlite.errors import ContextClosedError

logger = logging.getLogger(__name__)


class DatabaseContext:
    """
    Lazily-opened connection plus optional transaction.

    Parameters
    ----------
    connection_name : str, optional
        Localized name of the connection descriptor. Blank or None uses
        `configuration.default_connection_name`.
    use_transaction : bool
        Whether commands executed by this context run inside a transaction.
    configuration : ConfigurationManager, optional
        Source of connection descriptors. Defaults to the process-wide manager.
    providers : ProviderRegistry, optional
        Source of provider factories. Defaults to the process-wide registry.
    """

    def __init__(
        self,
        connection_name: Optional[str] = None,
        use_transaction: bool = False,
        *,
        configuration: Optional[ConfigurationManager] = None,
        providers: Optional[ProviderRegistry] = None,
    ):
        self._configuration = configuration if configuration is not None else configuration_manager
        self._providers = providers if providers is not None else provider_registry

        if connection_name is None or not connection_name.strip():
            connection_name = self._configuration.default_connection_name
        self._connection_name = connection_name
        self._use_transaction = use_transaction

        self._factory: Optional[ProviderFactory] = None
        self._connection: Optional[ProviderConnection] = None
        self._transaction: Optional[ProviderTransaction] = None
        self._closed = False

    def __repr__(self) -> str:
        return (
            f"DatabaseContext(connection_name={self._connection_name!r}, "
            f"use_transaction={self._use_transaction}, open={self._connection is not None})"
        )

    # --------------------------------------------------------------------
    # Properties
    # --------------------------------------------------------------------
    @property
    def connection_name(self) -> str:
        return self._connection_name

    @property
    def uses_transaction(self) -> bool:
        return self._use_transaction

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def factory(self) -> ProviderFactory:
        """Provider of the named connection. Raises `UnknownConnectionError` / `UnknownProviderError`."""
        self._ensure_not_closed()
        if self._factory is None:
            descriptor = self._configuration.connection(self._connection_name)
            self._factory = self._providers.resolve(descriptor.provider_name)
        return self._factory

    @property
    def connection(self) -> ProviderConnection:
        """The open connection, opened (and a transaction begun) on first access."""
        self._ensure_not_closed()
        if self._connection is None:
            descriptor = self._configuration.connection(self._connection_name)
            self._connection = self.factory.open_connection(
                descriptor.connection_string, autocommit=not self._use_transaction
            )
            logger.debug("Context opened connection %r", self._connection_name)
            if self._use_transaction:
                self._transaction = self._connection.begin_transaction()
        return self._connection

    @property
    def transaction(self) -> Optional[ProviderTransaction]:
        return self._transaction

    # --------------------------------------------------------------------
    # Commands
    # --------------------------------------------------------------------
    def create_command(self, command_text: str, parameters: Optional[Mapping[str, Any]] = None) -> DbCommand:
        """
        Build an unbound command for this context's provider.

        The context's connection is not opened by this call.
        """
        command = self.factory.create_command()
        command.text = command_text
        if parameters:
            command.parameters.update(parameters)
        return command

    def _bind(self, command: DbCommand) -> None:
        command.connection = self.connection
        command.transaction = self._transaction if self._use_transaction else None

    def execute_reader(self, command: DbCommand) -> Any:
        """Execute `command` and return the provider's row reader."""
        self._bind(command)
        return command.execute_reader()

    def execute_non_query(self, command: DbCommand) -> int:
        """Execute `command` and return the number of rows affected."""
        self._bind(command)
        return command.execute_non_query()

    def execute_query(self, command: DbCommand) -> DataSet:
        """
        Execute `command` and materialize its result.

        Provider errors are not caught here; the caller decides whether to roll back.
        """
        self._bind(command)
        adapter = self.factory.create_data_adapter()
        adapter.select_command = command
        try:
            return adapter.fill()
        finally:
            adapter.close()

    # --------------------------------------------------------------------
    # Transaction control
    # --------------------------------------------------------------------
    def commit(self) -> None:
        """Commit and begin a fresh transaction on the same connection. No-op without a transaction."""
        if not self._use_transaction or self._transaction is None:
            return
        self._transaction.commit()
        self._transaction = self._connection.begin_transaction()
        logger.debug("Context %r committed", self._connection_name)

    def rollback(self) -> None:
        """Roll back the current transaction. No replacement transaction is begun."""
        if not self._use_transaction or self._transaction is None:
            return
        self._transaction.rollback()
        logger.debug("Context %r rolled back", self._connection_name)

    # --------------------------------------------------------------------
    # Disposal
    # --------------------------------------------------------------------
    def close(self) -> None:
        """Commit the active transaction, if any, then close the connection."""
        if self._closed:
            return
        self._closed = True
        try:
            if self._use_transaction and self._transaction is not None:
                try:
                    if self._transaction.is_active:
                        self._transaction.commit()
                        logger.debug("Context %r committed outstanding work on close", self._connection_name)
                finally:
                    self._transaction = None
        finally:
            if self._connection is not None:
                self._connection.close()
                self._connection = None

    def __enter__(self) -> "DatabaseContext":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def _ensure_not_closed(self) -> None:
        if self._closed:
            raise ContextClosedError(f"Context for connection '{self._connection_name}' has been closed.")
