"""
SQLAlchemy provider
===================

Default provider, registered as `"sqlalchemy"`. Connection strings are
SQLAlchemy URLs (`sqlite:///app.db`, `postgresql+psycopg2://user:pw@host/db`, ...).

Behavior
--------
- One Engine per connection string (see `connection_engine.get_engine`); one
  checked-out `Connection` per `SqlAlchemyConnection`.
- Connections opened with `autocommit=True` run under the `AUTOCOMMIT`
  isolation level, so statements executed outside an explicit transaction
  persist immediately.
- Commands are `sqlalchemy.text()` statements with named (`:name`) parameters.
- The data adapter buffers every row of the result into a `DataSet`.
"""

import logging
from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine import Connection, CursorResult, Transaction

from hostlite.database.config.connection_engine import get_engine
from hostlite.database.entities.data_set import DataSet
from hostlite.database.providers.base import (
    DataAdapter,
    DbCommand,
    ProviderConnection,
    ProviderFactory,
    ProviderTransaction,
)
from hostlite.errors import CommandNotBoundError, TransactionInactiveError

logger = logging.getLogger(__name__)


class SqlAlchemyTransaction(ProviderTransaction):
    """Wraps the root transaction of a SQLAlchemy `Connection`."""

    def __init__(self, transaction: Transaction):
        self._transaction = transaction

    @property
    def is_active(self) -> bool:
        return self._transaction.is_active

    def commit(self) -> None:
        if not self._transaction.is_active:
            raise TransactionInactiveError("Cannot commit a transaction that was already completed.")
        self._transaction.commit()

    def rollback(self) -> None:
        if self._transaction.is_active:
            self._transaction.rollback()


class SqlAlchemyConnection(ProviderConnection):
    """A single SQLAlchemy `Connection` checked out from a cached Engine."""

    def __init__(self, connection: Connection):
        self._connection: Optional[Connection] = connection

    @classmethod
    def open(cls, connection_string: str, autocommit: bool = False) -> "SqlAlchemyConnection":
        connection = get_engine(connection_string).connect()
        if autocommit:
            connection = connection.execution_options(isolation_level="AUTOCOMMIT")
        logger.debug("Opened connection to %s (autocommit=%s)", connection.engine.url.render_as_string(hide_password=True), autocommit)
        return cls(connection)

    @property
    def sa_connection(self) -> Connection:
        if self._connection is None:
            raise CommandNotBoundError("The connection has been closed.")
        return self._connection

    @property
    def is_open(self) -> bool:
        return self._connection is not None and not self._connection.closed

    def begin_transaction(self) -> SqlAlchemyTransaction:
        return SqlAlchemyTransaction(self.sa_connection.begin())

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            logger.debug("Closed connection")
            self._connection = None


class SqlAlchemyCommand(DbCommand):
    """A `text()` statement executed on the bound `SqlAlchemyConnection`."""

    def _sa_connection(self) -> Connection:
        if not isinstance(self.connection, SqlAlchemyConnection):
            raise CommandNotBoundError(
                f"Command {self.text!r} is bound to a {type(self.connection).__name__}, expected a SqlAlchemyConnection."
            )
        return self.connection.sa_connection

    def _execute_reader(self) -> CursorResult:
        return self._sa_connection().execute(text(self.text), self.parameters or None)

    def _execute_non_query(self) -> int:
        result = self._sa_connection().execute(text(self.text), self.parameters or None)
        try:
            return result.rowcount
        finally:
            result.close()


class SqlAlchemyDataAdapter(DataAdapter):
    """Buffers the rows returned by `select_command` into a `DataSet`."""

    def fill(self, data_set: Optional[DataSet] = None) -> DataSet:
        if self.select_command is None:
            raise CommandNotBoundError("The data adapter has no select command.")
        data_set = data_set if data_set is not None else DataSet()

        result = self.select_command.execute_reader()
        try:
            if result.returns_rows:
                columns = list(result.keys())
                rows = [tuple(row) for row in result]
                data_set.add_table(columns, rows)
        finally:
            result.close()
        return data_set


class SqlAlchemyProviderFactory(ProviderFactory):
    """Capability set of the SQLAlchemy provider."""

    def open_connection(self, connection_string: str, autocommit: bool = False) -> SqlAlchemyConnection:
        return SqlAlchemyConnection.open(connection_string, autocommit=autocommit)

    def create_command(self) -> SqlAlchemyCommand:
        return SqlAlchemyCommand()

    def create_data_adapter(self) -> SqlAlchemyDataAdapter:
        return SqlAlchemyDataAdapter()
