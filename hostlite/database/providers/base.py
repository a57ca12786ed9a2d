"""
Provider boundary
=================

Abstract capability set a database provider must offer to `DatabaseContext`:

- `ProviderFactory.open_connection(...)`: an open `ProviderConnection`
- `ProviderFactory.create_command()`: an unbound `DbCommand`
- `ProviderFactory.create_data_adapter()`: a `DataAdapter` that materializes
  the result of a command into a `DataSet`

Concrete providers are registered in a `ProviderRegistry` under an identifier
that connection descriptors refer to (`ConnectionDescriptor.provider_name`).
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

from hostlite.database.entities.data_set import DataSet
from hostlite.errors import CommandNotBoundError, TransactionInactiveError


class ProviderTransaction(ABC):
    """A transaction begun on a `ProviderConnection`."""

    @property
    @abstractmethod
    def is_active(self) -> bool:
        """False once the transaction has been committed or rolled back."""

    @abstractmethod
    def commit(self) -> None:
        """Commit the transaction. Raises `TransactionInactiveError` if it is no longer active."""

    @abstractmethod
    def rollback(self) -> None:
        """Roll the transaction back. A no-op on an inactive transaction."""


class ProviderConnection(ABC):
    """A single physical connection."""

    @property
    @abstractmethod
    def is_open(self) -> bool:
        ...

    @abstractmethod
    def begin_transaction(self) -> ProviderTransaction:
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the connection. Closing twice is allowed."""


class DbCommand(ABC):
    """
    Provider-native command.

    A command is created unbound; a `DatabaseContext` attaches its connection
    (and transaction, when it uses one) right before executing it.

    Parameters
    ----------
    text : str
        Command text. Named parameters use the provider's syntax (`:name` for SQLAlchemy).
    parameters : Mapping[str, Any], optional
        Values for the named parameters.
    """

    def __init__(self, text: str = "", parameters: Optional[Mapping[str, Any]] = None):
        self.text = text
        self.parameters: Dict[str, Any] = dict(parameters or {})
        self.connection: Optional[ProviderConnection] = None
        self.transaction: Optional[ProviderTransaction] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(text={self.text!r}, parameters={self.parameters!r})"

    def ensure_bound(self) -> None:
        if self.connection is None or not self.connection.is_open:
            raise CommandNotBoundError(f"Command {self.text!r} has no open connection attached.")
        if self.transaction is not None and not self.transaction.is_active:
            raise TransactionInactiveError(
                f"Command {self.text!r} is bound to a transaction that was already completed."
            )

    def execute_reader(self) -> Any:
        """Execute and return the provider's row reader."""
        self.ensure_bound()
        return self._execute_reader()

    def execute_non_query(self) -> int:
        """Execute and return the number of rows affected (-1 when the provider cannot tell)."""
        self.ensure_bound()
        return self._execute_non_query()

    @abstractmethod
    def _execute_reader(self) -> Any:
        ...

    @abstractmethod
    def _execute_non_query(self) -> int:
        ...


class DataAdapter(ABC):
    """Fills a `DataSet` from the result of its `select_command`."""

    def __init__(self):
        self.select_command: Optional[DbCommand] = None

    @abstractmethod
    def fill(self, data_set: Optional[DataSet] = None) -> DataSet:
        """Execute `select_command` and append its result to `data_set` (a new one if omitted)."""

    def close(self) -> None:
        self.select_command = None


class ProviderFactory(ABC):
    """Capability set of one database provider."""

    @abstractmethod
    def open_connection(self, connection_string: str, autocommit: bool = False) -> ProviderConnection:
        """
        Open a connection.

        Parameters
        ----------
        connection_string : str
            Provider-specific connection string.
        autocommit : bool
            True when no explicit transaction will be begun on the connection,
            so every statement must persist on its own.
        """

    @abstractmethod
    def create_command(self) -> DbCommand:
        ...

    @abstractmethod
    def create_data_adapter(self) -> DataAdapter:
        ...
