"""
Exception hierarchy for hostlite.

Two tiers of failure exist:

- Resolution-time errors (`ConfigurationError` and subclasses): an unknown
  connection name or provider identifier. They surface lazily, the first time a
  `DatabaseContext` needs its provider, never at construction time.
- Data-access errors (`DataAccessError` and subclasses): misuse of the
  connection/transaction lifecycle. Failures raised by the underlying driver
  (e.g. `sqlalchemy.exc.SQLAlchemyError`) are NOT wrapped and propagate as-is.
"""


class HostLiteError(Exception):
    """Base class for every error raised by hostlite itself."""


class ConfigurationError(HostLiteError):
    """Raised when resolved configuration cannot satisfy a lookup."""


class ConfigurationNotInitializedError(ConfigurationError):
    """Raised when connections are requested before `init(...)` ran."""


class UnknownConnectionError(ConfigurationError, LookupError):
    """Raised when no connection descriptor exists for a localized name."""

    def __init__(self, name: str):
        super().__init__(f"No connection descriptor named '{name}' has been configured.")
        self.name = name


class UnknownProviderError(ConfigurationError, LookupError):
    """Raised when a provider identifier is not present in the provider registry."""

    def __init__(self, identifier: str):
        super().__init__(f"No database provider registered under '{identifier}'.")
        self.identifier = identifier


class DataAccessError(HostLiteError):
    """Raised on misuse of a connection, transaction or command."""


class CommandNotBoundError(DataAccessError):
    """Raised when a command is executed without an open connection bound to it."""


class TransactionInactiveError(DataAccessError):
    """Raised when a command is bound to a transaction that was already committed or rolled back."""


class ContextClosedError(DataAccessError):
    """Raised when a disposed `DatabaseContext` is used again."""
