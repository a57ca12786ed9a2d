"""
Database Transaction Management
===============================

Single-call helpers that run one command inside a throwaway transactional
`DatabaseContext`, plus a decorator that hands a managed context to a function.

Helpers
~~~~~~~
- ``non_query(cmd)``: execute and commit; on failure roll back and re-raise.
- ``query(cmd)``: execute and return the `DataSet`; on failure return an
  EMPTY `DataSet` and raise nothing. The failure is only logged.
- ``command(text)``: build a provider command for the default connection
  without opening it.

.. note::
   ``non_query`` and ``query`` deliberately handle failures differently. A
   caller of ``query`` cannot tell "no rows" from "the query failed"; use a
   `DatabaseContext` directly when that difference matters.

Decorator
~~~~~~~~~
``@transactional`` injects a ``context`` keyword argument:

- If a context is already active for the current call chain, it is reused.
- Otherwise a new transactional context is created, committed and closed.
- On errors the context is rolled back before it is closed.
"""

import contextvars
import logging
from functools import wraps
from typing import Any, Callable, Mapping, Optional

from hostlite.config.configuration_manager import ConfigurationManager
from hostlite.database.core.context import DatabaseContext
from hostlite.database.entities.data_set import DataSet
from hostlite.database.providers.base import DbCommand
from hostlite.database.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------
# Context variable holding the DatabaseContext of the current call chain.
# --------------------------------------------------------------------
db_context_var: contextvars.ContextVar[Optional[DatabaseContext]] = contextvars.ContextVar(
    "db_context_var", default=None
)
"""Context variable storing the active `DatabaseContext`."""


def non_query(
    cmd: DbCommand,
    *,
    connection_name: Optional[str] = None,
    configuration: Optional[ConfigurationManager] = None,
    providers: Optional[ProviderRegistry] = None,
) -> int:
    """
    Execute `cmd` atomically.

    Parameters
    ----------
    cmd : DbCommand
        The command to execute.
    connection_name : str, optional
        Connection to use; defaults to the configured default connection.
    configuration, providers
        Injected collaborators, see `DatabaseContext`.

    Returns
    -------
    int
        Number of rows affected.

    Raises
    ------
    Exception
        Whatever the provider raised, after the transaction was rolled back.
    """
    with DatabaseContext(
        connection_name, use_transaction=True, configuration=configuration, providers=providers
    ) as context:
        try:
            rows_affected = context.execute_non_query(cmd)
            context.commit()
        except Exception:
            context.rollback()
            raise
    return rows_affected


def query(
    cmd: DbCommand,
    *,
    connection_name: Optional[str] = None,
    configuration: Optional[ConfigurationManager] = None,
    providers: Optional[ProviderRegistry] = None,
) -> DataSet:
    """
    Execute `cmd` atomically and return its rows.

    Any failure is swallowed: it is logged and an empty `DataSet` is returned.

    Returns
    -------
    DataSet
        The materialized result, or an empty `DataSet` if anything failed.
    """
    with DatabaseContext(
        connection_name, use_transaction=True, configuration=configuration, providers=providers
    ) as context:
        try:
            return context.execute_query(cmd)
        except Exception:
            logger.warning("query(%r) failed; returning an empty DataSet", cmd.text, exc_info=True)
            return DataSet()


def command(
    command_text: str,
    parameters: Optional[Mapping[str, Any]] = None,
    *,
    connection_name: Optional[str] = None,
    configuration: Optional[ConfigurationManager] = None,
    providers: Optional[ProviderRegistry] = None,
) -> DbCommand:
    """
    Build an unbound command for the (default) connection's provider.

    The temporary context used to reach the provider is closed before returning.
    """
    with DatabaseContext(connection_name, configuration=configuration, providers=providers) as context:
        cmd = context.create_command(command_text, parameters)
    return cmd


def transactional(
    func: Optional[Callable] = None,
    *,
    connection_name: Optional[str] = None,
    configuration: Optional[ConfigurationManager] = None,
    providers: Optional[ProviderRegistry] = None,
):
    """
    Decorator to run functions inside a managed `DatabaseContext`.

    Can be applied bare (``@transactional``) or with options
    (``@transactional(connection_name="Reporting")``).

    Parameters
    ----------
    func : callable
        The function to wrap. It must accept a `context` keyword argument.

    Returns
    -------
    callable
        The wrapped function.

    Example
    -------
    >>> @transactional
    ... def rename_item(item_id, name, context=None):
    ...     cmd = context.create_command("UPDATE items SET name = :name WHERE id = :id", {"id": item_id, "name": name})
    ...     return context.execute_non_query(cmd)
    """

    def decorator(inner: Callable) -> Callable:
        @wraps(inner)
        def wrap_func(*args, **kwargs):
            # Reuse the context of an enclosing transactional call
            context = db_context_var.get()
            if context is not None:
                return inner(*args, context=context, **kwargs)

            context = DatabaseContext(
                connection_name, use_transaction=True, configuration=configuration, providers=providers
            )
            token = db_context_var.set(context)
            try:
                result = inner(*args, context=context, **kwargs)
                context.commit()
            except Exception:
                context.rollback()
                raise
            finally:
                context.close()
                db_context_var.reset(token)

            return result

        return wrap_func

    if func is not None:
        return decorator(func)
    return decorator
