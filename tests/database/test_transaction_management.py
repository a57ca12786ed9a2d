# tests/database/test_transaction_management.py
"""
Tests for the atomic helpers and the `@transactional` decorator.

`non_query` and `query` handle failures differently on purpose:
`non_query` rolls back and re-raises, `query` returns an empty `DataSet`.
"""

import logging

import pytest
from sqlalchemy.exc import IntegrityError

from hostlite.database.helpers.transactionManagement import (
    command,
    db_context_var,
    non_query,
    query,
    transactional,
)
from hostlite.database.providers.sqlalchemy_provider import SqlAlchemyCommand
from hostlite.errors import UnknownConnectionError

INSERT = "INSERT INTO items (name) VALUES (:name)"


def test_command_returns_an_unbound_reusable_command(configuration, providers, counting_factory):
    cmd = command(INSERT, {"name": "a"}, configuration=configuration, providers=providers)

    assert isinstance(cmd, SqlAlchemyCommand)
    assert cmd.connection is None
    assert cmd.parameters == {"name": "a"}
    assert counting_factory.opened == []


def test_non_query_commits(configuration, providers, read_names):
    cmd = command(INSERT, {"name": "a"}, configuration=configuration, providers=providers)

    assert non_query(cmd, configuration=configuration, providers=providers) == 1
    assert read_names() == ["a"]


def test_non_query_rolls_back_and_reraises(configuration, providers, read_names):
    cmd = command(
        "INSERT INTO items (id, name) VALUES (1, 'a'), (1, 'b')",
        configuration=configuration,
        providers=providers,
    )

    with pytest.raises(IntegrityError):
        non_query(cmd, configuration=configuration, providers=providers)

    assert read_names() == []


def test_non_query_reraises_resolution_errors(configuration, providers):
    cmd = command(INSERT, {"name": "a"}, configuration=configuration, providers=providers)

    with pytest.raises(UnknownConnectionError):
        non_query(cmd, connection_name="Missing", configuration=configuration, providers=providers)


def test_query_returns_rows(configuration, providers):
    non_query(command(INSERT, {"name": "a"}, configuration=configuration, providers=providers),
              configuration=configuration, providers=providers)

    data_set = query(
        command("SELECT name FROM items", configuration=configuration, providers=providers),
        configuration=configuration,
        providers=providers,
    )

    assert data_set.table.rows == [("a",)]


def test_query_swallows_failures_and_returns_an_empty_result(configuration, providers, caplog):
    cmd = command("SELECT * FROM missing_table", configuration=configuration, providers=providers)

    with caplog.at_level(logging.WARNING, logger="hostlite"):
        data_set = query(cmd, configuration=configuration, providers=providers)

    assert data_set.is_empty
    assert data_set.table is None
    assert "returning an empty DataSet" in caplog.text


def test_query_swallows_resolution_errors_too(configuration, providers):
    cmd = command("SELECT 1", configuration=configuration, providers=providers)

    assert query(cmd, connection_name="Missing", configuration=configuration, providers=providers).is_empty


def test_transactional_commits_on_success(configuration, providers, read_names):
    @transactional(configuration=configuration, providers=providers)
    def add(name, context=None):
        return context.execute_non_query(context.create_command(INSERT, {"name": name}))

    assert add("a") == 1
    assert read_names() == ["a"]
    assert db_context_var.get() is None


def test_transactional_reuses_the_active_context_and_rolls_back_together(configuration, providers, read_names):
    seen = []

    @transactional(configuration=configuration, providers=providers)
    def add(name, context=None):
        seen.append(context)
        context.execute_non_query(context.create_command(INSERT, {"name": name}))

    @transactional(configuration=configuration, providers=providers)
    def add_two_then_fail(context=None):
        add("a")
        add("b")
        seen.append(context)
        raise ValueError("boom")

    with pytest.raises(ValueError):
        add_two_then_fail()

    assert seen[0] is seen[1] is seen[2]
    assert seen[0].is_closed
    assert read_names() == []
    assert db_context_var.get() is None


def test_transactional_can_be_applied_bare(configuration, monkeypatch):
    import hostlite.database.core.context as context_module

    monkeypatch.setattr(context_module, "configuration_manager", configuration)

    @transactional
    def name_of_connection(context=None):
        return context.connection_name

    assert name_of_connection() == "ConnectionString"
