"""
The `database` package provides provider-agnostic, optionally transactional data access.

Contents:
    - config:
        SQLAlchemy engine bootstrap for the default provider.

    - providers:
        The provider capability set (connection, command, data adapter),
        the provider registry, and the SQLAlchemy provider.

    - entities:
        In-memory tabular results (`DataSet`, `DataTable`).

    - core:
        `DatabaseContext`, the unit of atomicity.

    - helpers:
        Atomic single-call helpers and the `@transactional` decorator.
"""
