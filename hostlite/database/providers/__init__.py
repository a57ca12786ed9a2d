"""
Database providers.

Contents:
    - base: abstract capability set (`ProviderFactory`, `ProviderConnection`, `ProviderTransaction`, `DbCommand`, `DataAdapter`)
    - registry: identifier → provider mapping and the process-wide default registry
    - sqlalchemy_provider: the default provider backed by SQLAlchemy Core
"""
