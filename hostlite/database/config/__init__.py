"""
The `config` package holds the SQLAlchemy engine bootstrap used by the default provider.

Contents:
    - connection_engine: builds connection URLs and caches one Engine per connection string
"""
