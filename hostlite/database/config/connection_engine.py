"""
Connection Engine (SQLAlchemy)

Purpose
-------
Centralizes engine creation for the SQLAlchemy provider:
- Builds SQLAlchemy connection URLs from discrete parts (`connection_url`).
- Creates one Engine per connection string and reuses it (`get_engine`).
- Releases every cached Engine on shutdown (`dispose_engines`).

Notes
-----
- Uses `URL.create(...)` so credentials never have to be concatenated by hand.
- An Engine is only a factory; each `DatabaseContext` still checks out exactly
  one physical connection from it and releases it on close.
"""

import logging
import threading
from typing import Dict, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine

logger = logging.getLogger(__name__)

_engines: Dict[str, Engine] = {}
_engines_lock = threading.Lock()


def connection_url(
    drivername: str,
    username: Optional[str] = None,
    password: Optional[str] = None,
    host: Optional[str] = None,
    database: Optional[str] = None,
    port: Optional[int] = None,
) -> str:
    """
    Render a SQLAlchemy connection string from its parts.

    Parameters
    ----------
    drivername : str
        Dialect and optional driver, e.g. `"postgresql+psycopg2"` or `"sqlite"`.
    username, password, host, database, port
        Standard URL components. Missing parts are left out.

    Returns
    -------
    str
        The URL with the password left in clear text, ready for a `ConnectionDescriptor`.
    """
    url = URL.create(
        drivername=drivername,
        username=username,
        password=password,
        host=host,
        port=port,
        database=database,
    )
    return url.render_as_string(hide_password=False)


def get_engine(connection_string: str) -> Engine:
    """
    Return the cached Engine for `connection_string`, creating it on first use.
    """
    with _engines_lock:
        engine = _engines.get(connection_string)
        if engine is None:
            engine = create_engine(connection_string)
            _engines[connection_string] = engine
            logger.debug("Created engine for %s", engine.url.render_as_string(hide_password=True))
        return engine


def dispose_engines() -> None:
    """Dispose and forget every cached Engine."""
    with _engines_lock:
        engines = list(_engines.values())
        _engines.clear()
    for engine in engines:
        engine.dispose()
