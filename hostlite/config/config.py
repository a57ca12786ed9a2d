"""
Host Settings: Pydantic v2 Settings (env / .env)
=================================================

Purpose
-------
Strongly-typed description of the host the application runs on:
- Pydantic v2 `BaseSettings` for environment-driven values
- `pydantic-settings` v2 for `.env` loading and model config

These values only decide *which* deployment tier is running and which
connection is the default one. The tier-prefixed settings and connection
descriptors themselves are handed to `ConfigurationManager.init(...)`.

Load Order & Behavior
---------------------
- Values are read from the environment; if not present, `.env` is used.
- Every field is optional, so importing this module never fails.
- `extra="ignore"`: unknown env vars are ignored (not an error).

Usage
-----
from hostlite.config.config import host_settings

role = host_settings.SERVER_ROLE
"""

import logging
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class HostSettings(BaseSettings):
    """
    Host-level configuration loaded from environment variables or a `.env` file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    SERVER_ROLE: Optional[str] = Field(
        None, description="Deployment role of this host (`DEVELOPER_MACHINE`, `DEV`, `TEST`, `STAGE`, anything else is production)."
    )
    SERVER_NAME: Optional[str] = Field(
        None, description="Host name; `localhost` without a role means a developer machine."
    )
    DEFAULT_CONNECTION_NAME: str = Field(
        "ConnectionString", description="Connection used when a context is created without a name."
    )
    LOG_LEVEL: str = Field("INFO", description="Level applied by `configure_logging()`.")


# Singleton instance of HostSettings, ready to be imported across the package
host_settings = HostSettings()
"""Host settings read from the process environment / `.env` at import time."""


def configure_logging(level: Optional[str] = None) -> None:
    """
    Attach a stream handler to the `hostlite` logger.

    Parameters
    ----------
    level : str, optional
        Logging level name. Defaults to `host_settings.LOG_LEVEL`.
    """
    logger = logging.getLogger("hostlite")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, (level or host_settings.LOG_LEVEL).upper(), logging.INFO))
