"""
Connection descriptor model.

A descriptor is what a `DatabaseContext` needs to reach a database: the
connection string and the identifier of the provider that understands it.
"""

from pydantic import BaseModel, ConfigDict, Field


class ConnectionDescriptor(BaseModel):
    """
    Named connection metadata.

    The `name` keeps its raw form (possibly tier-prefixed, e.g. `"QA.Orders"`);
    the registry built by `ConfigurationManager.init` is keyed by the localized name.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Raw connection name, optionally prefixed by a tier.")
    connection_string: str = Field(..., description="Provider-specific connection string (a SQLAlchemy URL for the default provider).")
    provider_name: str = Field("sqlalchemy", description="Identifier looked up in the provider registry.")
