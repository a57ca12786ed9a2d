"""
Deployment Tiers & Synonymous Environments
==========================================

Purpose
-------
- `EnvironmentTier`: the closed set of tiers an application can run in.
- `synonyms_for(...)`: the fallback chain of each tier. A tier-prefixed key of a
  synonymous tier may satisfy a lookup when the running tier does not define
  the key itself (a developer machine falls back to development, QA falls back
  to production).
- `localize_key(...)`: strips a tier prefix (`"Development.Setting"` becomes
  `"Setting"`).
- `tier_from_server_role(...)`: maps the host's `SERVER_ROLE` to a tier.

Notes
-----
The synonym table is fixed. Lower priority numbers win.
"""

from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict


class EnvironmentTier(str, Enum):
    """Deployment tiers, ordered by proximity to the developer."""

    DeveloperMachine = "DeveloperMachine"
    Development = "Development"
    Test = "Test"
    QA = "QA"
    Production = "Production"

    def __str__(self) -> str:
        return self.value

    @property
    def prefix(self) -> str:
        """Key prefix used by settings tied to this tier, e.g. `"QA."`."""
        return f"{self.value}."


class SynonymEntry(BaseModel):
    """
    One element of a fallback chain.

    Attributes
    ----------
    priority : int
        Precedence of the tier in the chain. Lower number = higher precedence.
    tier : EnvironmentTier
        The synonymous tier.
    """

    model_config = ConfigDict(frozen=True)

    priority: int
    tier: EnvironmentTier


# --------------------------------------------------------------------
# Fallback chains. Every chain is non-empty and priority-unique.
# --------------------------------------------------------------------
_SYNONYMS: Dict[EnvironmentTier, Tuple[SynonymEntry, ...]] = {
    EnvironmentTier.DeveloperMachine: (
        SynonymEntry(priority=1, tier=EnvironmentTier.DeveloperMachine),
        SynonymEntry(priority=2, tier=EnvironmentTier.Development),
    ),
    EnvironmentTier.Development: (
        SynonymEntry(priority=1, tier=EnvironmentTier.Development),
    ),
    EnvironmentTier.Test: (
        SynonymEntry(priority=1, tier=EnvironmentTier.Test),
    ),
    EnvironmentTier.QA: (
        SynonymEntry(priority=1, tier=EnvironmentTier.QA),
        SynonymEntry(priority=2, tier=EnvironmentTier.Production),
    ),
    EnvironmentTier.Production: (
        SynonymEntry(priority=1, tier=EnvironmentTier.Production),
    ),
}

TierLike = Union[EnvironmentTier, str]


def synonyms_for(tier: TierLike) -> List[SynonymEntry]:
    """
    Return the fallback chain for a running tier, highest precedence first.

    Parameters
    ----------
    tier : EnvironmentTier | str
        The running tier (enum member or its value).

    Returns
    -------
    list[SynonymEntry]
        A new list sorted by ascending priority.

    Raises
    ------
    ValueError
        If `tier` is not a known tier value.
    """
    return sorted(_SYNONYMS[EnvironmentTier(tier)], key=lambda entry: entry.priority)


def is_universal_key(raw_key: str) -> bool:
    """A key without any `.` is not tied to a tier."""
    return "." not in raw_key


def localize_key(raw_key: str, tiers: Optional[Iterable[TierLike]] = None) -> str:
    """
    Strip a leading tier prefix from a raw key.

    Parameters
    ----------
    raw_key : str
        Key as it appears in the raw source, e.g. `"Development.Setting"`.
    tiers : iterable of EnvironmentTier, optional
        Tiers whose prefix may be removed. Defaults to every tier.

    Returns
    -------
    str
        The localized key. Keys without a matching prefix are returned unchanged.
    """
    candidates = EnvironmentTier if tiers is None else tiers
    for tier in candidates:
        prefix = EnvironmentTier(tier).prefix
        if raw_key.startswith(prefix):
            return raw_key[len(prefix):]
    return raw_key


_SERVER_ROLES: Dict[str, EnvironmentTier] = {
    "DEVELOPER_MACHINE": EnvironmentTier.DeveloperMachine,
    "DEV": EnvironmentTier.Development,
    "TEST": EnvironmentTier.Test,
    "STAGE": EnvironmentTier.QA,
}


def tier_from_server_role(server_role: Optional[str], server_name: Optional[str] = None) -> EnvironmentTier:
    """
    Determine the running tier from the host's declared role.

    Parameters
    ----------
    server_role : str | None
        Value of `SERVER_ROLE` (case-insensitive).
    server_name : str | None
        Host name; `localhost` does not declare a role and counts as a developer machine.

    Returns
    -------
    EnvironmentTier
        Unknown or missing roles fall through to `Production`.
    """
    role = (server_role or "").strip().upper()
    if not role and (server_name or "").strip().upper() == "LOCALHOST":
        role = "DEVELOPER_MACHINE"
    return _SERVER_ROLES.get(role, EnvironmentTier.Production)
