"""Typed views over the per-chain label documents.

Records are parsed leniently: every field the checklist inspects is optional
here so that a missing ``name`` surfaces as a ``MissingRequiredField``
violation instead of a parse failure. Unknown fields are kept (``extra="allow"``)
because the raw documents are the source of truth for rewrites.
"""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


def as_list(value: str | List[str] | None) -> List[str]:
    """Return ``value`` as a list; single slugs become one-element lists."""

    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


class LabelRecord(BaseModel):
    """Base model for every label record."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Entity(LabelRecord):
    """Organization or team associated with on-chain addresses.

    Attributes:
        name: Display name.
        logo: Filename inside the logo directory.
        addresses: Map of checksummed address to free-form metadata.
    """

    name: str | None = None
    logo: str | None = None
    addresses: Dict[str, Any] | None = None


class Vault(LabelRecord):
    """Yield-bearing contract keyed by its checksum address."""

    name: str | None = None
    description: str | None = None
    entity: str | List[str] | None = None

    @property
    def entities(self) -> List[str]:
        return as_list(self.entity)


class Product(LabelRecord):
    """Grouping of vaults presented as a single offering."""

    name: str | None = None
    logo: str | None = None
    entity: str | List[str] | None = None
    vaults: List[Any] | None = None
    deprecated_vaults: List[Any] = Field(default_factory=list, alias="deprecatedVaults")

    @property
    def entities(self) -> List[str]:
        return as_list(self.entity)


class Point(LabelRecord):
    """Points program tied to deposits or borrows in specific vaults."""

    name: str | None = None
    token: Any = None
    url: str | None = None
    logo: str | None = None
    entity: str | List[str] | None = None
    collateral_vaults: List[Any] | None = Field(default=None, alias="collateralVaults")
    liability_vaults: List[Any] | None = Field(default=None, alias="liabilityVaults")
    skip_validation: bool = Field(default=False, alias="skipValidation")

    @property
    def entities(self) -> List[str]:
        return as_list(self.entity)


class CozyIntegration(LabelRecord):
    """Cozy safety module wiring for a vault."""

    safety_module: Any = Field(default=None, alias="safetyModule")


class Opportunity(LabelRecord):
    """Per-vault integration metadata."""

    cozy: CozyIntegration | None = None


__all__ = [
    "CozyIntegration",
    "Entity",
    "LabelRecord",
    "Opportunity",
    "Point",
    "Product",
    "Vault",
    "as_list",
]
