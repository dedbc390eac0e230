"""Rewrite address-shaped values into their EIP-55 checksum form.

The fixer works on a deep copy of a :class:`ChainDataset` and touches only
address-shaped values: entity address keys, vault keys, product vault lists,
point token and vault lists, opportunity keys and the cozy safety module.
Everything else, including key order, is preserved so the rewrite diff stays
limited to casing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from vault_labels.dataset.addresses import checksum_address
from vault_labels.dataset.errors import MalformedDocument
from vault_labels.dataset.loader import ChainDataset

LOGGER = logging.getLogger(__name__)

POINT_VAULT_FIELDS = ("collateralVaults", "liabilityVaults")


@dataclass
class FixResult:
    """Outcome of fixing one chain.

    Attributes:
        dataset: Copy of the input with every address checksummed.
        changes: One ``Fixing <context>: <old> -> <new>`` line per replacement.
    """

    dataset: ChainDataset
    changes: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.changes)


class AddressFixer:
    """Checksum values while recording a change log."""

    def __init__(self) -> None:
        self.changes: List[str] = []

    def fix(self, value: Any, context: str) -> str:
        fixed = checksum_address(value, context=context)
        if fixed != value:
            message = f"Fixing {context}: {value} -> {fixed}"
            LOGGER.debug(message)
            self.changes.append(message)
        return fixed

    def fix_keys(self, mapping: Dict[str, Any], context: str, *, document: str) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for key, value in mapping.items():
            fixed = self.fix(key, context)
            if fixed in result:
                raise MalformedDocument(document, f"{context} lists {fixed} more than once (differing only by case)")
            result[fixed] = value
        return result

    def fix_list(self, values: List[Any], context: str) -> List[str]:
        return [self.fix(value, context) for value in values]


def fix_chain(dataset: ChainDataset) -> FixResult:
    """Checksum every address in ``dataset`` and return the fixed copy.

    Raises:
        InvalidAddress: If a value is not an address at all.
        MalformedDocument: If a document has the wrong shape, or two keys
            collapse into the same address once checksummed.
    """

    fixed = dataset.copy()
    fixer = AddressFixer()

    for entity_id, entity in fixed.entities.items():
        if isinstance(entity, dict) and isinstance(entity.get("addresses"), dict):
            entity["addresses"] = fixer.fix_keys(
                entity["addresses"], f"entities.{entity_id}", document="entities"
            )

    fixed.documents["vaults"] = fixer.fix_keys(fixed.vaults, "vault", document="vaults")

    for product_id, product in fixed.products.items():
        if not isinstance(product, dict):
            continue
        if isinstance(product.get("vaults"), list):
            product["vaults"] = fixer.fix_list(product["vaults"], f"vault address in products.{product_id}")
        if isinstance(product.get("deprecatedVaults"), list):
            product["deprecatedVaults"] = fixer.fix_list(
                product["deprecatedVaults"], f"deprecated vault address in products.{product_id}"
            )

    for point in fixed.points:
        if not isinstance(point, dict):
            continue
        name = point.get("name")
        if point.get("token"):
            point["token"] = fixer.fix(point["token"], f"token address in points.{name}")
        # skipValidation vault lists may hold non-EVM identifiers
        if point.get("skipValidation"):
            continue
        for field_name in POINT_VAULT_FIELDS:
            if isinstance(point.get(field_name), list):
                point[field_name] = fixer.fix_list(point[field_name], f"{field_name} address in points.{name}")

    opportunities = fixer.fix_keys(fixed.opportunities, "opportunities", document="opportunities")
    for vault_id, opportunity in opportunities.items():
        cozy = opportunity.get("cozy") if isinstance(opportunity, dict) else None
        if isinstance(cozy, dict) and cozy.get("safetyModule"):
            cozy["safetyModule"] = fixer.fix(cozy["safetyModule"], f"cozy.safetyModule in opportunities.{vault_id}")
    fixed.documents["opportunities"] = opportunities

    return FixResult(dataset=fixed, changes=fixer.changes)


__all__ = ["AddressFixer", "FixResult", "fix_chain"]
