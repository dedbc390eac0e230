"""Integrity checklist for the label documents.

Rule groups run in a fixed order (logos, entities, vaults, products, points,
opportunities). Every group records its findings in a
:class:`~vault_labels.validation.report.ValidationReport` instead of stopping at
the first problem, so one pass over a chain reports everything that is wrong.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, Mapping, Set, Type, TypeVar

from pydantic import ValidationError

from vault_labels.dataset.addresses import address_key, is_checksum_address
from vault_labels.dataset.errors import MalformedDocument, ViolationKind
from vault_labels.dataset.loader import ChainDataset
from vault_labels.dataset.logos import LogoRegistry
from vault_labels.dataset.schema import Entity, LabelRecord, Opportunity, Point, Product, Vault
from vault_labels.settings import Settings, get_settings
from vault_labels.validation.report import ValidationReport

LOGGER = logging.getLogger(__name__)

SLUG_RE = re.compile(r"^[a-z0-9-]+$")
URL_RE = re.compile(r"^(https?://)?([a-zA-Z0-9-]+\.)+[a-zA-Z]{2,63}(/[^\s]*)?$")

RecordT = TypeVar("RecordT", bound=LabelRecord)


def valid_slug(slug: Any) -> bool:
    return isinstance(slug, str) and bool(SLUG_RE.match(slug))


def valid_url(url: Any) -> bool:
    return isinstance(url, str) and bool(URL_RE.match(url))


def validate_logos(registry: LogoRegistry, settings: Settings | None = None) -> ValidationReport:
    """Check every logo file is square and SVG (or on the legacy raster allowlist)."""

    settings = settings or get_settings()
    allowlist = set(settings.validation.legacy_raster_logos)
    report = ValidationReport()
    for info in registry:
        if info.error:
            report.add(
                ViolationKind.LOGO_FORMAT_INVALID,
                "logo",
                f"logo file {info.name} could not be read: {info.error}",
                record=info.name,
            )
            continue
        if not info.is_svg and info.name not in allowlist:
            report.add(
                ViolationKind.LOGO_FORMAT_INVALID,
                "logo",
                f"logo file {info.name} is not SVG",
                record=info.name,
                field="format",
                value=info.format,
            )
        if not info.is_square:
            report.add(
                ViolationKind.LOGO_FORMAT_INVALID,
                "logo",
                f"logo dimensions not square: {info.name} ({info.height} x {info.width})",
                record=info.name,
                field="dimensions",
                value=(info.width, info.height),
            )
    return report


class ChainValidator:
    """Run the per-chain rule groups against one :class:`ChainDataset`."""

    def __init__(self, dataset: ChainDataset, logos: LogoRegistry, settings: Settings) -> None:
        self.dataset = dataset
        self.logos = logos
        self.settings = settings
        self.report = ValidationReport()
        self._entity_ids: Set[str] = set()
        self._vault_ids: Dict[str, None] = {}

    def run(self) -> ValidationReport:
        self.check_entities()
        self.check_vaults()
        self.check_products()
        self.check_points()
        self.check_opportunities()
        LOGGER.debug("Chain %s: %s violation(s)", self.dataset.chain_id, len(self.report))
        return self.report

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _add(self, kind: ViolationKind, document: str, message: str, **fields: Any) -> None:
        self.report.add(kind, document, message, chain_id=self.dataset.chain_id, **fields)

    def _document(self, name: str) -> Any:
        try:
            return getattr(self.dataset, name)
        except MalformedDocument as exc:
            self._add(ViolationKind.MALFORMED_DOCUMENT, name, str(exc))
            return [] if name == "points" else {}

    def _parse(self, document: str, record: str, raw: Any, model: Type[RecordT]) -> RecordT | None:
        if not isinstance(raw, dict):
            self._add(
                ViolationKind.MALFORMED_DOCUMENT,
                document,
                f"{document}: record {record} is not an object",
                record=record,
                value=raw,
            )
            return None
        try:
            return model.model_validate(raw)
        except ValidationError as exc:
            fields = sorted({".".join(str(part) for part in error["loc"]) for error in exc.errors()})
            self._add(
                ViolationKind.MALFORMED_DOCUMENT,
                document,
                f"{document}: record {record} has invalid field(s): {', '.join(fields)}",
                record=record,
            )
            return None

    def _check_address(self, document: str, record: str, field: str | None, value: Any, label: str) -> bool:
        if is_checksum_address(value):
            return True
        self._add(
            ViolationKind.MALFORMED_ADDRESS,
            document,
            f"{document}: malformed {label}: {value}",
            record=record,
            field=field,
            value=value,
        )
        return False

    def _check_logo(self, document: str, record: str, logo: str | None) -> None:
        if logo and logo not in self.logos:
            self._add(
                ViolationKind.LOGO_NOT_FOUND,
                document,
                f"{document}: logo not found: {logo} (in {record})",
                record=record,
                field="logo",
                value=logo,
            )

    def _check_entity_refs(self, document: str, record: str, slugs: Iterable[str]) -> None:
        for slug in slugs:
            if slug not in self._entity_ids:
                self._add(
                    ViolationKind.UNKNOWN_REFERENCE,
                    document,
                    f"{document}: no such entity {slug} (in {record})",
                    record=record,
                    field="entity",
                    value=slug,
                )

    def _require(self, document: str, record: str, field: str, value: Any) -> bool:
        if value:
            return True
        self._add(
            ViolationKind.MISSING_REQUIRED_FIELD,
            document,
            f"{document}: missing {field}: {record}",
            record=record,
            field=field,
        )
        return False

    # ------------------------------------------------------------------
    # rule groups
    # ------------------------------------------------------------------

    def check_entities(self) -> None:
        entities: Mapping[str, Any] = self._document("entities")
        self._entity_ids = set(entities)
        reserved = self.settings.validation.reserved_entity
        owners: Dict[str, str] = {}

        for slug, raw in entities.items():
            if not valid_slug(slug):
                self._add(ViolationKind.INVALID_SLUG, "entities", f"entities: invalid slug: {slug}", record=slug)
            entity = self._parse("entities", slug, raw, Entity)
            if entity is None:
                continue
            self._require("entities", slug, "name", entity.name)

            for addr in entity.addresses or {}:
                self._check_address("entities", slug, "addresses", addr, "address")
                key = address_key(addr)
                owner = owners.get(key)
                if owner is None or owner == reserved:
                    owners[key] = slug
                elif slug != reserved and owner != slug:
                    self._add(
                        ViolationKind.DUPLICATE_ADDRESS,
                        "entities",
                        f"entities: duplicate address {addr} in {owner} and {slug}",
                        record=slug,
                        field="addresses",
                        value=addr,
                    )

            self._check_logo("entities", slug, entity.logo)

    def check_vaults(self) -> None:
        vaults: Mapping[str, Any] = self._document("vaults")
        self._vault_ids = dict.fromkeys(vaults)
        max_name = self.settings.validation.max_vault_name_length
        require_description = self.settings.validation.require_vault_description

        for vault_id, raw in vaults.items():
            self._check_address("vaults", vault_id, None, vault_id, "vaultId")
            vault = self._parse("vaults", vault_id, raw, Vault)
            if vault is None:
                continue
            if self._require("vaults", vault_id, "name", vault.name) and max_name and len(vault.name) > max_name:
                self._add(
                    ViolationKind.FIELD_TOO_LONG,
                    "vaults",
                    f"vaults: name is too long: {vault.name}",
                    record=vault_id,
                    field="name",
                    value=vault.name,
                )
            if require_description:
                self._require("vaults", vault_id, "description", vault.description)
            if self._require("vaults", vault_id, "entity", vault.entity):
                self._check_entity_refs("vaults", vault_id, vault.entities)

    def check_products(self) -> None:
        products: Mapping[str, Any] = self._document("products")
        active_owner: Dict[str, str] = {}
        listed: Set[str] = set()

        for slug, raw in products.items():
            if not valid_slug(slug):
                self._add(ViolationKind.INVALID_SLUG, "products", f"products: invalid slug: {slug}", record=slug)
            product = self._parse("products", slug, raw, Product)
            if product is None:
                continue
            self._require("products", slug, "name", product.name)
            if self._require("products", slug, "entity", product.entity):
                self._check_entity_refs("products", slug, product.entities)

            if product.vaults is None:
                self._require("products", slug, "vaults", None)
            active = self._check_product_vaults(slug, "vaults", product.vaults or [])
            deprecated = self._check_product_vaults(slug, "deprecatedVaults", product.deprecated_vaults)

            for addr in active:
                owner = active_owner.setdefault(addr, slug)
                if owner != slug:
                    self._add(
                        ViolationKind.VAULT_IN_MULTIPLE_PRODUCTS,
                        "products",
                        f"products: vault {addr} listed in both {owner} and {slug}",
                        record=slug,
                        field="vaults",
                        value=addr,
                    )
            for addr in sorted(set(active) & set(deprecated)):
                self._add(
                    ViolationKind.CONFLICTING_VAULT_STATUS,
                    "products",
                    f"products: vault {addr} is both active and deprecated in {slug}",
                    record=slug,
                    field="deprecatedVaults",
                    value=addr,
                )
            listed.update(active)
            listed.update(deprecated)

            self._check_logo("products", slug, product.logo)

        for vault_id in self._vault_ids:
            if vault_id not in listed:
                self._add(
                    ViolationKind.ORPHAN_VAULT,
                    "products",
                    f"products: vault {vault_id} is not listed in any product",
                    record=vault_id,
                    value=vault_id,
                )

    def _check_product_vaults(self, slug: str, field: str, addresses: Iterable[Any]) -> list[str]:
        """Validate one address list of a product and return its string members."""

        members: list[str] = []
        for addr in addresses:
            if not isinstance(addr, str):
                self._check_address("products", slug, field, addr, "vault address")
                continue
            if addr in members:
                self._add(
                    ViolationKind.VAULT_IN_MULTIPLE_PRODUCTS,
                    "products",
                    f"products: vault {addr} listed more than once in {field} of {slug}",
                    record=slug,
                    field=field,
                    value=addr,
                )
                continue
            members.append(addr)
            self._check_address("products", slug, field, addr, "vault address")
            if addr not in self._vault_ids:
                self._add(
                    ViolationKind.UNKNOWN_REFERENCE,
                    "products",
                    f"products: unknown vault: {addr} (in {slug})",
                    record=slug,
                    field=field,
                    value=addr,
                )
        return members

    def check_points(self) -> None:
        points: list = self._document("points")

        for index, raw in enumerate(points):
            label = raw.get("name") if isinstance(raw, dict) and isinstance(raw.get("name"), str) else f"#{index}"
            point = self._parse("points", label, raw, Point)
            if point is None:
                continue
            if point.token:
                self._check_address("points", label, "token", point.token, "token")
            if not point.name:
                self._add(
                    ViolationKind.MISSING_REQUIRED_FIELD,
                    "points",
                    f"points: missing name at index {index}",
                    record=label,
                    field="name",
                )
            if point.url and not valid_url(point.url):
                self._add(
                    ViolationKind.INVALID_URL,
                    "points",
                    f"points: invalid url for {label}: {point.url}",
                    record=label,
                    field="url",
                    value=point.url,
                )
            self._check_logo("points", label, point.logo)
            self._check_entity_refs("points", label, point.entities)

            if point.skip_validation:
                continue
            if not point.collateral_vaults and not point.liability_vaults:
                self._add(
                    ViolationKind.MISSING_REQUIRED_FIELD,
                    "points",
                    f"points: missing collateral or liability vaults for {label}",
                    record=label,
                    field="collateralVaults",
                )
            for field, addresses in (
                ("collateralVaults", point.collateral_vaults or []),
                ("liabilityVaults", point.liability_vaults or []),
            ):
                for addr in addresses:
                    self._check_address("points", label, field, addr, "vault address")

    def check_opportunities(self) -> None:
        opportunities: Mapping[str, Any] = self._document("opportunities")

        for vault_id, raw in opportunities.items():
            if self._check_address("opportunities", vault_id, None, vault_id, "vault address") and (
                vault_id not in self._vault_ids
            ):
                self._add(
                    ViolationKind.UNKNOWN_REFERENCE,
                    "opportunities",
                    f"opportunities: unknown vault: {vault_id}",
                    record=vault_id,
                    value=vault_id,
                )
            opportunity = self._parse("opportunities", vault_id, raw, Opportunity)
            if opportunity is None or opportunity.cozy is None:
                continue
            safety_module = opportunity.cozy.safety_module
            if not safety_module:
                self._add(
                    ViolationKind.MISSING_REQUIRED_FIELD,
                    "opportunities",
                    f"opportunities: missing cozy.safetyModule: {vault_id}",
                    record=vault_id,
                    field="cozy.safetyModule",
                )
                continue
            self._check_address("opportunities", vault_id, "cozy.safetyModule", safety_module, "cozy.safetyModule")


def validate_chain(
    dataset: ChainDataset,
    logos: LogoRegistry,
    settings: Settings | None = None,
) -> ValidationReport:
    """Run every per-chain rule group and return the collected violations."""

    return ChainValidator(dataset, logos, settings or get_settings()).run()


__all__ = ["ChainValidator", "validate_chain", "validate_logos", "valid_slug", "valid_url"]
