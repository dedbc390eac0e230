"""Exception types and violation records shared by the loader, validator and fixer."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:  # pragma: no cover
    from vault_labels.validation.report import ValidationReport


class ViolationKind(str, Enum):
    """Categories of integrity problems reported by the validator."""

    DOCUMENT_MISSING = "DocumentMissing"
    MALFORMED_JSON = "MalformedJSON"
    MALFORMED_DOCUMENT = "MalformedDocument"
    INVALID_SLUG = "InvalidSlug"
    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    FIELD_TOO_LONG = "FieldTooLong"
    MALFORMED_ADDRESS = "MalformedAddress"
    UNKNOWN_REFERENCE = "UnknownReference"
    DUPLICATE_ADDRESS = "DuplicateAddress"
    ORPHAN_VAULT = "OrphanVault"
    VAULT_IN_MULTIPLE_PRODUCTS = "VaultInMultipleProducts"
    CONFLICTING_VAULT_STATUS = "ConflictingVaultStatus"
    LOGO_NOT_FOUND = "LogoNotFound"
    LOGO_FORMAT_INVALID = "LogoFormatInvalid"
    INVALID_URL = "InvalidURL"


class Violation(BaseModel):
    """A single integrity problem, located precisely enough to fix by hand.

    Attributes:
        kind: Rule category that failed.
        document: Document name (``entities``, ``vaults``, ..., or ``logo``).
        message: Human readable description, e.g. ``products: unknown vault: 0x..``.
        chain_id: Chain directory the document belongs to; ``None`` for logos.
        record: Slug, address, point name or logo filename of the offending record.
        field: Field inside the record, when the problem is field-level.
        value: Offending value.
    """

    model_config = ConfigDict(frozen=True)

    kind: ViolationKind
    document: str
    message: str
    chain_id: str | None = None
    record: str | None = None
    field: str | None = None
    value: Any = None

    def __str__(self) -> str:
        prefix = f"[{self.chain_id}] " if self.chain_id else ""
        return f"{prefix}{self.message}"


class LabelsError(RuntimeError):
    """Base class for fatal errors raised while processing a labels dataset."""


class DocumentMissing(LabelsError):
    """Raised when a required JSON document does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(f"document not found: {self.path}")


class MalformedJSON(LabelsError):
    """Raised when a document cannot be parsed as JSON."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = Path(path)
        self.detail = detail
        super().__init__(f"invalid JSON in {self.path}: {detail}")


class MalformedDocument(LabelsError):
    """Raised when a document parses but has the wrong top-level shape."""

    def __init__(self, document: str, detail: str) -> None:
        self.document = document
        self.detail = detail
        super().__init__(f"{document}: {detail}")


class InvalidAddress(LabelsError):
    """Raised when a value is not a syntactically valid account address."""

    def __init__(self, value: Any, context: str | None = None, detail: str | None = None) -> None:
        self.value = value
        self.context = context
        self.detail = detail
        where = f" in {context}" if context else ""
        reason = f": {detail}" if detail else ""
        super().__init__(f"Invalid address {value!r}{where}{reason}")


class FormatterError(LabelsError):
    """Raised when the external JSON formatter command fails."""


class ValidationFailed(LabelsError):
    """Raised by :meth:`ValidationReport.raise_for_violations`."""

    def __init__(self, report: "ValidationReport") -> None:
        self.report = report
        count = len(report.violations)
        first = report.violations[0] if report.violations else None
        summary = f"{count} violation(s)"
        if first is not None:
            summary = f"{summary}; first: {first}"
        super().__init__(summary)


__all__ = [
    "DocumentMissing",
    "FormatterError",
    "InvalidAddress",
    "LabelsError",
    "MalformedDocument",
    "MalformedJSON",
    "ValidationFailed",
    "Violation",
    "ViolationKind",
]
