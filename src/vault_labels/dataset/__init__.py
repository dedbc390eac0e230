"""Loading and typed access for the per-chain label documents."""

from .errors import (
    DocumentMissing,
    FormatterError,
    InvalidAddress,
    LabelsError,
    MalformedDocument,
    MalformedJSON,
    ValidationFailed,
    Violation,
    ViolationKind,
)
from .loader import ChainDataset, discover_chains, load_chain, load_document
from .logos import LogoInfo, LogoRegistry

__all__ = [
    "ChainDataset",
    "DocumentMissing",
    "FormatterError",
    "InvalidAddress",
    "LabelsError",
    "LogoInfo",
    "LogoRegistry",
    "MalformedDocument",
    "MalformedJSON",
    "ValidationFailed",
    "Violation",
    "ViolationKind",
    "discover_chains",
    "load_chain",
    "load_document",
]
