"""Integrity checklist for label datasets."""

from .report import ValidationReport
from .validator import ChainValidator, validate_chain, validate_logos

__all__ = ["ChainValidator", "ValidationReport", "validate_chain", "validate_logos"]
