"""Address checksum normalization and document rewriting."""

from .fixer import AddressFixer, FixResult, fix_chain
from .writer import DocumentWriter, dump_document

__all__ = ["AddressFixer", "DocumentWriter", "FixResult", "dump_document", "fix_chain"]
