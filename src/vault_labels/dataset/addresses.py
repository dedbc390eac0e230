"""EIP-55 address helpers backed by web3."""

from __future__ import annotations

from typing import Any

from web3 import Web3

from vault_labels.dataset.errors import InvalidAddress


def checksum_address(value: Any, *, context: str | None = None) -> str:
    """Return the EIP-55 checksummed form of ``value``.

    Args:
        value: Address-shaped string, any casing, with or without ``0x``.
        context: Optional location used in the error message.

    Raises:
        InvalidAddress: If ``value`` is not a 20-byte hex address at all.
    """

    if not isinstance(value, str):
        raise InvalidAddress(value, context, "expected a string")
    try:
        return Web3.to_checksum_address(value)
    except (ValueError, TypeError) as exc:
        raise InvalidAddress(value, context, str(exc)) from exc


def is_checksum_address(value: Any) -> bool:
    """Return True when ``value`` is already in canonical checksum form."""

    try:
        return checksum_address(value) == value
    except InvalidAddress:
        return False


def address_key(value: str) -> str:
    """Case-insensitive identity used for uniqueness checks."""

    return value.lower()


__all__ = ["address_key", "checksum_address", "is_checksum_address"]
