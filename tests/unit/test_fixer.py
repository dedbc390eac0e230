"""Unit tests for checksum normalization of chain documents."""

from __future__ import annotations

import pytest

from conftest import CHAIN_ID, ENTITY_ADDR, TOKEN_ADDR, VAULT_A, VAULT_B, write_chain
from vault_labels.dataset.errors import InvalidAddress, MalformedDocument
from vault_labels.dataset.loader import load_chain
from vault_labels.normalization import fix_chain


def test_clean_dataset_has_no_changes(dataset):
    result = fix_chain(dataset)

    assert not result.changed
    assert result.dataset.documents == dataset.documents


def test_lowercase_entity_address_is_checksummed(dataset_root, documents):
    documents["entities"]["euler-dao"]["addresses"] = {ENTITY_ADDR.lower(): "Treasury"}
    write_chain(dataset_root, CHAIN_ID, documents)

    result = fix_chain(load_chain(dataset_root, CHAIN_ID))

    assert result.changes == [f"Fixing entities.euler-dao: {ENTITY_ADDR.lower()} -> {ENTITY_ADDR}"]
    assert list(result.dataset.entities["euler-dao"]["addresses"]) == [ENTITY_ADDR]


def test_every_address_field_is_fixed(dataset_root, documents):
    documents["vaults"] = {VAULT_A.lower(): documents["vaults"][VAULT_A], VAULT_B: documents["vaults"][VAULT_B]}
    documents["products"]["acme-prime"]["vaults"] = [VAULT_A.lower()]
    documents["products"]["acme-prime"]["deprecatedVaults"] = [VAULT_B.lower()]
    documents["points"][0]["token"] = TOKEN_ADDR.lower()
    documents["points"][0]["liabilityVaults"] = [VAULT_B.lower()]
    documents["opportunities"] = {VAULT_A.lower(): {"cozy": {"safetyModule": TOKEN_ADDR.lower()}}}
    write_chain(dataset_root, CHAIN_ID, documents)

    result = fix_chain(load_chain(dataset_root, CHAIN_ID))
    fixed = result.dataset

    assert len(result.changes) == 7
    assert list(fixed.vaults) == [VAULT_A, VAULT_B]
    assert fixed.products["acme-prime"]["vaults"] == [VAULT_A]
    assert fixed.products["acme-prime"]["deprecatedVaults"] == [VAULT_B]
    assert fixed.points[0]["token"] == TOKEN_ADDR
    assert fixed.points[0]["liabilityVaults"] == [VAULT_B]
    assert fixed.opportunities == {VAULT_A: {"cozy": {"safetyModule": TOKEN_ADDR}}}


def test_fix_does_not_mutate_input(dataset_root, documents):
    documents["products"]["acme-prime"]["vaults"] = [VAULT_A.lower()]
    write_chain(dataset_root, CHAIN_ID, documents)
    dataset = load_chain(dataset_root, CHAIN_ID)

    fix_chain(dataset)

    assert dataset.products["acme-prime"]["vaults"] == [VAULT_A.lower()]


def test_skip_validation_points_keep_vault_lists_but_fix_token(dataset_root, documents):
    documents["points"][1]["token"] = TOKEN_ADDR.lower()
    write_chain(dataset_root, CHAIN_ID, documents)

    result = fix_chain(load_chain(dataset_root, CHAIN_ID))

    assert result.dataset.points[1]["token"] == TOKEN_ADDR
    assert result.dataset.points[1]["collateralVaults"] == ["bc1-not-evm"]
    assert result.changes == [f"Fixing token address in points.Offchain Campaign: {TOKEN_ADDR.lower()} -> {TOKEN_ADDR}"]


def test_invalid_address_is_fatal(dataset_root, documents):
    documents["products"]["acme-prime"]["vaults"] = ["0xnot-an-address"]
    write_chain(dataset_root, CHAIN_ID, documents)

    with pytest.raises(InvalidAddress) as excinfo:
        fix_chain(load_chain(dataset_root, CHAIN_ID))
    assert excinfo.value.context == "vault address in products.acme-prime"


def test_keys_collapsing_to_same_address_are_rejected(dataset_root, documents):
    documents["opportunities"] = {VAULT_A: {}, VAULT_A.lower(): {}}
    write_chain(dataset_root, CHAIN_ID, documents)

    with pytest.raises(MalformedDocument):
        fix_chain(load_chain(dataset_root, CHAIN_ID))


def test_key_order_is_preserved(dataset_root, documents):
    documents["vaults"] = {VAULT_B.lower(): documents["vaults"][VAULT_B], VAULT_A: documents["vaults"][VAULT_A]}
    write_chain(dataset_root, CHAIN_ID, documents)

    result = fix_chain(load_chain(dataset_root, CHAIN_ID))

    assert list(result.dataset.vaults) == [VAULT_B, VAULT_A]
