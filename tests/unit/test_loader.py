"""Unit tests for chain discovery and document loading."""

from __future__ import annotations

import pytest

from conftest import CHAIN_ID, VAULT_A
from vault_labels.dataset.errors import DocumentMissing, MalformedDocument, MalformedJSON
from vault_labels.dataset.loader import ChainDataset, discover_chains, load_chain, load_document


def test_discover_chains_sorts_numerically_and_ignores_other_dirs(tmp_path):
    for name in ("8453", "1", "42161", "logo", "node_modules"):
        (tmp_path / name).mkdir()
    (tmp_path / "10").write_text("not a directory")

    assert discover_chains(tmp_path) == ["1", "8453", "42161"]


def test_discover_chains_missing_root(tmp_path):
    with pytest.raises(DocumentMissing):
        discover_chains(tmp_path / "absent")


def test_load_chain_reads_all_documents_in_order(dataset_root):
    dataset = load_chain(dataset_root, CHAIN_ID)

    assert list(dataset.documents) == ["entities", "vaults", "products", "points", "opportunities"]
    assert VAULT_A in dataset.vaults
    assert dataset.points[0]["name"] == "Acme Points"
    assert dataset.document_path("vaults") == dataset_root / CHAIN_ID / "vaults.json"


def test_load_chain_missing_document(dataset_root):
    (dataset_root / CHAIN_ID / "opportunities.json").unlink()

    with pytest.raises(DocumentMissing) as excinfo:
        load_chain(dataset_root, CHAIN_ID)
    assert excinfo.value.path.name == "opportunities.json"


def test_load_document_malformed_json(tmp_path):
    path = tmp_path / "products.json"
    path.write_text('{"a": 1,}')

    with pytest.raises(MalformedJSON) as excinfo:
        load_document(path)
    assert "line 1" in str(excinfo.value)


def test_typed_accessors_reject_wrong_shape(tmp_path):
    dataset = ChainDataset(chain_id="1", path=tmp_path, documents={"vaults": [], "points": {}})

    with pytest.raises(MalformedDocument):
        dataset.vaults
    with pytest.raises(MalformedDocument):
        dataset.points


def test_copy_is_deep(dataset):
    clone = dataset.copy()
    clone.vaults[VAULT_A]["name"] = "changed"

    assert dataset.vaults[VAULT_A]["name"] == "Acme USDC"
