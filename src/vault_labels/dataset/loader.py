"""Discover chain directories and load their JSON documents."""

from __future__ import annotations

import copy
import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List

from vault_labels.dataset.errors import DocumentMissing, MalformedDocument, MalformedJSON
from vault_labels.settings.config import CHAIN_DOCUMENTS

LOGGER = logging.getLogger(__name__)

CHAIN_DIR_RE = re.compile(r"^\d+$")


def discover_chains(root: Path) -> List[str]:
    """Return numeric chain directory names under ``root`` in ascending order."""

    root = Path(root)
    if not root.is_dir():
        raise DocumentMissing(root)
    chains = [entry.name for entry in root.iterdir() if entry.is_dir() and CHAIN_DIR_RE.match(entry.name)]
    return sorted(chains, key=int)


def load_document(path: Path) -> Any:
    """Parse a single JSON document.

    Raises:
        DocumentMissing: If ``path`` does not exist.
        MalformedJSON: If the file is not valid JSON.
    """

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DocumentMissing(path) from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedJSON(path, f"{exc.msg} (line {exc.lineno}, column {exc.colno})") from exc


@dataclass
class ChainDataset:
    """In-memory copy of every document for one chain.

    ``documents`` holds the raw parsed JSON keyed by document name, in the
    order the documents were loaded; the rewriter relies on that order.
    """

    chain_id: str
    path: Path
    documents: Dict[str, Any] = field(default_factory=dict)

    def _mapping(self, name: str) -> Dict[str, Any]:
        value = self.documents.get(name)
        if not isinstance(value, dict):
            raise MalformedDocument(name, f"expected a JSON object, got {type(value).__name__}")
        return value

    @property
    def entities(self) -> Dict[str, Any]:
        return self._mapping("entities")

    @property
    def vaults(self) -> Dict[str, Any]:
        return self._mapping("vaults")

    @property
    def products(self) -> Dict[str, Any]:
        return self._mapping("products")

    @property
    def opportunities(self) -> Dict[str, Any]:
        return self._mapping("opportunities")

    @property
    def points(self) -> List[Any]:
        value = self.documents.get("points")
        if not isinstance(value, list):
            raise MalformedDocument("points", f"expected a JSON array, got {type(value).__name__}")
        return value

    def document_path(self, name: str) -> Path:
        return self.path / f"{name}.json"

    def copy(self) -> "ChainDataset":
        """Deep copy, so the fixer can mutate without touching the original."""

        return ChainDataset(chain_id=self.chain_id, path=self.path, documents=copy.deepcopy(self.documents))


def load_chain(root: Path, chain_id: str, documents: Iterable[str] = CHAIN_DOCUMENTS) -> ChainDataset:
    """Load every named document for ``chain_id`` under ``root``."""

    chain_path = Path(root) / str(chain_id)
    loaded: Dict[str, Any] = {}
    for name in documents:
        loaded[name] = load_document(chain_path / f"{name}.json")
    LOGGER.debug("Loaded chain %s (%s documents) from %s", chain_id, len(loaded), chain_path)
    return ChainDataset(chain_id=str(chain_id), path=chain_path, documents=loaded)


__all__ = ["CHAIN_DIR_RE", "ChainDataset", "discover_chains", "load_chain", "load_document"]
