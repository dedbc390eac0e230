"""Shared fixtures: a small, fully valid labels dataset written to ``tmp_path``."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Dict

import pytest
from PIL import Image

from vault_labels.dataset.loader import load_chain
from vault_labels.dataset.logos import LogoRegistry
from vault_labels.settings.config import Settings, get_settings

# EIP-55 reference vectors.
VAULT_A = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
VAULT_B = "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359"
ENTITY_ADDR = "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB"
TOKEN_ADDR = "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb"

CHAIN_ID = "1"

SQUARE_SVG = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 64 64"><rect width="64" height="64"/></svg>'
SIZED_SVG = '<svg xmlns="http://www.w3.org/2000/svg" width="32" height="32"><circle r="8"/></svg>'


def sample_documents() -> Dict[str, Any]:
    return {
        "entities": {
            "euler-dao": {
                "name": "Euler DAO",
                "logo": "euler.svg",
                "addresses": {ENTITY_ADDR: "Treasury"},
            },
            "acme": {
                "name": "Acme Capital",
                "logo": "acme.svg",
                "addresses": {},
            },
        },
        "vaults": {
            VAULT_A: {
                "name": "Acme USDC",
                "description": "USDC lending vault curated by Acme.",
                "entity": "acme",
            },
            VAULT_B: {
                "name": "Acme WETH",
                "description": "Legacy WETH vault.",
                "entity": ["acme", "euler-dao"],
            },
        },
        "products": {
            "acme-prime": {
                "name": "Acme Prime",
                "logo": "acme.svg",
                "entity": "acme",
                "vaults": [VAULT_A],
                "deprecatedVaults": [VAULT_B],
            },
        },
        "points": [
            {
                "name": "Acme Points",
                "token": TOKEN_ADDR,
                "url": "https://acme.xyz/points",
                "logo": "acme.svg",
                "entity": "acme",
                "collateralVaults": [VAULT_A],
            },
            {
                "name": "Offchain Campaign",
                "skipValidation": True,
                "collateralVaults": ["bc1-not-evm"],
            },
        ],
        "opportunities": {
            VAULT_A: {"cozy": {"safetyModule": TOKEN_ADDR}},
        },
    }


def write_chain(root: Path, chain_id: str, documents: Dict[str, Any]) -> Path:
    chain_dir = root / chain_id
    chain_dir.mkdir(parents=True, exist_ok=True)
    for name, data in documents.items():
        (chain_dir / f"{name}.json").write_text(json.dumps(data, indent="\t") + "\n", encoding="utf-8")
    return chain_dir


def write_png(path: Path, size: tuple[int, int]) -> None:
    Image.new("RGBA", size, (255, 0, 0, 255)).save(path, format="PNG")


@pytest.fixture(autouse=True)
def _fresh_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def documents() -> Dict[str, Any]:
    return copy.deepcopy(sample_documents())


@pytest.fixture
def dataset_root(tmp_path: Path, documents: Dict[str, Any]) -> Path:
    root = tmp_path / "labels"
    logo_dir = root / "logo"
    logo_dir.mkdir(parents=True)
    (logo_dir / "euler.svg").write_text(SQUARE_SVG, encoding="utf-8")
    (logo_dir / "acme.svg").write_text(SIZED_SVG, encoding="utf-8")
    write_png(logo_dir / "re7labs.png", (16, 16))
    write_chain(root, CHAIN_ID, documents)
    return root


@pytest.fixture
def settings(dataset_root: Path) -> Settings:
    return Settings(data={"root": str(dataset_root)})


@pytest.fixture
def logos(settings: Settings) -> LogoRegistry:
    return LogoRegistry.from_directory(settings.logo_dir)


@pytest.fixture
def dataset(dataset_root: Path):
    return load_chain(dataset_root, CHAIN_ID)
