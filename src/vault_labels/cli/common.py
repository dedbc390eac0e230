"""Argument and logging plumbing shared by the labels commands."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List

from vault_labels.dataset.loader import discover_chains
from vault_labels.settings import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        help="Dataset root holding the numeric chain directories (defaults to the working directory)",
        default=None,
    )
    parser.add_argument(
        "--chain",
        action="append",
        dest="chains",
        help="Only process this chain id (repeatable)",
        default=None,
    )
    parser.add_argument("--env", help="Settings environment name", default=None)
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")


def resolve_settings(args: argparse.Namespace) -> Settings:
    """Return settings with CLI overrides applied."""

    settings = get_settings(args.env)
    if args.root:
        settings = settings.with_data_root(args.root)
    logo_dir = getattr(args, "logo_dir", None)
    if logo_dir:
        data = settings.data.model_copy(update={"logo_dir": Path(logo_dir).expanduser().resolve()})
        settings = settings.model_copy(update={"data": data})
    return settings


def resolve_chains(args: argparse.Namespace, settings: Settings) -> List[str]:
    if args.chains:
        return [str(chain) for chain in args.chains]
    return discover_chains(settings.data_root)


__all__ = ["LOG_FORMAT", "add_common_arguments", "configure_logging", "resolve_chains", "resolve_settings"]
