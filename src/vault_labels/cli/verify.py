"""``labels-verify``: integrity gate for the labels dataset.

Exits 0 and prints ``OK`` when every chain passes; otherwise prints each
violation to stderr and exits 1.
"""

from __future__ import annotations

import argparse
import logging
import sys

from vault_labels.cli.common import add_common_arguments, configure_logging, resolve_chains, resolve_settings
from vault_labels.dataset.errors import LabelsError
from vault_labels.dataset.loader import load_chain
from vault_labels.dataset.logos import LogoRegistry
from vault_labels.observability import get_observability
from vault_labels.validation import ValidationReport, validate_chain, validate_logos

LOGGER = logging.getLogger("vault_labels.cli.verify")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Return CLI arguments for the verify command.

    Args:
        argv: Optional list of CLI arguments. When ``None``, defaults to ``sys.argv``.
    """

    parser = argparse.ArgumentParser(
        description="Check label documents for referential integrity and formatting problems",
    )
    add_common_arguments(parser)
    parser.add_argument("--logo-dir", help="Override the logo directory", default=None)
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop after the first chain that has violations",
    )
    return parser.parse_args(argv)


def _print_report(report: ValidationReport) -> None:
    for violation in report:
        print(str(violation), file=sys.stderr)
    counts = ", ".join(f"{kind}={count}" for kind, count in sorted(report.counts().items()))
    print(f"{len(report)} violation(s): {counts}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """Entry point for ``labels-verify``."""

    args = parse_args(argv)
    settings = resolve_settings(args)
    configure_logging("DEBUG" if args.verbose else settings.log_level)
    observability = get_observability(component="verify", settings=settings)

    logos = LogoRegistry.from_directory(settings.logo_dir)
    logo_report = validate_logos(logos, settings)
    if not logo_report.ok:
        observability.emit_event("logos_rejected", violations=len(logo_report))
        _print_report(logo_report)
        return 1

    try:
        chains = resolve_chains(args, settings)
    except LabelsError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    LOGGER.info("Verifying %s chain(s) under %s", len(chains), settings.data_root)
    total = ValidationReport()
    for chain_id in chains:
        try:
            dataset = load_chain(settings.data_root, chain_id, settings.data.documents)
        except LabelsError as exc:
            LOGGER.error("Unable to load chain %s", chain_id)
            print(f"[{chain_id}] {exc}", file=sys.stderr)
            return 1

        report = validate_chain(dataset, logos, settings)
        observability.emit_event(
            "chain_validated",
            chain_id=chain_id,
            violations=len(report),
            counts=report.counts(),
        )
        total.extend(report)
        if not report.ok and args.fail_fast:
            break

    if not total.ok:
        _print_report(total)
        return 1

    print("OK")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
