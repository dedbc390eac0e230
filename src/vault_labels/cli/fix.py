"""``labels-fix``: rewrite addresses into EIP-55 checksum form in place."""

from __future__ import annotations

import argparse
import logging
import sys

from vault_labels.cli.common import add_common_arguments, configure_logging, resolve_chains, resolve_settings
from vault_labels.dataset.errors import LabelsError
from vault_labels.dataset.loader import load_chain
from vault_labels.normalization import DocumentWriter, fix_chain
from vault_labels.observability import get_observability

LOGGER = logging.getLogger("vault_labels.cli.fix")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Return CLI arguments for the fix command."""

    parser = argparse.ArgumentParser(
        description="Normalize address casing (EIP-55) across label documents",
    )
    add_common_arguments(parser)
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report the addresses that would change without writing files",
    )
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Continue with the remaining chains after an error and exit 1 at the end",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point for ``labels-fix``."""

    args = parse_args(argv)
    settings = resolve_settings(args)
    configure_logging("DEBUG" if args.verbose else settings.log_level)
    observability = get_observability(component="fix", settings=settings)
    writer = DocumentWriter(settings=settings, observability=observability)

    try:
        chains = resolve_chains(args, settings)
    except LabelsError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    failures: list[str] = []
    for chain_id in chains:
        LOGGER.info("Processing chain %s", chain_id)
        try:
            dataset = load_chain(settings.data_root, chain_id, settings.data.documents)
            result = fix_chain(dataset)
            if result.changed:
                for line in result.changes:
                    print(line)
                LOGGER.info("Found %s addresses to fix in chain %s", len(result.changes), chain_id)
                written = writer.write_chain(result.dataset, dry_run=args.dry_run)
                for path in written:
                    print(f"- Updated {path.name}")
            else:
                LOGGER.info("No malformed addresses found in chain %s", chain_id)
        except LabelsError as exc:
            print(f"Error processing chain {chain_id}: {exc}", file=sys.stderr)
            failures.append(chain_id)
            if not args.keep_going:
                return 1
            continue
        observability.emit_event(
            "chain_fixed",
            chain_id=chain_id,
            changes=len(result.changes),
            dry_run=args.dry_run,
        )

    if failures:
        LOGGER.error("Address fixing failed for chain(s): %s", ", ".join(failures))
        return 1

    print("Address fixing complete!")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
