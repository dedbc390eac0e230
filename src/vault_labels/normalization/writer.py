"""Persist fixed chain documents as deterministic, pretty-printed JSON."""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any, Iterable, List

from vault_labels.dataset.errors import FormatterError
from vault_labels.dataset.loader import ChainDataset
from vault_labels.observability import Observability, get_observability
from vault_labels.settings import Settings, get_settings

LOGGER = logging.getLogger(__name__)


def dump_document(data: Any, indent: int | str = "\t") -> str:
    """Serialize ``data`` in encounter key order with a trailing newline."""

    return json.dumps(data, indent=indent, ensure_ascii=False) + "\n"


class DocumentWriter:
    """Write every document of a chain and optionally hand them to a formatter."""

    def __init__(self, settings: Settings | None = None, observability: Observability | None = None) -> None:
        self.settings = settings or get_settings()
        self.observability = observability or get_observability(component="writer", settings=self.settings)

    def write_chain(self, dataset: ChainDataset, *, dry_run: bool = False) -> List[Path]:
        """Overwrite each document file of ``dataset``; returns the paths written."""

        indent = self.settings.formatter.indent
        written: List[Path] = []
        for name, data in dataset.documents.items():
            path = dataset.document_path(name)
            content = dump_document(data, indent)
            if dry_run:
                LOGGER.info("Dry run enabled; would update %s", path)
                continue
            path.write_text(content, encoding="utf-8")
            written.append(path)
            self.observability.emit_event(
                "document_written",
                chain_id=dataset.chain_id,
                document=name,
                path=str(path),
            )
        if written and self.settings.formatter.command:
            self.run_formatter(written)
        return written

    def run_formatter(self, paths: Iterable[Path]) -> None:
        cmd = [*self.settings.formatter.command, *(str(path) for path in paths)]
        LOGGER.info("Executing: %s", " ".join(cmd))
        try:
            subprocess.run(cmd, check=True, capture_output=True, text=True)
        except FileNotFoundError as exc:
            raise FormatterError(f"Formatter command not found: {cmd[0]}") from exc
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or exc.stdout or "").strip()
            raise FormatterError(f"Command failed ({' '.join(cmd)}): {stderr}") from exc


__all__ = ["DocumentWriter", "dump_document"]
