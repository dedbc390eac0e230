"""Run events for the labels commands, logged as JSON or plain lines."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from vault_labels.settings import Settings, get_settings

_LOGGER = logging.getLogger("vault_labels.observability")


class Observability:
    """Log one event per processed chain or written document.

    ``chain_validated``, ``chain_fixed``, ``logos_rejected`` and
    ``document_written`` are the events the commands emit. With
    ``observability.structured_logging`` enabled each event is a single JSON
    object, which keeps CI logs greppable per chain.
    """

    def __init__(
        self,
        *,
        settings: Settings,
        component: str | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.component = component or "labels"
        self._logger = logger or _LOGGER
        self._structured_logging = bool(settings.observability.structured_logging)
        self._service_name = settings.observability.service_name

    def emit_event(self, event: str, *, chain_id: str | None = None, **fields: Any) -> None:
        """Log ``event`` with its fields; ``chain_id`` is lifted next to the event name."""

        payload: dict[str, Any] = {
            "event": event,
            "service": self._service_name,
            "component": self.component,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if chain_id is not None:
            payload["chain_id"] = str(chain_id)
        payload.update({key: _serialize(value) for key, value in fields.items()})

        if self._structured_logging:
            self._logger.info(json.dumps(payload, ensure_ascii=False))
            return
        details = " ".join(f"{key}={value}" for key, value in payload.items() if key not in ("event", "timestamp"))
        self._logger.info("%s | %s", event, details)


def get_observability(*, component: str | None = None, settings: Settings | None = None) -> Observability:
    """Return an :class:`Observability` instance for the requested component."""

    return Observability(settings=settings or get_settings(), component=component)


def _serialize(value: Any) -> Any:
    """Convert paths, violation kinds and report counts into JSON-friendly values."""

    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Mapping):
        return {str(_serialize(key)): _serialize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_serialize(item) for item in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


__all__ = ["Observability", "get_observability"]
