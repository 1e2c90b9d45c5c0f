"""Bundled transports for delivering resolved analytics payloads."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class TransportCall:
    """One payload delivered to a transport, with the state argument it came with."""

    payload: Any
    snapshot: Any


class RecordingTransport:
    """Keeps every delivered payload in memory, in delivery order."""

    def __init__(self) -> None:
        self.calls: list[TransportCall] = []

    def __call__(self, payload: Any, snapshot: Any = None) -> None:
        self.calls.append(TransportCall(payload=payload, snapshot=snapshot))

    @property
    def payloads(self) -> list[Any]:
        return [call.payload for call in self.calls]

    def clear(self) -> None:
        self.calls.clear()


class LoggingTransport:
    """Writes each payload to a logger instead of a remote analytics service."""

    def __init__(self, logger: logging.Logger | None = None, *, include_state: bool = False) -> None:
        self._logger = logger or logging.getLogger("analytics_manager.transports")
        self._include_state = include_state

    def __call__(self, payload: Any, snapshot: Any = None) -> None:
        extra: dict[str, Any] = {"payload": payload}
        if self._include_state:
            extra["state"] = _materialize(snapshot)
        self._logger.info("analytics_payload", extra=extra)


class JsonlTransport:
    """Appends each payload and its state snapshot as one JSON line."""

    def __init__(self, file_path: str | Path) -> None:
        self._path = Path(file_path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def __call__(self, payload: Any, snapshot: Any = None) -> None:
        record = {"payload": payload, "state": _materialize(snapshot)}
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, default=str) + "\n")

    def read_all(self) -> list[dict[str, Any]]:
        if not self._path.exists():
            return []

        records: list[dict[str, Any]] = []
        with self._path.open("r", encoding="utf-8") as handle:
            for line in handle:
                if not line.strip():
                    continue
                records.append(json.loads(line))
        return records


def _materialize(snapshot: Any) -> Any:
    # Accessor-mode managers hand over get_state instead of the state itself.
    return snapshot() if callable(snapshot) else snapshot
