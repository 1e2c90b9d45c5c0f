"""CLI entrypoint for replaying events through an analytics manager."""

from __future__ import annotations

import importlib
import json
from pathlib import Path
from typing import Any

import typer
from rich import print

from analytics_manager.config import settings
from analytics_manager.manager import AnalyticsManager
from analytics_manager.store import create_store, replace_data_reducer
from analytics_manager.telemetry.logging import configure_logging
from analytics_manager.transports import JsonlTransport

app = typer.Typer(help="Analytics manager utilities")


class _CountingTransport:
    """Wraps a transport and counts deliveries for the replay summary."""

    def __init__(self, inner) -> None:
        self._inner = inner
        self.count = 0

    def __call__(self, payload: Any, snapshot: Any = None) -> None:
        self.count += 1
        self._inner(payload, snapshot)


def _rich_transport(payload: Any, snapshot: Any = None) -> None:
    print({"payload": payload})


def _load_object(path: str) -> Any:
    module_name, _, attr = path.partition(":")
    if not module_name or not attr:
        raise typer.BadParameter(f"Expected 'module:attribute', got '{path}'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise typer.BadParameter(f"Cannot import module '{module_name}': {exc}") from exc
    try:
        return getattr(module, attr)
    except AttributeError as exc:
        raise typer.BadParameter(f"Module '{module_name}' has no attribute '{attr}'") from exc


def _load_manager(path: str) -> AnalyticsManager:
    target = _load_object(path)
    manager = target if isinstance(target, AnalyticsManager) else target()
    if not isinstance(manager, AnalyticsManager):
        raise typer.BadParameter(f"'{path}' did not provide an AnalyticsManager")
    return manager


def _read_events(events_file: Path) -> list[dict]:
    if not events_file.exists():
        raise typer.BadParameter(f"Events file not found: {events_file}")
    events = []
    with events_file.open("r", encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            try:
                events.append(json.loads(line))
            except json.JSONDecodeError as exc:
                raise typer.BadParameter(f"Invalid JSON on line {line_number} of {events_file}: {exc}") from exc
    return events


def _parse_initial_state(document: str | None) -> Any:
    if not document:
        return {}
    try:
        return json.loads(document)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"Initial state is not valid JSON: {exc}") from exc


@app.command()
def start() -> None:
    """Show runtime configuration."""
    print(
        {
            "app_name": settings.app_name,
            "log_level": settings.log_level,
            "strict_transport": settings.strict_transport,
            "require_registrations": settings.require_registrations,
            "isolate_listener_errors": settings.isolate_listener_errors,
            "snapshot_mode": settings.snapshot_mode,
            "event_name_key": settings.event_name_key,
        }
    )


@app.command()
def replay(
    events_file: Path = typer.Argument(..., help="JSONL file with one event object per line"),
    manager: str = typer.Option(..., help="Import path 'module:attr' of a manager or manager factory"),
    reducer: str = typer.Option(None, help="Import path 'module:attr' of the reducer to replay against"),
    initial_state: str = typer.Option(None, help="Initial state as a JSON document"),
    output: Path = typer.Option(None, help="Append delivered payloads to this JSONL file"),
) -> None:
    """Dispatch recorded events through a store wired with the analytics middleware."""
    configure_logging(settings.log_level)

    analytics = _load_manager(manager)
    reduce_fn = _load_object(reducer) if reducer else replace_data_reducer
    events = _read_events(events_file)
    state = _parse_initial_state(initial_state)

    counter: _CountingTransport | None = None
    if not analytics.has_transport:
        counter = _CountingTransport(JsonlTransport(output) if output else _rich_transport)
        analytics.set_transport(counter)
    store = create_store(reduce_fn, state, analytics.activate())

    for event in events:
        store.dispatch(event)

    print(
        {
            "events": len(events),
            "payloads": counter.count if counter is not None else None,
            "final_state": store.get_state(),
        }
    )


if __name__ == "__main__":
    app()
