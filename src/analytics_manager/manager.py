"""Analytics manager: transport ownership, activation guard and dispatch middleware."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from enum import Enum
from typing import Any, Callable, Protocol

from analytics_manager.config import settings
from analytics_manager.errors import (
    AlreadyActivatedError,
    AnalyticsListenerError,
    DuplicateTransportError,
    EmptyRegistryError,
    MissingTransportError,
)
from analytics_manager.producers import Producer, resolve_payload
from analytics_manager.registry import ListenerRegistry
from analytics_manager.telemetry.logging import ErrorReporter

Transport = Callable[[Any, Any], None]
Dispatch = Callable[[Any], Any]
Middleware = Callable[["StateSource"], Callable[[Dispatch], Dispatch]]


class SnapshotMode(str, Enum):
    """What the transport receives alongside each payload."""

    POST_STATE = "post_state"
    ACCESSOR = "accessor"


class StateSource(Protocol):
    """The part of a state container the middleware reads from."""

    def get_state(self) -> Any:
        """Return the current state snapshot."""


class AnalyticsManager:
    """Owns the listener registry and transport, and builds the dispatch middleware once.

    Producer and transport exceptions propagate to whoever called ``dispatch`` unless
    ``isolate_listener_errors`` is enabled, in which case each failing listener is logged,
    handed to ``on_error`` and skipped while its siblings still run. By the time a
    listener runs the state container has already applied the event.
    """

    def __init__(
        self,
        *,
        strict_transport: bool | None = None,
        require_registrations: bool | None = None,
        isolate_listener_errors: bool | None = None,
        snapshot_mode: SnapshotMode | str | None = None,
        event_name_key: str | None = None,
        on_error: ErrorReporter | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._strict_transport = settings.strict_transport if strict_transport is None else strict_transport
        self._require_registrations = (
            settings.require_registrations if require_registrations is None else require_registrations
        )
        self._isolate_listener_errors = (
            settings.isolate_listener_errors if isolate_listener_errors is None else isolate_listener_errors
        )
        self._snapshot_mode = SnapshotMode(snapshot_mode or settings.snapshot_mode)
        self._event_name_key = event_name_key or settings.event_name_key
        self._on_error = on_error
        self._logger = logger or logging.getLogger("analytics_manager.manager")

        self._transport: Transport | None = None
        self._registry = ListenerRegistry()
        self._activated = False

    @property
    def activated(self) -> bool:
        return self._activated

    @property
    def has_transport(self) -> bool:
        return self._transport is not None

    @property
    def registry(self) -> ListenerRegistry:
        return self._registry

    @property
    def snapshot_mode(self) -> SnapshotMode:
        return self._snapshot_mode

    def set_transport(self, transport: Transport) -> None:
        """Set the sink that receives ``(payload, state_or_accessor)`` for every emission."""
        if self._transport is not None:
            if self._strict_transport:
                raise DuplicateTransportError("Analytics transport can only be set once")
            self._logger.info("analytics_transport_replaced")
        self._transport = transport
        self._logger.info("analytics_transport_set", extra={"snapshot_mode": self._snapshot_mode.value})

    def register(self, event_name: str, producers: Producer | Sequence[Producer]) -> None:
        self._registry.register(event_name, producers)

    def register_many(self, event_names: Iterable[str], producers: Producer | Sequence[Producer]) -> None:
        self._registry.register_many(event_names, producers)

    def deregister(self, event_name: str) -> None:
        self._registry.deregister(event_name)

    def deregister_many(self, event_names: Iterable[str]) -> None:
        self._registry.deregister_many(event_names)

    def deregister_all(self) -> None:
        self._registry.deregister_all()

    def activate(self) -> Middleware:
        """Return the dispatch middleware; may only succeed once per manager."""
        if self._activated:
            raise AlreadyActivatedError("Analytics middleware can only be created once")

        if self._require_registrations and not len(self._registry):
            raise EmptyRegistryError(
                "No analytics events registered. Register events before activating the manager"
            )

        if self._transport is None:
            raise MissingTransportError("Set an analytics transport before activating the manager")

        self._activated = True
        self._logger.info(
            "analytics_manager_activated",
            extra={"event_names": self._registry.event_names(), "isolated": self._isolate_listener_errors},
        )

        def middleware(store: StateSource) -> Callable[[Dispatch], Dispatch]:
            def wrap(next_dispatch: Dispatch) -> Dispatch:
                def dispatch(event: Any) -> Any:
                    return self._intercept(store, next_dispatch, event)

                return dispatch

            return wrap

        return middleware

    def _intercept(self, store: StateSource, next_dispatch: Dispatch, event: Any) -> Any:
        event_name = self._event_name(event)
        producers = self._registry.lookup(event_name) if event_name is not None else None
        if producers is None:
            return next_dispatch(event)

        pre_state = store.get_state()
        result = next_dispatch(event)
        post_state = store.get_state()

        snapshot = store.get_state if self._snapshot_mode is SnapshotMode.ACCESSOR else post_state
        for index, producer in enumerate(producers):
            if self._isolate_listener_errors:
                self._emit_isolated(event_name, index, producer, event, pre_state, post_state, snapshot)
            else:
                self._emit(producer, event, pre_state, post_state, snapshot)

        return result

    def _emit(self, producer: Producer, event: Any, pre_state: Any, post_state: Any, snapshot: Any) -> None:
        payload = resolve_payload(producer, event, pre_state, post_state)
        if payload is None:
            return
        self._transport(payload, snapshot)

    def _emit_isolated(
        self,
        event_name: str,
        index: int,
        producer: Producer,
        event: Any,
        pre_state: Any,
        post_state: Any,
        snapshot: Any,
    ) -> None:
        try:
            self._emit(producer, event, pre_state, post_state, snapshot)
        except Exception as exc:  # noqa: BLE001 - isolation mode contains listener failures.
            self._logger.exception(
                "analytics_listener_failed",
                extra={"event_name": event_name, "listener_index": index, "producer_kind": producer.kind.value},
            )
            if self._on_error is not None:
                self._on_error(AnalyticsListenerError(event_name, index, exc))

    def _event_name(self, event: Any) -> str | None:
        if isinstance(event, Mapping):
            name = event.get(self._event_name_key)
        else:
            name = getattr(event, self._event_name_key, None)
        return name if isinstance(name, str) else None
