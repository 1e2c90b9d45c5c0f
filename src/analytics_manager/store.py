"""Minimal reference state container used to host the analytics middleware.

Applications normally bring their own container; this one follows the usual
reducer/dispatch/middleware conventions closely enough to drive the CLI replay
command and the test-suite.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable

Reducer = Callable[[Any, Any], Any]
Dispatch = Callable[[Any], Any]
StoreMiddleware = Callable[[Any], Callable[[Dispatch], Dispatch]]


class Store:
    """Holds state and applies a reducer to every dispatched event."""

    def __init__(self, reducer: Reducer, initial_state: Any = None) -> None:
        self._reducer = reducer
        self._state = initial_state
        self._listeners: list[Callable[[], None]] = []

    def get_state(self) -> Any:
        return self._state

    def dispatch(self, event: Any) -> Any:
        self._state = self._reducer(self._state, event)
        for listener in list(self._listeners):
            listener()
        return event

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Call ``listener`` after every dispatch; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


class _MiddlewareStore:
    """Store view handed to middlewares; ``dispatch`` re-enters the full chain."""

    def __init__(self, store: MiddlewareStore) -> None:
        self._store = store

    def get_state(self) -> Any:
        return self._store.get_state()

    def dispatch(self, event: Any) -> Any:
        return self._store.dispatch(event)


class MiddlewareStore(Store):
    """Store whose dispatch runs through a chain of middlewares first."""

    def __init__(self, reducer: Reducer, initial_state: Any = None, middlewares: tuple[StoreMiddleware, ...] = ()) -> None:
        super().__init__(reducer, initial_state)
        view = _MiddlewareStore(self)
        dispatch: Dispatch = super().dispatch
        for middleware in reversed(middlewares):
            dispatch = middleware(view)(dispatch)
        self._chain = dispatch

    def dispatch(self, event: Any) -> Any:
        return self._chain(event)


def create_store(reducer: Reducer, initial_state: Any = None, *middlewares: StoreMiddleware) -> Store:
    """Create a store; the first middleware sees each event first."""
    if not middlewares:
        return Store(reducer, initial_state)
    return MiddlewareStore(reducer, initial_state, middlewares)


def replace_data_reducer(state: Any, event: Any) -> Any:
    """Replace the state with ``{"data": event["data"]}`` when the event carries data."""
    if isinstance(event, Mapping):
        data = event.get("data")
    else:
        data = getattr(event, "data", None)
    if not data:
        return state
    return {"data": data}
