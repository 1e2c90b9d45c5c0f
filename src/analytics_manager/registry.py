"""Event-name keyed registry of payload producers."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from analytics_manager.producers import Producer


class ListenerRegistry:
    """Maps event names to the ordered producers emitted for them."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Producer]] = {}

    def register(self, event_name: str, producers: Producer | Sequence[Producer]) -> None:
        """Append one producer or a sequence of producers to ``event_name``."""
        batch = _as_batch(producers)
        if not batch:
            return
        self._listeners.setdefault(event_name, []).extend(batch)

    def register_many(self, event_names: Iterable[str], producers: Producer | Sequence[Producer]) -> None:
        """Register the same producer(s) under every name in ``event_names``."""
        for event_name in event_names:
            self.register(event_name, producers)

    def deregister(self, event_name: str) -> None:
        """Drop every producer for ``event_name``; unknown names are ignored."""
        self._listeners.pop(event_name, None)

    def deregister_many(self, event_names: Iterable[str]) -> None:
        for event_name in event_names:
            self.deregister(event_name)

    def deregister_all(self) -> None:
        self._listeners.clear()

    def lookup(self, event_name: str) -> tuple[Producer, ...] | None:
        """Return the producers for ``event_name`` in registration order, or ``None``."""
        producers = self._listeners.get(event_name)
        if not producers:
            return None
        return tuple(producers)

    def event_names(self) -> list[str]:
        return list(self._listeners)

    def __contains__(self, event_name: object) -> bool:
        return event_name in self._listeners

    def __len__(self) -> int:
        return len(self._listeners)


def _as_batch(producers: Producer | Sequence[Producer]) -> list[Producer]:
    if isinstance(producers, Producer):
        return [producers]

    if isinstance(producers, (str, bytes)) or not isinstance(producers, Sequence):
        raise TypeError(
            f"Expected a Producer or a sequence of Producers, got {type(producers).__name__}. "
            "Wrap payloads with static(...) or dynamic(...)."
        )

    batch = list(producers)
    for item in batch:
        if not isinstance(item, Producer):
            raise TypeError(
                f"Expected Producer items, got {type(item).__name__}. Wrap payloads with static(...) or dynamic(...)."
            )
    return batch
