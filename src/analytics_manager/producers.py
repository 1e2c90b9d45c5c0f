"""Payload producers and their resolution into concrete analytics payloads."""

from __future__ import annotations

from collections.abc import Sized
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

PayloadCallback = Callable[[Any, Any, Any], Any]


class ProducerKind(str, Enum):
    """Discriminator for the two producer variants."""

    STATIC = "static"
    DYNAMIC = "dynamic"


@dataclass(frozen=True, slots=True)
class Producer:
    """A registered payload source.

    ``STATIC`` producers carry the payload in ``value`` and emit it unchanged.
    ``DYNAMIC`` producers carry a callable taking ``(event, pre_state, post_state)``;
    returning ``None`` (or an empty payload) suppresses the emission.
    """

    kind: ProducerKind
    value: Any = None
    callback: PayloadCallback | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", ProducerKind(self.kind))
        if self.kind is ProducerKind.DYNAMIC and not callable(self.callback):
            raise TypeError(f"Dynamic producer requires a callable, got {type(self.callback).__name__}")

    @classmethod
    def static(cls, value: Any) -> Producer:
        return cls(kind=ProducerKind.STATIC, value=value)

    @classmethod
    def dynamic(cls, callback: PayloadCallback) -> Producer:
        return cls(kind=ProducerKind.DYNAMIC, callback=callback)


def static(value: Any) -> Producer:
    """Build a producer that always emits ``value``."""
    return Producer.static(value)


def dynamic(callback: PayloadCallback) -> Producer:
    """Build a producer that computes its payload from the event and state snapshots."""
    return Producer.dynamic(callback)


def resolve_payload(producer: Producer, event: Any, pre_state: Any, post_state: Any) -> Any | None:
    """Resolve ``producer`` for one dispatch, returning ``None`` when nothing should be sent."""
    if producer.kind is ProducerKind.DYNAMIC:
        payload = producer.callback(event, pre_state, post_state)
    else:
        payload = producer.value

    if is_empty_payload(payload):
        return None
    return payload


def is_empty_payload(payload: Any) -> bool:
    if payload is None:
        return True
    # Strings are sized too; an empty one carries nothing worth sending.
    return isinstance(payload, Sized) and len(payload) == 0
