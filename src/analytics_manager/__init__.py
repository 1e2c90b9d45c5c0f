"""Attach analytics payloads to events flowing through a state container's dispatch chain."""

from .errors import (
    AlreadyActivatedError,
    AnalyticsConfigurationError,
    AnalyticsListenerError,
    DuplicateTransportError,
    EmptyRegistryError,
    MissingTransportError,
)
from .manager import AnalyticsManager, SnapshotMode
from .producers import Producer, ProducerKind, dynamic, resolve_payload, static
from .registry import ListenerRegistry

__all__ = [
    "AlreadyActivatedError",
    "AnalyticsConfigurationError",
    "AnalyticsListenerError",
    "AnalyticsManager",
    "DuplicateTransportError",
    "EmptyRegistryError",
    "ListenerRegistry",
    "MissingTransportError",
    "Producer",
    "ProducerKind",
    "SnapshotMode",
    "dynamic",
    "resolve_payload",
    "static",
]
