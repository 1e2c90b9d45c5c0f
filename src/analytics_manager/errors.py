"""Configuration and listener errors raised by the analytics manager."""

from __future__ import annotations


class AnalyticsConfigurationError(RuntimeError):
    """Base class for programmer errors in manager setup."""


class DuplicateTransportError(AnalyticsConfigurationError):
    """Raised when a transport is set twice on a strict manager."""


class MissingTransportError(AnalyticsConfigurationError):
    """Raised when activation is requested before a transport is set."""


class AlreadyActivatedError(AnalyticsConfigurationError):
    """Raised when activation is requested more than once."""


class EmptyRegistryError(AnalyticsConfigurationError):
    """Raised when activation is requested with no registered events."""


class AnalyticsListenerError(RuntimeError):
    """Wraps a producer or transport failure reported through the error side channel."""

    def __init__(self, event_name: str, index: int, cause: BaseException) -> None:
        super().__init__(f"Analytics listener {index} for '{event_name}' failed: {type(cause).__name__}: {cause}")
        self.event_name = event_name
        self.index = index
        self.cause = cause
