"""Contract for the listener-failure side channel and logging setup."""

from __future__ import annotations

import logging
from typing import Protocol

from analytics_manager.errors import AnalyticsListenerError


class ErrorReporter(Protocol):
    """Receives producer or transport failures contained by an isolating manager."""

    def __call__(self, error: AnalyticsListenerError) -> None:
        """Report one contained listener failure."""


class LoggingErrorReporter:
    """Reports contained failures as warnings on a logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("analytics_manager.errors")

    def __call__(self, error: AnalyticsListenerError) -> None:
        self._logger.warning(
            "analytics_listener_error_reported",
            extra={"event_name": error.event_name, "listener_index": error.index, "error": str(error.cause)},
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format="%(asctime)s %(levelname)s %(name)s %(message)s")
