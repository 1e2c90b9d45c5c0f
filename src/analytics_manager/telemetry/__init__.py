"""Error reporting and logging setup."""

from .logging import ErrorReporter, LoggingErrorReporter, configure_logging

__all__ = ["ErrorReporter", "LoggingErrorReporter", "configure_logging"]
