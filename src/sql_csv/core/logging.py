"""Logging configuration using structlog.

Logs go to stderr to keep stdout clean for CSV output (piping).
"""

import logging
import sys
from typing import Any

import structlog

_LOG_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


class _LazyStderrFactory:
    """Resolve sys.stderr at logger creation time, not at configure() time.

    PrintLoggerFactory(file=sys.stderr) captures the file handle once.
    Under pytest's capture the captured handle is swapped between tests,
    so each logger looks up the *current* sys.stderr instead.
    """

    def __call__(self, *args: Any, **kwargs: Any) -> structlog.PrintLogger:
        return structlog.PrintLogger(file=sys.stderr)


def setup_logging(verbose: bool = False) -> None:
    """Configure structlog for SQL CSV.

    Args:
        verbose: If True, set log level to DEBUG. Otherwise INFO.
    """
    log_level = "debug" if verbose else "info"

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_LOG_LEVELS[log_level]),
        context_class=dict,
        logger_factory=_LazyStderrFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger, optionally bound with a name.

    Never call this at module level. Call it inside functions or
    __init__() so that setup_logging() has a chance to run first.
    """
    if structlog.is_configured():
        logger = structlog.get_logger()
    else:
        # Until the host application configures structlog, only warnings
        # and above are printed, and never to stdout.
        logger = structlog.wrap_logger(
            _LazyStderrFactory()(),
            wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        )
    if name:
        logger = logger.bind(logger=name)
    return logger
