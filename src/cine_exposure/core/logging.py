"""
Logging for the cine exposure solver.

Loggers live under the ``cine_exposure`` namespace. Every solve runs inside
a ``LogContext`` carrying the unknown field and target camera; a filter
copies that context onto each record so console and file output show which
calculation a line belongs to.

Usage:
    from cine_exposure.core.logging import get_logger, setup_logging

    setup_logging(level="DEBUG")
    logger = get_logger(__name__)
"""

import logging
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Iterator, Optional

ROOT_LOGGER_NAME = "cine_exposure"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(solve_context)s%(message)s"

# Fields of the calculation currently being solved
_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def current_log_context() -> dict[str, Any]:
    """Return a copy of the active log context."""
    return dict(_log_context.get())


class SolveContextFilter(logging.Filter):
    """Attach the active solve context to records as ``solve_context``.

    Renders as ``"[unknown=iso camera=arri] "``, or an empty string
    outside a solve.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = _log_context.get()
        record.solve_context = (
            "[" + " ".join(f"{k}={v}" for k, v in ctx.items()) + "] " if ctx else ""
        )
        return True


_logging_configured = False


def setup_logging(level: Optional[str] = None, log_file: Optional[Path] = None) -> None:
    """Configure the package logger.

    Calling again replaces the previous handlers.

    Args:
        level: Log level name. Defaults to ``Settings.log_level``.
        log_file: Optional file that receives the same records.
    """
    global _logging_configured

    # Import here to avoid circular imports
    from cine_exposure.config import get_settings

    level = level or get_settings().log_level

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(getattr(logging, level.upper()))
    package_logger.handlers.clear()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    for handler in handlers:
        handler.addFilter(SolveContextFilter())
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    _logging_configured = True
    package_logger.debug(f"Logging configured: level={level}, file={log_file}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the package namespace, configuring logging once."""
    if not _logging_configured:
        setup_logging()

    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    return logging.getLogger(name)


class LogContext:
    """Add fields to every record logged inside the block.

    Example:
        with LogContext(unknown="iso", camera="venice"):
            logger.debug("Solving")
    """

    def __init__(self, **context: Any):
        self.context = context
        self._token = None

    def __enter__(self) -> "LogContext":
        self._token = _log_context.set({**_log_context.get(), **self.context})
        return self

    def __exit__(self, *args: Any) -> None:
        if self._token is not None:
            _log_context.reset(self._token)
            self._token = None


@contextmanager
def log_operation(
    logger: logging.Logger,
    operation: str,
    level: int = logging.INFO,
) -> Iterator[None]:
    """Log start, completion or failure of an operation with its duration.

    A failure is logged at ``level`` without a traceback and re-raised, so
    expected solve errors do not show up as stack traces.
    """
    start = time.perf_counter()
    logger.log(level, f"Starting: {operation}", extra={"operation": operation})
    try:
        yield
    except Exception as e:
        logger.log(
            level,
            f"Failed: {operation} ({type(e).__name__}: {e})",
            extra={
                "operation": operation,
                "duration_seconds": round(time.perf_counter() - start, 6),
                "error_type": type(e).__name__,
            },
        )
        raise
    logger.log(
        level,
        f"Completed: {operation}",
        extra={
            "operation": operation,
            "duration_seconds": round(time.perf_counter() - start, 6),
        },
    )
