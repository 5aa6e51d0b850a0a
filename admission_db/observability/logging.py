"""
Contextual logging utilities for ADMISSION_DB.

Log records emitted through ``get_logger`` carry the store context: the
database name bound at initialization, plus the operation, collection and
correlation id of whatever multi-step store operation is running (a snapshot
import, a backup). Context lives in ``contextvars`` so concurrent tasks do not
see each other's fields.
"""

import contextvars
import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)

_store_context: contextvars.ContextVar[dict[str, Any] | None] = contextvars.ContextVar(
    "store_context", default=None
)


def get_correlation_id() -> str | None:
    """Correlation id of the operation running in this context, if any."""
    return _correlation_id.get()


def set_store_context(**fields: Any) -> None:
    """Merge ``fields`` (e.g. ``db_name``) into the current store context."""
    _store_context.set({**(_store_context.get() or {}), **fields})


def clear_store_context() -> None:
    _store_context.set(None)


@contextmanager
def store_context(**fields: Any) -> Iterator[None]:
    """Add ``fields`` (e.g. ``collection``) to the store context inside the block."""
    token = _store_context.set({**(_store_context.get() or {}), **fields})
    try:
        yield
    finally:
        _store_context.reset(token)


@contextmanager
def operation_scope(operation: str, **fields: Any) -> Iterator[str]:
    """
    Run a block as one logged store operation.

    Every record logged inside the block gets a fresh correlation id and an
    ``operation`` field. The previous context is restored on exit, also when
    the block raises.

    Usage:
        with operation_scope("snapshot.import", batch_size=50) as correlation_id:
            ...

    Yields:
        The correlation id
    """
    correlation_id = uuid.uuid4().hex
    token = _correlation_id.set(correlation_id)
    try:
        with store_context(operation=operation, **fields):
            yield correlation_id
    finally:
        _correlation_id.reset(token)


def get_logging_context() -> dict[str, Any]:
    context = dict(_store_context.get() or {})
    correlation_id = _correlation_id.get()
    if correlation_id:
        context["correlation_id"] = correlation_id
    return context


class ContextualLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds the store context to every record."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**get_logging_context(), **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_logger(name: str) -> ContextualLoggerAdapter:
    """
    Get a contextual logger.

    Args:
        name: Logger name (typically __name__)
    """
    return ContextualLoggerAdapter(logging.getLogger(name), {})


def log_operation(
    logger: logging.Logger | logging.LoggerAdapter,
    operation: str,
    level: int = logging.INFO,
    success: bool = True,
    duration_ms: float | None = None,
    **context: Any,
) -> None:
    """
    Log the outcome of a store operation with structured fields.

    Args:
        logger: Logger instance
        operation: Operation name (e.g. ``snapshot.import``)
        level: Log level
        success: Whether operation succeeded
        duration_ms: Operation duration in milliseconds
        **context: Additional fields (counts, error text)
    """
    fields = {**get_logging_context(), "operation": operation, "success": success, **context}
    message = f"{operation} {'completed' if success else 'failed'}"
    if duration_ms is not None:
        fields["duration_ms"] = round(duration_ms, 2)
        message += f" in {duration_ms:.2f}ms"
    logger.log(level, message, extra=fields)
