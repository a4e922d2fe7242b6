"""Correlation ID context management.

A ContextVar holds the id of the extraction in flight so every log entry
emitted while processing one file (including inside worker threads started
with ``asyncio.to_thread``, which copies the context) can be tied together.

Usage:
    with correlation_id_context() as corr_id:
        await service.extract_from_file(upload)
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Generator, Optional

_correlation_id_var: ContextVar[Optional[str]] = ContextVar(
    "correlation_id", default=None
)


def set_correlation_id(corr_id: Optional[str] = None) -> str:
    """Set the correlation ID for the current context.

    Args:
        corr_id: Explicit ID; a UUID4 is generated when None.

    Returns:
        The correlation ID that was set.
    """
    if corr_id is None:
        corr_id = str(uuid.uuid4())
    _correlation_id_var.set(corr_id)
    return corr_id


def get_correlation_id() -> Optional[str]:
    """Return the current correlation ID, or None if unset."""
    return _correlation_id_var.get()


def clear_correlation_id() -> None:
    _correlation_id_var.set(None)


@contextmanager
def correlation_id_context(
    corr_id: Optional[str] = None,
) -> Generator[str, None, None]:
    """Scope a correlation ID to a block, restoring the previous one on exit.

    Args:
        corr_id: Explicit ID; a UUID4 is generated when None.

    Yields:
        The correlation ID active inside the block.
    """
    if corr_id is None:
        corr_id = str(uuid.uuid4())

    token = _correlation_id_var.set(corr_id)
    try:
        yield corr_id
    finally:
        _correlation_id_var.reset(token)
