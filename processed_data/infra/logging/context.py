"""Context management for structured logging.

Request-scoped fields (request id, GraphQL operation name) are kept in a
ContextVar so every record logged while serving a request carries them,
including records emitted from dataloader batch callbacks.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Add fields to the logging context of the current task.

    Args:
        **kwargs: Key-value pairs to add to logging context.

    Example:
        ```python
        set_log_context(request_id="abc-123")
        logger.info("Resolving entities")  # Includes request_id
        ```
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def get_log_context() -> dict[str, Any]:
    """Get a copy of the current logging context."""
    return _log_context.get().copy()


def clear_log_context() -> None:
    """Clear all logging context for the current task."""
    _log_context.set({})


class ContextInjectingFilter(logging.Filter):
    """Logging filter that copies the log context onto each LogRecord.

    Attached to the root queue handler so records propagated from any
    module logger are enriched before they cross the queue.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            # Never overwrite attributes set by the logging call itself
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
