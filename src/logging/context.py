# src/logging/context.py — v2
"""Contextual logging support — attach the current store operation to log records."""

from __future__ import annotations

import contextvars
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)
_batch_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "batch_id", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    operation: str | None = None
    batch_id: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(operation=_operation.get(), batch_id=_batch_id.get())


@contextmanager
def operation_context(operation: str, batch: bool = False) -> Iterator[LogContext]:
    """Tag log records emitted inside the block with an operation name.

    With ``batch=True`` a short batch id is generated as well, so every
    record of one bulk import can be grouped together.
    """
    op_token = _operation.set(operation)
    batch_token = _batch_id.set(uuid.uuid4().hex[:8] if batch else None)
    try:
        yield get_context()
    finally:
        _batch_id.reset(batch_token)
        _operation.reset(op_token)


def clear_context() -> None:
    """Reset all context variables."""
    _operation.set(None)
    _batch_id.set(None)
