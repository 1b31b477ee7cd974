"""Per-request correlation context shared by logging and tracing.

Each dispatched request is bound to a fresh ``request_id`` and its operation
name. The JSON log formatter reads the context so every log line emitted
while the request runs carries the same ids.
"""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from uuid import uuid4


request_context: ContextVar[dict | None] = ContextVar("request_context", default=None)


def generate_request_id() -> str:
    """Generate a 32-char hex request ID."""
    return uuid4().hex


def get_request_context() -> dict:
    """Current request context; empty when no request is bound."""
    return request_context.get() or {}


def update_span_id(span_id: str) -> None:
    """Attach the active span id while preserving the rest of the context."""
    ctx = request_context.get() or {}
    request_context.set({**ctx, "span_id": span_id})


@contextmanager
def bind_request(operation: str, request_id: str | None = None) -> Generator[dict, None, None]:
    """Bind ``operation`` and a request id for the duration of the block."""
    ctx = {"request_id": request_id or generate_request_id(), "operation": operation}
    token = request_context.set(ctx)
    try:
        yield ctx
    finally:
        request_context.reset(token)
