"""Service layer - request orchestration.

- dispatcher routes one typed request to one engine and returns one response
- worker runs the dispatcher off the caller's thread
"""

from .dispatcher import dispatch, handle_message
from .worker import PropertyWorker


__all__ = [
    "PropertyWorker",
    "dispatch",
    "handle_message",
]
