"""Exceptions raised inside the engine.

None of these escape the dispatcher: they are converted into ``ErrorResponse``
messages at the boundary.
"""


class EngineError(Exception):
    """Base class for engine failures."""


class UnknownOperationError(EngineError):
    """A request named an operation the dispatcher does not implement."""

    def __init__(self, operation: object) -> None:
        super().__init__(f"Unknown operation type: {operation}")
        self.operation = operation


class WorkerClosedError(EngineError):
    """A request was submitted to a worker that has been shut down."""
