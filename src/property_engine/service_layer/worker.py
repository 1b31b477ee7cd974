"""Background property worker.

Runs the dispatcher in an isolated execution context so that bulk record
processing never blocks the caller. Each worker owns a single-slot executor
(a thread, or a child process when ``worker_backend="process"``), so its
requests run one at a time in submission order. Separate workers share
nothing and may run concurrently.

Every submitted request resolves with exactly one response. When the worker
has been closed or its executor is broken, requests run inline on the
caller's thread instead.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import BrokenExecutor, Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor
import logging
import threading
from typing import Any

from pydantic import BaseModel

from property_engine.config import Settings, get_settings
from property_engine.domain.messages import (
    CALCULATE_STATS,
    FILTER_PROPERTIES,
    SEARCH_PROPERTIES,
    SORT_PROPERTIES,
    EngineResponse,
    ErrorResponse,
)
from property_engine.domain.model import FilterCriteria, PropertyRecord, SortKey, SortOrder
from property_engine.errors import WorkerClosedError
from property_engine.service_layer.dispatcher import error_response, handle_message


logger = logging.getLogger(__name__)

Message = Mapping[str, Any] | BaseModel
Records = Sequence[PropertyRecord | Mapping[str, Any]]
ResultCallback = Callable[[Any, str | None, Any], None]


def _operation_of(message: Message) -> Any:
    if isinstance(message, Mapping):
        return message.get("type")
    return getattr(message, "type", None)


class PropertyWorker:
    """Isolated executor for engine requests.

    Results are available three ways: the ``Future`` returned by
    ``submit``, ``await worker.request(...)``, or a callback on the
    convenience methods. Callbacks are invoked as
    ``callback(data, error, result)``: for filter, search and sort ``data`` is
    always a record list (the input records on error) and ``result`` is the
    full result model (None on error). Callbacks run on the worker's thread,
    or on the caller's thread when the request ran inline.
    """

    def __init__(self, settings: Settings | None = None, executor: Executor | None = None):
        self.settings = settings or get_settings()
        self._executor = executor or self._create_executor()
        self._closed = False
        self._in_flight = 0
        self._lock = threading.Lock()

        logger.info(f"Property worker started ({self.settings.worker_backend} backend)")

    def _create_executor(self) -> Executor:
        if self.settings.is_process_backend():
            return ProcessPoolExecutor(max_workers=1)
        return ThreadPoolExecutor(max_workers=1, thread_name_prefix="property-worker")

    def __enter__(self) -> PropertyWorker:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def is_ready(self) -> bool:
        """True while requests are executed off the caller's thread."""
        return not self._closed

    @property
    def is_processing(self) -> bool:
        """True while at least one submitted request has not resolved."""
        with self._lock:
            return self._in_flight > 0

    def submit(self, message: Message) -> Future[EngineResponse]:
        """Queue ``message`` and return a future resolving to its response."""
        operation = _operation_of(message)
        if self._closed:
            logger.warning("Worker closed; running %s on the calling thread", operation)
            return self._run_inline(message)

        try:
            inner = self._executor.submit(handle_message, message, self.settings)
        except (BrokenExecutor, RuntimeError) as exc:
            logger.warning("Worker unavailable (%s); running %s on the calling thread", exc, operation)
            return self._run_inline(message)

        outer: Future[EngineResponse] = Future()
        with self._lock:
            self._in_flight += 1
        inner.add_done_callback(lambda done: self._resolve(outer, done, operation))
        return outer

    def _run_inline(self, message: Message) -> Future[EngineResponse]:
        future: Future[EngineResponse] = Future()
        future.set_result(handle_message(message, self.settings))
        return future

    def _resolve(self, outer: Future[EngineResponse], inner: Future[EngineResponse], operation: Any) -> None:
        with self._lock:
            self._in_flight -= 1

        if inner.cancelled():
            outer.set_result(error_response(operation, WorkerClosedError("worker closed before the request ran")))
            return

        exc = inner.exception()
        if exc is not None:
            logger.error("Worker failed while running %s: %s", operation, exc)
            outer.set_result(error_response(operation, exc))
            return
        outer.set_result(inner.result())

    async def request(self, message: Message) -> EngineResponse:
        """Submit ``message`` and await its response without blocking the event loop."""
        return await asyncio.wrap_future(self.submit(message))

    def post_message(self, message: Message, callback: Callable[[EngineResponse], None]) -> Future[EngineResponse]:
        """Submit ``message`` and invoke ``callback`` with the response."""
        future = self.submit(message)
        future.add_done_callback(lambda done: callback(done.result()))
        return future

    def _deliver(
        self,
        future: Future[EngineResponse],
        callback: ResultCallback | None,
        on_error: Any,
        extract: Callable[[Any], Any] = lambda result: result,
    ) -> Future[EngineResponse]:
        if callback is None:
            return future

        def _callback(done: Future[EngineResponse]) -> None:
            response = done.result()
            if isinstance(response, ErrorResponse):
                callback(on_error, response.error, None)
            else:
                callback(extract(response.data), None, response.data)

        future.add_done_callback(_callback)
        return future

    def filter_properties(
        self,
        properties: Records,
        filters: FilterCriteria | Mapping[str, Any] | None = None,
        callback: ResultCallback | None = None,
    ) -> Future[EngineResponse]:
        """Filter in the background; on error the callback gets the unfiltered records."""
        request = {"type": FILTER_PROPERTIES, "data": {"properties": list(properties), "filters": filters or {}}}
        return self._deliver(self.submit(request), callback, properties, lambda result: result.filtered_properties)

    def search_properties(
        self,
        properties: Records,
        query: str | None,
        fuzzy_search: bool | None = None,
        callback: ResultCallback | None = None,
    ) -> Future[EngineResponse]:
        """Search in the background; on error the callback gets the unsearched records."""
        request = {
            "type": SEARCH_PROPERTIES,
            "data": {"properties": list(properties), "query": query, "fuzzy_search": fuzzy_search},
        }
        return self._deliver(self.submit(request), callback, properties, lambda result: result.search_results)

    def sort_properties(
        self,
        properties: Records,
        sort_by: SortKey | str,
        sort_order: SortOrder | str = SortOrder.ASC,
        callback: ResultCallback | None = None,
    ) -> Future[EngineResponse]:
        """Sort in the background; on error the callback gets the records in input order."""
        key = sort_by.value if isinstance(sort_by, SortKey) else sort_by
        request = {
            "type": SORT_PROPERTIES,
            "data": {"properties": list(properties), "sort_by": key, "sort_order": sort_order},
        }
        return self._deliver(self.submit(request), callback, properties, lambda result: result.sorted_properties)

    def calculate_stats(
        self,
        properties: Records,
        callback: ResultCallback | None = None,
    ) -> Future[EngineResponse]:
        """Compute statistics in the background; on error the callback gets ``None``."""
        request = {"type": CALCULATE_STATS, "data": {"properties": list(properties)}}
        return self._deliver(self.submit(request), callback, None)

    def close(self, wait: bool = True) -> None:
        """Stop accepting background work; later requests run inline."""
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=wait, cancel_futures=not wait)
        logger.info("Property worker closed")
