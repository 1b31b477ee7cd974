"""Engine dispatcher - one request in, exactly one response out.

The dispatcher is the only place where failures become data: unknown
operations, malformed payloads and unexpected engine exceptions all turn
into an ``ErrorResponse`` instead of propagating to the caller. It keeps no
state between calls, so requests may be handled in any order.
"""

from __future__ import annotations

from collections.abc import Mapping
from contextlib import ExitStack
import logging
from typing import Any

from pydantic import BaseModel, ValidationError

from property_engine.config import Settings, get_settings
from property_engine.domain.messages import (
    OPERATION_LABELS,
    REQUEST_ADAPTER,
    EngineRequest,
    EngineResponse,
    ErrorResponse,
    FilterComplete,
    FilterRequest,
    SearchComplete,
    SearchRequest,
    SortComplete,
    SortRequest,
    StatsComplete,
    StatsRequest,
)
from property_engine.domain.model import SortResult
from property_engine.engine.filtering import filter_properties
from property_engine.engine.search import search_properties
from property_engine.engine.sorting import apply_sort_spec
from property_engine.engine.stats import compute_stats
from property_engine.errors import UnknownOperationError
from property_engine.observability.context import bind_request
from property_engine.observability.metrics import REQUEST_LATENCY, record_request, track_latency
from property_engine.observability.tracing import create_span, mark_span_error


logger = logging.getLogger(__name__)


def describe_error(exc: BaseException) -> str:
    """Short human-readable description of ``exc``."""
    if isinstance(exc, ValidationError):
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'data'}: {error['msg']}" for error in exc.errors()
        )
        return f"invalid payload ({details})"
    return str(exc) or exc.__class__.__name__


def error_response(operation: Any, exc: BaseException) -> ErrorResponse:
    """Build the ``ERROR`` response for ``operation``."""
    if isinstance(exc, UnknownOperationError):
        return ErrorResponse(operation=None if operation is None else str(operation), error=str(exc))
    label = OPERATION_LABELS.get(operation, str(operation))
    return ErrorResponse(operation=operation, error=f"{label} error: {describe_error(exc)}")


def _execute(request: EngineRequest, settings: Settings) -> EngineResponse:
    match request:
        case FilterRequest(data=payload):
            return FilterComplete(data=filter_properties(payload.properties, payload.filters))
        case SearchRequest(data=payload):
            fuzzy = settings.fuzzy_search_default if payload.fuzzy_search is None else payload.fuzzy_search
            return SearchComplete(data=search_properties(payload.properties, payload.query, fuzzy=fuzzy))
        case SortRequest(data=payload):
            ordered = apply_sort_spec(payload.properties, payload.spec)
            return SortComplete(
                data=SortResult(sorted_properties=ordered, sort_by=payload.sort_by, sort_order=payload.sort_order)
            )
        case StatsRequest(data=payload):
            return StatsComplete(data=compute_stats(payload.properties))
        case _:
            raise UnknownOperationError(getattr(request, "type", type(request).__name__))


def dispatch(request: EngineRequest, settings: Settings | None = None) -> EngineResponse:
    """Run a typed request through the matching engine.

    Never raises: every failure is returned as an ``ErrorResponse``.
    """
    settings = settings or get_settings()
    operation = getattr(request, "type", None)
    if not isinstance(operation, str) or operation not in OPERATION_LABELS:
        logger.warning("Rejected request with unknown operation %r", operation)
        return error_response(operation, UnknownOperationError(operation))

    with bind_request(operation), ExitStack() as stack:
        try:
            record_count = len(request.data.properties)
        except (AttributeError, TypeError) as exc:
            logger.warning("Rejected %s request without a property list: %s", operation, exc)
            return error_response(operation, exc)

        span = None
        if settings.tracing_enabled:
            span = stack.enter_context(
                create_span(f"engine.{operation.lower()}", attributes={"engine.record_count": record_count})
            )
        if settings.metrics_enabled:
            stack.enter_context(track_latency(REQUEST_LATENCY, operation=operation))

        logger.debug(f"Dispatching {operation} over {record_count} records")
        try:
            response = _execute(request, settings)
        except Exception as exc:
            logger.error("%s failed: %s", operation, exc, exc_info=True)
            response = error_response(operation, exc)
            if span is not None:
                mark_span_error(span, response.error)

        if settings.metrics_enabled:
            status = "error" if isinstance(response, ErrorResponse) else "ok"
            record_request(operation, status, record_count)

    return response


def handle_message(message: Mapping[str, Any] | BaseModel, settings: Settings | None = None) -> EngineResponse:
    """Validate a raw ``{"type": ..., "data": ...}`` message and dispatch it.

    Typed requests are dispatched as-is. Unknown ``type`` values and
    payloads that fail validation produce an ``ErrorResponse``.
    """
    if isinstance(message, BaseModel):
        return dispatch(message, settings)  # type: ignore[arg-type]

    operation = message.get("type") if isinstance(message, Mapping) else None
    if not isinstance(operation, str) or operation not in OPERATION_LABELS:
        logger.warning("Rejected message with unknown operation %r", operation)
        return error_response(operation, UnknownOperationError(operation))

    try:
        request = REQUEST_ADAPTER.validate_python(message)
    except ValidationError as exc:
        logger.warning("Rejected malformed %s message: %s", operation, describe_error(exc))
        return error_response(operation, exc)
    except Exception as exc:
        logger.error("Could not read %s message: %s", operation, exc, exc_info=True)
        return error_response(operation, exc)

    return dispatch(request, settings)
