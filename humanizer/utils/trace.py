from __future__ import annotations

import uuid

import structlog
from fastapi import Request

TRACE_HEADER = "x-trace-id"


def new_trace_id() -> str:
    return uuid.uuid4().hex


async def trace_context_middleware(request: Request, call_next):
    """Bind the caller's trace id (or a fresh one) to every log line of the request."""
    trace_id = request.headers.get(TRACE_HEADER) or new_trace_id()
    with structlog.contextvars.bound_contextvars(trace_id=trace_id):
        response = await call_next(request)
    response.headers[TRACE_HEADER] = trace_id
    return response


def get_trace_id() -> str:
    return structlog.contextvars.get_contextvars().get("trace_id") or new_trace_id()
