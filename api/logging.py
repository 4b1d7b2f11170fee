"""Structured logging and request middleware for the FER API.

This module provides:
- Structured logging configuration (key=value format)
- Request ID middleware for tracing
- Request timing middleware

Example:
    >>> from api.logging import setup_logging
    >>> setup_logging("INFO")
"""

import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


# Request ID of the request being served, "-" outside a request
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

timing_logger = logging.getLogger("api.timing")


class StructuredFormatter(logging.Formatter):
    """Log formatter producing a single key=value line per record.

    Formats log messages as:
        timestamp=ISO8601 level=LEVEL logger=NAME request_id=ID message="MSG"
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as structured key=value pairs."""
        parts = [
            f"timestamp={self.formatTime(record, self.datefmt)}",
            f"level={record.levelname}",
            f"logger={record.name}",
            f"request_id={request_id_var.get() or '-'}",
        ]

        message = record.getMessage().replace('"', '\\"')
        parts.append(f'message="{message}"')

        if record.exc_info:
            exc_text = self.formatException(record.exc_info)
            exc_text = exc_text.replace('\n', ' | ').replace('"', '\\"')
            parts.append(f'exception="{exc_text}"')

        return " ".join(parts)


def setup_logging(log_level: str = "INFO") -> None:
    """Configure structured logging on the root logger.

    Existing root handlers are replaced by a single stdout handler.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR).
    """
    level = log_level.upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter(datefmt="%Y-%m-%dT%H:%M:%S%z"))
    handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    # Reduce noise from third-party loggers
    for name in ("uvicorn.access", "httpx", "httpcore", "PIL"):
        logging.getLogger(name).setLevel(logging.WARNING)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assign a request ID to each request.

    An incoming X-Request-ID header is reused, otherwise a UUID4 is
    generated. The ID is stored in request.state, echoed in the response
    header and exposed to log records through request_id_var.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        request.state.request_id = request_id
        token = request_id_var.set(request_id)

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            request_id_var.reset(token)


class TimingMiddleware(BaseHTTPMiddleware):
    """Log request duration and add an X-Response-Time header."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        timing_logger.info(
            "method=%s path=%s status=%d duration_ms=%.2f",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response


def add_middleware(app: FastAPI) -> None:
    """Add request ID and timing middleware to the application.

    Args:
        app: The FastAPI application instance.
    """
    # RequestID is added last so it runs first
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
