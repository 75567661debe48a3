"""Structured JSON logging with per-request context.

Every record emitted while a request is in flight carries the request id and
the caller's username and role, so engine lines such as "Leave approved" can be
joined with the access line for the same request.
"""

from __future__ import annotations

import json
import logging
import sys
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Iterator, Optional, Tuple

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from leaveease.auth.security import decode_access_token

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_username: ContextVar[Optional[str]] = ContextVar("username", default=None)
_role: ContextVar[Optional[str]] = ContextVar("role", default=None)

# Keys copied from a record into the JSON line when present
FIELDS = (
    "request_id",
    "username",
    "role",
    "path",
    "method",
    "status_code",
    "latency_ms",
    "leave_id",
    "leave_type",
    "status",
)


@contextmanager
def request_context(
    request_id: str,
    username: Optional[str] = None,
    role: Optional[str] = None,
) -> Iterator[None]:
    tokens = (_request_id.set(request_id), _username.set(username), _role.set(role))
    try:
        yield
    finally:
        _role.reset(tokens[2])
        _username.reset(tokens[1])
        _request_id.reset(tokens[0])


class RequestContextFilter(logging.Filter):
    """Fill request_id/username/role from the current request unless the call set them."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, var in (("request_id", _request_id), ("username", _username), ("role", _role)):
            value = var.get()
            if value is not None and getattr(record, key, None) is None:
                setattr(record, key, value)
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def configure_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    handler.addFilter(RequestContextFilter())
    logging.basicConfig(level=level, handlers=[handler], force=True)


def _resolve_principal(request: Request) -> Tuple[Optional[str], Optional[str]]:
    """Username and role claimed by the bearer token, if it decodes. Not an auth check."""
    auth_header = request.headers.get("authorization") or ""
    if not auth_header.lower().startswith("bearer "):
        return None, None
    payload = decode_access_token(auth_header.split(" ", 1)[1].strip())
    if payload is None:
        return None, None
    return payload.get("sub"), payload.get("role")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One access line per request; a `security` line for each 403 an identified caller gets."""

    def __init__(self, app, logger_name: str = "request") -> None:
        super().__init__(app)
        self.logger = logging.getLogger(logger_name)
        self.security_logger = logging.getLogger("security")

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        username, role = _resolve_principal(request)
        access = {
            "request_id": request_id,
            "username": username,
            "role": role,
            "path": request.url.path,
            "method": request.method,
        }

        with request_context(request_id, username, role):
            start = time.perf_counter()
            try:
                response = await call_next(request)
            except Exception:
                latency_ms = round((time.perf_counter() - start) * 1000, 2)
                self.logger.exception("unhandled_exception", extra={**access, "latency_ms": latency_ms})
                raise

            latency_ms = round((time.perf_counter() - start) * 1000, 2)
            self.logger.info(
                "request",
                extra={**access, "status_code": response.status_code, "latency_ms": latency_ms},
            )
            if response.status_code == 403 and username:
                self.security_logger.info("forbidden", extra={**access, "status_code": 403})

        response.headers["X-Request-Id"] = request_id
        return response
