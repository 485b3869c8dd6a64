from __future__ import annotations

import re
from contextvars import ContextVar
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

REQUEST_ID_HEADER = "X-Request-Id"
MAX_REQUEST_ID_LENGTH = 128

# Incoming ids are forwarded to the remote store, so only header-safe tokens are kept.
_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]+$")

_current_request_id: ContextVar[str | None] = ContextVar("dinecore_request_id", default=None)


def get_request_id() -> str | None:
    return _current_request_id.get()


def resolve_request_id(incoming: str | None) -> str:
    candidate = (incoming or "").strip()
    if candidate and len(candidate) <= MAX_REQUEST_ID_LENGTH and _SAFE_REQUEST_ID.match(candidate):
        return candidate
    return uuid4().hex


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        reset_token = _current_request_id.set(request_id)
        try:
            response = await call_next(request)
        finally:
            _current_request_id.reset(reset_token)
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
        return response
