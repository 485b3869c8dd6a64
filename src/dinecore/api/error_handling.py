from __future__ import annotations

from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dinecore.api.middleware.request_id import get_request_id
from dinecore.application.ports.api import AuthError, RemoteRejectedError, TransportError
from dinecore.application.use_cases.action_guard import ActionInProgressError
from dinecore.application.use_cases.change_status import TransitionRejectedError
from dinecore.application.use_cases.checkout import (
    EmptyCartError,
    MissingRequiredFieldError,
    SubmissionFailedError,
)
from dinecore.application.use_cases.daily_limit import DailyLimitCheckFailedError
from dinecore.application.use_cases.reservation_wizard import StageOrderError
from dinecore.domain.common.errors import PolicyViolation, ValidationError
from dinecore.domain.lifecycle.machine import (
    ForbiddenTransitionError,
    InvalidTransitionError,
    UnknownEntityKindError,
)
from dinecore.domain.policies.daily_limit import DailyLimitReachedError
from dinecore.domain.policies.payment import (
    PaymentMethodIneligibleError,
    ReceiptInvalidError,
    ReceiptRequiredError,
)

UPSTREAM = None  # forward the store's 4xx status, 502 for anything else

# Lookup follows the exception MRO, so a subclass entry wins over its base.
ERROR_CODES: dict[type[Exception], tuple[int | None, str]] = {
    EmptyCartError: (400, "EMPTY_CART"),
    MissingRequiredFieldError: (400, "MISSING_REQUIRED_FIELD"),
    ReceiptInvalidError: (400, "RECEIPT_INVALID"),
    ValidationError: (400, "VALIDATION_FAILED"),
    StageOrderError: (400, "STAGE_INCOMPLETE"),
    PaymentMethodIneligibleError: (422, "PAYMENT_METHOD_INELIGIBLE"),
    ReceiptRequiredError: (422, "RECEIPT_REQUIRED"),
    DailyLimitReachedError: (422, "DAILY_LIMIT_REACHED"),
    PolicyViolation: (422, "POLICY_VIOLATION"),
    InvalidTransitionError: (409, "INVALID_TRANSITION"),
    ForbiddenTransitionError: (403, "FORBIDDEN"),
    UnknownEntityKindError: (404, "UNKNOWN_ENTITY_KIND"),
    TransitionRejectedError: (409, "TRANSITION_REJECTED"),
    ActionInProgressError: (409, "ACTION_IN_PROGRESS"),
    AuthError: (401, "UNAUTHORIZED"),
    DailyLimitCheckFailedError: (502, "DAILY_LIMIT_CHECK_FAILED"),
    TransportError: (502, "UPSTREAM_UNAVAILABLE"),
    RemoteRejectedError: (UPSTREAM, "REMOTE_REJECTED"),
    SubmissionFailedError: (UPSTREAM, "SUBMISSION_FAILED"),
}

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


def _error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    body = {
        "error": {"code": code, "message": message, "details": details or {}},
        "requestId": get_request_id(),
    }
    return JSONResponse(status_code=status_code, content=body)


def _resolve_status(status_code: int | None, exc: Exception) -> int:
    if status_code is not None:
        return status_code
    upstream = getattr(exc, "status_code", None)
    if isinstance(upstream, int) and 400 <= upstream < 500:
        return upstream
    return 502


def _domain_handler(status_code: int | None, code: str):
    async def handler(_: Request, exc: Exception) -> JSONResponse:
        details = getattr(exc, "details", None)
        return _error_response(
            status_code=_resolve_status(status_code, exc),
            code=code,
            message=str(exc),
            details=details if isinstance(details, dict) else None,
        )

    return handler


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    return _error_response(
        status_code=http_exc.status_code,
        code=HTTP_ERROR_CODES.get(http_exc.status_code, "HTTP_ERROR"),
        message=str(http_exc.detail) if http_exc.detail else "request failed",
    )


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast(RequestValidationError, exc)
    return _error_response(
        status_code=400,
        code="INVALID_REQUEST",
        message="request validation failed",
        details={"errors": validation_exc.errors()},
    )


def register_exception_handlers(app: FastAPI) -> None:
    for exc_cls, (status_code, code) in ERROR_CODES.items():
        app.add_exception_handler(exc_cls, _domain_handler(status_code, code))

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
