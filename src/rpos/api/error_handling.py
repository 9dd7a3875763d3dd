from __future__ import annotations

from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rpos.api.middleware.request_id import get_request_id
from rpos.application.errors import (
    ConflictError,
    EmptyOrderError,
    InvalidMenuItemError,
    InvalidOrderLineError,
    InvalidReportFilterError,
    InvalidReportWindowError,
    InvalidTableError,
    KitchenTicketNotAllowedError,
    MenuItemNotFoundError,
    NotFoundError,
    OpenOrderNotFoundError,
    OrderConflictError,
    OrderNotFoundError,
    OrderNotPendingError,
    PermissionDeniedError,
    PersistenceError,
    SettlementNotAllowedError,
    TableInUseError,
    TableNotAvailableError,
    TableNotFoundError,
    TableSelectionError,
    UnknownMenuItemError,
    UserNotFoundError,
    ValidationError,
)


def _error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            },
            "requestId": get_request_id(),
        },
    )


def _exception_handler(status_code: int, code: str):
    async def handler(_: Request, exc: Exception) -> JSONResponse:
        details = getattr(exc, "details", None)
        return _error_response(
            status_code=status_code,
            code=code,
            message=str(exc),
            details=details if isinstance(details, dict) else None,
        )

    return handler


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    message = str(http_exc.detail) if http_exc.detail else "request failed"
    code = "HTTP_ERROR"
    if http_exc.status_code == 404:
        code = "NOT_FOUND"
    elif http_exc.status_code == 400:
        code = "BAD_REQUEST"
    elif http_exc.status_code == 409:
        code = "CONFLICT"
    return _error_response(
        status_code=http_exc.status_code,
        code=code,
        message=message,
    )


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast(RequestValidationError, exc)
    return _error_response(
        status_code=400,
        code="INVALID_REQUEST",
        message="request validation failed",
        details={"errors": validation_exc.errors()},
    )


# Starlette resolves handlers along the exception's MRO, so subclasses listed
# here win over their base class entries.
_MAPPINGS: list[tuple[type[Exception], int, str]] = [
    (EmptyOrderError, 400, "EMPTY_ORDER"),
    (InvalidOrderLineError, 400, "INVALID_ORDER_LINE"),
    (UnknownMenuItemError, 400, "UNKNOWN_MENU_ITEM"),
    (InvalidMenuItemError, 400, "INVALID_MENU_ITEM"),
    (InvalidTableError, 400, "INVALID_TABLE"),
    (TableSelectionError, 400, "INVALID_TABLE_SELECTION"),
    (KitchenTicketNotAllowedError, 400, "KITCHEN_TICKET_NOT_ALLOWED"),
    (SettlementNotAllowedError, 400, "SETTLEMENT_NOT_ALLOWED"),
    (InvalidReportWindowError, 400, "INVALID_REPORT_WINDOW"),
    (InvalidReportFilterError, 400, "INVALID_REPORT_FILTER"),
    (TableNotAvailableError, 409, "TABLE_NOT_AVAILABLE"),
    (ValidationError, 400, "VALIDATION_ERROR"),
    (OrderNotFoundError, 404, "ORDER_NOT_FOUND"),
    (TableNotFoundError, 404, "TABLE_NOT_FOUND"),
    (MenuItemNotFoundError, 404, "MENU_ITEM_NOT_FOUND"),
    (OpenOrderNotFoundError, 404, "OPEN_ORDER_NOT_FOUND"),
    (UserNotFoundError, 404, "USER_NOT_FOUND"),
    (NotFoundError, 404, "NOT_FOUND"),
    (OrderNotPendingError, 409, "ORDER_NOT_PENDING"),
    (OrderConflictError, 409, "CONFLICT"),
    (TableInUseError, 409, "TABLE_IN_USE"),
    (ConflictError, 409, "CONFLICT"),
    (PermissionDeniedError, 403, "PERMISSION_DENIED"),
    (PersistenceError, 503, "PERSISTENCE_UNAVAILABLE"),
]


def register_exception_handlers(app: FastAPI) -> None:
    for exc_cls, status_code, code in _MAPPINGS:
        app.add_exception_handler(exc_cls, _exception_handler(status_code, code))

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
