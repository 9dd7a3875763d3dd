from __future__ import annotations

from typing import Any


class ApplicationError(Exception):
    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = details or {}


class ValidationError(ApplicationError):
    pass


class NotFoundError(ApplicationError):
    pass


class ConflictError(ApplicationError):
    pass


class PermissionDeniedError(ApplicationError):
    pass


class PersistenceError(ApplicationError):
    pass


class EmptyOrderError(ValidationError):
    pass


class InvalidOrderLineError(ValidationError):
    pass


class UnknownMenuItemError(ValidationError):
    pass


class InvalidMenuItemError(ValidationError):
    pass


class InvalidTableError(ValidationError):
    pass


class TableSelectionError(ValidationError):
    pass


class TableNotAvailableError(ValidationError):
    pass


class KitchenTicketNotAllowedError(ValidationError):
    pass


class InvalidReportWindowError(ValidationError):
    pass


class OrderNotFoundError(NotFoundError):
    pass


class TableNotFoundError(NotFoundError):
    pass


class MenuItemNotFoundError(NotFoundError):
    pass


class OpenOrderNotFoundError(NotFoundError):
    pass


class OrderNotPendingError(ConflictError):
    pass


class OrderConflictError(ConflictError):
    pass


class TableInUseError(ConflictError):
    pass


class SettlementNotAllowedError(ValidationError):
    pass


class InvalidReportFilterError(ValidationError):
    pass


class UserNotFoundError(NotFoundError):
    pass
