"""Domain error codes for the scheduling engine."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """Domain error codes."""

    CLOSURE_VIOLATION = "CLOSURE_VIOLATION"
    WEEKEND_VIOLATION = "WEEKEND_VIOLATION"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    ORDER_NOT_PAID = "ORDER_NOT_PAID"
    ORDER_ALREADY_MATERIALIZED = "ORDER_ALREADY_MATERIALIZED"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    EVENT_FULL = "EVENT_FULL"
    EVENT_NOT_CANCELLABLE = "EVENT_NOT_CANCELLABLE"
    MISSING_LOCATION = "MISSING_LOCATION"
    INVALID_EVENT_WINDOW = "INVALID_EVENT_WINDOW"
    INVALID_TEMPLATE = "INVALID_TEMPLATE"
    INVALID_TIME_OF_DAY = "INVALID_TIME_OF_DAY"
    UNSUPPORTED_PRODUCT_CATEGORY = "UNSUPPORTED_PRODUCT_CATEGORY"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ClosureViolationError(DomainError):
    """Raised when an event would land on a business closure date."""

    def __init__(self, day: date, closure_name: Optional[str] = None) -> None:
        super().__init__(
            code=ErrorCode.CLOSURE_VIOLATION,
            message=f"Cannot create event on {closure_name or 'a business closure date'}",
        )
        self.day = day
        self.closure_name = closure_name


class WeekendViolationError(DomainError):
    """Raised when a camp is requested on a Saturday or Sunday."""

    def __init__(self, day: date) -> None:
        super().__init__(
            code=ErrorCode.WEEKEND_VIOLATION,
            message="Cannot create camp events on weekends",
        )
        self.day = day


class OrderNotFoundError(DomainError):
    def __init__(self, order_id: str) -> None:
        super().__init__(code=ErrorCode.ORDER_NOT_FOUND, message="Order not found")
        self.order_id = order_id


class OrderNotPaidError(DomainError):
    def __init__(self, order_id: str, status: str) -> None:
        super().__init__(
            code=ErrorCode.ORDER_NOT_PAID,
            message=f"Order is {status}; only paid orders can be scheduled",
        )
        self.order_id = order_id
        self.status = status


class OrderAlreadyMaterializedError(DomainError):
    """Raised when an order was already turned into events under a different item set,
    or a concurrent run won the race for the same order."""

    def __init__(self, order_id: str) -> None:
        super().__init__(
            code=ErrorCode.ORDER_ALREADY_MATERIALIZED,
            message="Order has already been scheduled",
        )
        self.order_id = order_id


class EventNotFoundError(DomainError):
    def __init__(self, event_id: str) -> None:
        super().__init__(code=ErrorCode.EVENT_NOT_FOUND, message="Event not found")
        self.event_id = event_id


class EventFullError(DomainError):
    """Raised when a seat reservation would push an event past its capacity."""

    def __init__(self, event_id: str) -> None:
        super().__init__(code=ErrorCode.EVENT_FULL, message="Event is at capacity")
        self.event_id = event_id


class EventNotCancellableError(DomainError):
    def __init__(self, event_id: str, status: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_CANCELLABLE,
            message=f"Cannot cancel an event that is {status.lower()}",
        )
        self.event_id = event_id
        self.status = status


class MissingLocationError(DomainError):
    """Raised when no location was supplied or the supplied one does not exist."""

    def __init__(self, location_id: Optional[str] = None) -> None:
        super().__init__(
            code=ErrorCode.MISSING_LOCATION,
            message="Location not found" if location_id else "A location is required",
        )
        self.location_id = location_id


class InvalidEventWindowError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_WINDOW,
            message="Event must end after it starts",
        )


class InvalidTemplateError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_TEMPLATE, message=message)


class InvalidTimeOfDayError(DomainError):
    def __init__(self, value: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_TIME_OF_DAY,
            message="Invalid time format (HH:MM)",
        )
        self.value = value


class UnsupportedProductCategoryError(DomainError):
    def __init__(self, category: str) -> None:
        super().__init__(
            code=ErrorCode.UNSUPPORTED_PRODUCT_CATEGORY,
            message=f"Unsupported product category: {category}",
        )
        self.category = category
