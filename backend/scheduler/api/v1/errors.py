from __future__ import annotations

from fastapi import HTTPException

from scheduler.core.errors import DomainError, ErrorCode

_STATUS_BY_CODE = {
    ErrorCode.CLOSURE_VIOLATION: 409,
    ErrorCode.WEEKEND_VIOLATION: 409,
    ErrorCode.EVENT_FULL: 409,
    ErrorCode.EVENT_NOT_CANCELLABLE: 409,
    ErrorCode.ORDER_ALREADY_MATERIALIZED: 409,
    ErrorCode.ORDER_NOT_PAID: 409,
    ErrorCode.ORDER_NOT_FOUND: 404,
    ErrorCode.EVENT_NOT_FOUND: 404,
    ErrorCode.MISSING_LOCATION: 400,
    ErrorCode.INVALID_EVENT_WINDOW: 400,
    ErrorCode.INVALID_TEMPLATE: 400,
    ErrorCode.INVALID_TIME_OF_DAY: 400,
    ErrorCode.UNSUPPORTED_PRODUCT_CATEGORY: 400,
}


def http_error(error: DomainError) -> HTTPException:
    """Map a domain error to an HTTPException without leaking internals."""
    return HTTPException(
        status_code=_STATUS_BY_CODE.get(error.code, 400),
        detail={"code": error.code.value, "message": error.message},
    )
