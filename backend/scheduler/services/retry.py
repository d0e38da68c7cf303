from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Tuple, Type, TypeVar

from scheduler.core.errors import (
    ClosureViolationError,
    DomainError,
    EventFullError,
    MissingLocationError,
    OrderAlreadyMaterializedError,
    OrderNotFoundError,
    OrderNotPaidError,
    UnsupportedProductCategoryError,
    WeekendViolationError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Failures that come out the same no matter how often we try
PERMANENT_ERRORS: Tuple[Type[DomainError], ...] = (
    ClosureViolationError,
    WeekendViolationError,
    OrderNotFoundError,
    OrderNotPaidError,
    MissingLocationError,
    OrderAlreadyMaterializedError,
    UnsupportedProductCategoryError,
    EventFullError,
)


async def retry_operation(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    delay: float = 1.0,
    permanent: Tuple[Type[BaseException], ...] = PERMANENT_ERRORS,
) -> T:
    """Run ``operation`` up to ``max_retries`` times with linear backoff.

    Waits ``delay * attempt`` seconds between attempts. Errors listed in
    ``permanent`` are raised straight away.
    """
    if max_retries < 1:
        raise ValueError("max_retries must be at least 1")

    last_error: Exception | None = None
    for attempt in range(1, max_retries + 1):
        try:
            return await operation()
        except permanent:
            raise
        except Exception as exc:
            last_error = exc
            logger.warning(
                "Operation failed on attempt %s/%s: %s", attempt, max_retries, exc
            )
            if attempt < max_retries:
                await asyncio.sleep(delay * attempt)

    raise last_error
