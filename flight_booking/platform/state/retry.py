"""
Bounded retry for transient store failures.

Only TransientStoreError is retried. Lock contention and business rejections
are values or typed errors and pass straight through on the first attempt.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from flight_booking.platform.exception.exceptions import (
    StoreUnavailableError,
    TransientStoreError,
)
from flight_booking.platform.logging.loguru_io import Logger


_T = TypeVar('_T')


async def retry_transient(
    operation: Callable[[], Awaitable[_T]],
    *,
    attempts: int,
    backoff_seconds: float,
    operation_name: str,
) -> _T:
    last_error: TransientStoreError | None = None
    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except TransientStoreError as e:
            last_error = e
            Logger.base.warning(
                f'⚠️ [RETRY] {operation_name} attempt {attempt}/{attempts} failed: {e}'
            )
            if attempt < attempts:
                await asyncio.sleep(backoff_seconds * attempt)

    raise StoreUnavailableError(
        f'{operation_name} failed after {attempts} attempts: {last_error}'
    ) from last_error
