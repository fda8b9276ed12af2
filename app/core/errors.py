# app/core/errors.py
# -----------------------------------------------------------------------------
# Error kinds shared by the storage clients, the recommender and the routers
# - callers branch on the exception type, never on the message text
# -----------------------------------------------------------------------------
from __future__ import annotations

import asyncio
from typing import Awaitable, Optional, TypeVar

T = TypeVar("T")


class LocationServiceError(Exception):
    """Base error; carries the failing operation and its target index/table."""

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        target: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.target = target

    def __str__(self) -> str:
        where = ""
        if self.operation:
            where = self.operation
            if self.target:
                where += f" [{self.target}]"
            where += ": "
        return f"{where}{self.message}"


class InvalidRequest(LocationServiceError):
    pass


class NotFound(LocationServiceError):
    pass


class StorageUnavailable(LocationServiceError):
    pass


class QueryError(LocationServiceError):
    pass


class SchemaError(LocationServiceError):
    pass


class InternalError(LocationServiceError):
    pass


class Cancelled(LocationServiceError):
    pass


async def with_deadline(
    aw: Awaitable[T],
    deadline: Optional[float],
    *,
    operation: str,
    target: Optional[str] = None,
) -> T:
    """Await `aw`, failing with Cancelled once `deadline` seconds have passed."""
    if deadline is None:
        return await aw
    try:
        return await asyncio.wait_for(aw, timeout=deadline)
    except asyncio.TimeoutError as e:
        raise Cancelled(
            f"deadline of {deadline:g}s exceeded", operation=operation, target=target
        ) from e
