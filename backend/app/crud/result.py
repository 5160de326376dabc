"""Read-path results at the persistence boundary.

Read operations return a `StoreResult` instead of raising, so the resource
layer can tell "store unavailable" apart from "empty result" and pick a
fallback value explicitly. Write operations keep raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, TypeVar
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger("uvicorn.error")

T = TypeVar("T")

# asyncpg surfaces refused connections as plain OSError
STORE_ERRORS = (SQLAlchemyError, OSError)

_MISSING_TABLE_MARKERS = (
    "no such table",
    "does not exist",
    "undefinedtable",
    "doesn't exist",
)


def is_missing_table_error(exc: BaseException) -> bool:
    text = f"{type(exc).__name__} {exc}".lower()
    orig = getattr(exc, "orig", None)
    if orig is not None:
        text += f" {type(orig).__name__} {orig}".lower()
    return any(marker in text for marker in _MISSING_TABLE_MARKERS)


@dataclass
class StoreResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @classmethod
    def success(cls, value: T) -> "StoreResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> "StoreResult[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def missing_table(self) -> bool:
        return self.error is not None and is_missing_table_error(self.error)

    def value_or(self, default: T) -> T:
        return self.value if self.ok else default


async def capture_read(
    db: AsyncSession,
    read: Callable[[], Awaitable[T]],
) -> StoreResult[T]:
    """Run a read coroutine and capture store errors into a StoreResult."""
    try:
        return StoreResult.success(await read())
    except STORE_ERRORS as exc:
        await rollback_quietly(db)
        return StoreResult.failure(exc)


async def rollback_quietly(db: AsyncSession) -> None:
    """Reset the session after a failed statement; a dead connection is logged only."""
    try:
        await db.rollback()
    except STORE_ERRORS as exc:
        logger.debug("store-rollback-failed reason=%s", str(exc)[:180])


def describe_error(exc: BaseException) -> str:
    """First line of the error message, or the exception type when it has none."""
    message = str(exc).strip()
    return message.splitlines()[0][:300] if message else type(exc).__name__
