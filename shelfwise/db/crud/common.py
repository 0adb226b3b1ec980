"""Find-or-create helper backed by the store's uniqueness constraints."""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Executable

from shelfwise.errors import UniquenessConflict
from shelfwise.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


async def find_or_create(
    db: AsyncSession,
    find: Callable[[], Awaitable[T | None]],
    insert_stmt: Executable,
    what: str,
) -> tuple[T, bool]:
    """Look a row up, inserting it when missing.

    The insert runs in a savepoint. If a concurrent request inserted the same
    row between the lookup and the insert, the uniqueness violation is caught,
    the savepoint rolled back and the winning row re-read.

    Returns:
        Tuple of (row, created)
    """
    existing = await find()
    if existing is not None:
        return existing, False

    try:
        async with db.begin_nested():
            await db.execute(insert_stmt)
    except IntegrityError as e:
        logger.warning(f"Uniqueness conflict while creating {what}, re-reading: {e.orig}")
        existing = await find()
        if existing is None:
            raise UniquenessConflict(f"Could not create or re-read {what}.") from e
        return existing, False

    created = await find()
    if created is None:
        raise UniquenessConflict(f"Created {what} but could not read it back.")
    return created, True
