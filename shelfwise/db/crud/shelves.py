"""Shelf manager: a user's shelf membership for a book."""

import uuid
from collections.abc import Sequence
from functools import partial

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from shelfwise.db.crud.books import book_exists, ensure_book_exists, get_book, get_book_id_by_catalog_id
from shelfwise.db.crud.common import find_or_create
from shelfwise.errors import NotAuthenticated, NotFound, ValidationFailure
from shelfwise.models.base import utcnow
from shelfwise.models.schemas import BookDetail, BookRead, BookRef, CatalogRef, LocalBookRef, ShelfEntryRead
from shelfwise.models.shelf import ShelfAction, ShelfEntry, ShelfType
from shelfwise.utils.logging import LogContext, get_logger

logger = get_logger(__name__)


async def get_shelf_entry(
    db: AsyncSession,
    entry_id: uuid.UUID,
    user_id: str,
) -> ShelfEntry | None:
    """Get a shelf entry by ID with user isolation."""
    result = await db.execute(
        select(ShelfEntry)
        .where(ShelfEntry.id == entry_id, ShelfEntry.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_shelf_entry_for_book(
    db: AsyncSession,
    user_id: str,
    book_id: uuid.UUID,
) -> ShelfEntry | None:
    """Get the user's shelf entry for a book, if the book is shelved."""
    result = await db.execute(
        select(ShelfEntry)
        .where(ShelfEntry.user_id == user_id, ShelfEntry.book_id == book_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def resolve_book_id(
    db: AsyncSession,
    book_ref: BookRef | None,
    shelf_entry: ShelfEntry | None = None,
) -> uuid.UUID:
    """Turn a book reference (or an existing shelf entry) into a local book id.

    A catalog reference carrying details is mirrored on first use. Without
    details it only resolves if the book was mirrored before.
    """
    if isinstance(book_ref, LocalBookRef):
        if not await book_exists(db, book_ref.book_id):
            raise NotFound("Book not found.")
        book_id = book_ref.book_id
    elif isinstance(book_ref, CatalogRef):
        if book_ref.details is not None:
            book_id = await ensure_book_exists(db, book_ref.catalog_id, book_ref.details)
        else:
            found = await get_book_id_by_catalog_id(db, book_ref.catalog_id)
            if found is None:
                raise ValidationFailure("Missing book details for a book not yet in the library.")
            book_id = found
    elif shelf_entry is not None:
        return shelf_entry.book_id
    else:
        raise ValidationFailure(
            "Cannot perform shelf action without a book identifier or existing bookshelf entry."
        )

    if shelf_entry is not None and shelf_entry.book_id != book_id:
        raise ValidationFailure("Shelf entry belongs to a different book.")
    return book_id


async def add_to_shelf(
    db: AsyncSession,
    user_id: str,
    book_id: uuid.UUID,
    shelf_type: ShelfType,
) -> tuple[ShelfEntry, bool]:
    """Create the user's entry for a book, or return the one that already exists.

    Returns:
        Tuple of (entry, created)
    """
    return await find_or_create(
        db,
        find=partial(get_shelf_entry_for_book, db, user_id, book_id),
        insert_stmt=insert(ShelfEntry).values(
            id=uuid.uuid4(),
            user_id=user_id,
            book_id=book_id,
            shelf_type=shelf_type,
            date_added=utcnow(),
        ),
        what=f"shelf entry for book {book_id}",
    )


async def move_shelf_entry(
    db: AsyncSession,
    entry_id: uuid.UUID,
    user_id: str,
    shelf_type: ShelfType,
) -> None:
    """Move an entry to another shelf, resetting date_added."""
    result = await db.execute(
        update(ShelfEntry)
        .where(ShelfEntry.id == entry_id, ShelfEntry.user_id == user_id)
        .values(shelf_type=shelf_type, date_added=utcnow())
    )
    if result.rowcount == 0:
        raise NotFound("Shelf entry not found.")


async def remove_shelf_entry(
    db: AsyncSession,
    entry_id: uuid.UUID,
    user_id: str,
) -> None:
    """Delete an entry. Its review, if any, is kept."""
    result = await db.execute(
        delete(ShelfEntry).where(ShelfEntry.id == entry_id, ShelfEntry.user_id == user_id)
    )
    if result.rowcount == 0:
        raise NotFound("Book is not on your shelf to remove.")


async def set_shelf(
    db: AsyncSession,
    user_id: str | None,
    shelf_entry_id: uuid.UUID | None,
    action: ShelfAction,
    book_ref: BookRef | None = None,
) -> tuple[uuid.UUID | None, uuid.UUID]:
    """Put a book on a shelf, move it, or remove it.

    Returns:
        Tuple of (shelf entry id or None once removed, local book id)
    """
    if not user_id:
        raise NotAuthenticated()
    log = LogContext(logger, user=user_id)

    shelf_entry = None
    if shelf_entry_id is not None:
        shelf_entry = await get_shelf_entry(db, shelf_entry_id, user_id)
        if shelf_entry is None:
            raise NotFound("Could not find associated book for shelf action.")

    book_id = await resolve_book_id(db, book_ref, shelf_entry)
    log = log.bind(book=book_id)

    shelf_type = action.shelf_type
    if shelf_type is None:
        if shelf_entry is None:
            raise NotFound("Book is not on your shelf to remove.")
        await remove_shelf_entry(db, shelf_entry.id, user_id)
        log.info("Book removed from shelf")
        return None, book_id

    if shelf_entry is not None:
        await move_shelf_entry(db, shelf_entry.id, user_id, shelf_type)
        log.info(f"Shelf changed to {shelf_type.value}")
        return shelf_entry.id, book_id

    entry, created = await add_to_shelf(db, user_id, book_id, shelf_type)
    if created:
        log.info(f"Book added to {shelf_type.value}")
    else:
        await move_shelf_entry(db, entry.id, user_id, shelf_type)
        log.info(f"Book already shelved, moved to {shelf_type.value}")
    return entry.id, book_id


async def get_user_shelves(
    db: AsyncSession,
    user_id: str,
    shelf_type: ShelfType | None = None,
) -> Sequence[ShelfEntry]:
    """Get a user's shelf entries with their book and review, newest first."""
    query = (
        select(ShelfEntry)
        .options(selectinload(ShelfEntry.book), selectinload(ShelfEntry.review))
        .where(ShelfEntry.user_id == user_id)
        .order_by(ShelfEntry.date_added.desc(), ShelfEntry.id)
        .execution_options(populate_existing=True)
    )
    if shelf_type:
        query = query.where(ShelfEntry.shelf_type == shelf_type)

    result = await db.execute(query)
    return result.scalars().all()


async def get_shelf_counts(db: AsyncSession, user_id: str) -> dict[str, int]:
    """Count a user's books per shelf."""
    result = await db.execute(
        select(ShelfEntry.shelf_type, func.count(ShelfEntry.id))
        .where(ShelfEntry.user_id == user_id)
        .group_by(ShelfEntry.shelf_type)
    )
    counts = {shelf.value: 0 for shelf in ShelfType}
    for shelf_type, count in result.all():
        counts[shelf_type.value] = count
    counts["total"] = sum(counts.values())
    return counts


async def get_book_detail(
    db: AsyncSession,
    book_id: uuid.UUID,
    user_id: str | None = None,
) -> BookDetail | None:
    """Get a book merged with the caller's shelf entry and review."""
    book = await get_book(db, book_id)
    if book is None:
        return None

    entry = None
    if user_id:
        result = await db.execute(
            select(ShelfEntry)
            .options(selectinload(ShelfEntry.review))
            .where(ShelfEntry.user_id == user_id, ShelfEntry.book_id == book_id)
            .execution_options(populate_existing=True)
        )
        entry = result.scalar_one_or_none()

    return BookDetail(
        book=BookRead.model_validate(book),
        is_on_shelf=entry is not None,
        shelf_entry=ShelfEntryRead.model_validate(entry) if entry else None,
    )
