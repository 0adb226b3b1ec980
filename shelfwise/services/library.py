"""Library actions: the shelf-and-review operations as structured results.

Each action runs one unit of work on the request's session. Failures never
raise to the caller: they are rolled back, logged and reported as
``success=False`` with a message and an error code.
"""

import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shelfwise.db import crud
from shelfwise.errors import LibraryError, UpstreamFailure
from shelfwise.models.schemas import (
    BookRef,
    CatalogDetails,
    EnsureBookResult,
    ReviewResult,
    ReviewsResult,
    ShelfResult,
)
from shelfwise.models.shelf import ShelfAction
from shelfwise.utils.logging import get_logger

logger = get_logger(__name__)


async def _as_library_error(db: AsyncSession, e: Exception, operation: str) -> LibraryError:
    """Roll back and normalize a failure into a LibraryError."""
    try:
        await db.rollback()
    except SQLAlchemyError as rollback_error:
        logger.error(f"{operation}: rollback failed: {rollback_error}")

    if isinstance(e, LibraryError):
        logger.warning(f"{operation} failed ({e.code}): {e.message}")
        return e
    logger.exception(f"{operation}: database error")
    return UpstreamFailure(f"Database error: {e}")


async def ensure_book_exists(
    db: AsyncSession,
    catalog_id: str,
    details: CatalogDetails,
) -> EnsureBookResult:
    """Mirror a catalog item locally (idempotent)."""
    try:
        book_id = await crud.ensure_book_exists(db, catalog_id, details)
    except (LibraryError, SQLAlchemyError) as e:
        error = await _as_library_error(db, e, "ensure_book_exists")
        return EnsureBookResult(success=False, message=error.message, error=error.code)

    return EnsureBookResult(
        success=True,
        message="Book and genres processed successfully.",
        book_id=book_id,
    )


async def set_shelf(
    db: AsyncSession,
    user_id: str | None,
    shelf_entry_id: uuid.UUID | None,
    action: ShelfAction,
    book_ref: BookRef | None = None,
) -> ShelfResult:
    """Add a book to a shelf, move it to another shelf, or remove it."""
    try:
        entry_id, book_id = await crud.set_shelf(db, user_id, shelf_entry_id, action, book_ref)
        await db.commit()
    except (LibraryError, SQLAlchemyError) as e:
        error = await _as_library_error(db, e, "set_shelf")
        return ShelfResult(success=False, message=error.message, error=error.code)

    if action is ShelfAction.REMOVED:
        message = "Book removed from shelf successfully."
    elif shelf_entry_id is not None:
        message = "Shelf updated successfully."
    else:
        message = "Book added to shelf successfully."
    return ShelfResult(success=True, message=message, shelf_entry_id=entry_id, book_id=book_id)


async def set_review(
    db: AsyncSession,
    user_id: str | None,
    book_ref: BookRef,
    review_text: str | None,
    rating: int | None,
    shelf_entry_id: uuid.UUID | None = None,
) -> ReviewResult:
    """Write, change or clear a review, shelving the book if needed."""
    try:
        review_id, entry_id, book_id = await crud.set_review(
            db, user_id, book_ref, review_text, rating, shelf_entry_id
        )
        await db.commit()
    except (LibraryError, SQLAlchemyError) as e:
        error = await _as_library_error(db, e, "set_review")
        return ReviewResult(success=False, message=error.message, error=error.code)

    return ReviewResult(
        success=True,
        message="Review and shelf updated successfully.",
        review_id=review_id,
        shelf_entry_id=entry_id,
        book_id=book_id,
    )


async def get_reviews(db: AsyncSession, book_id: uuid.UUID) -> ReviewsResult:
    """List the written reviews of a book."""
    try:
        reviews = await crud.get_reviews(db, book_id)
    except SQLAlchemyError as e:
        error = await _as_library_error(db, e, "get_reviews")
        return ReviewsResult(success=False, message=error.message, error=error.code)

    return ReviewsResult(success=True, message="Reviews fetched successfully.", reviews=reviews)
