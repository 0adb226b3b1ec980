"""Review ledger: ratings and reviews linked one-to-one with shelf entries."""

import uuid

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from shelfwise.constants import (
    ANONYMOUS_REVIEWER_NAME,
    DEFAULT_REVIEW_SHELF,
    RATING_MAX,
    RATING_MIN,
)
from shelfwise.db.crud.shelves import add_to_shelf, get_shelf_entry, resolve_book_id
from shelfwise.errors import NotAuthenticated, NotFound, ValidationFailure
from shelfwise.models.base import utcnow
from shelfwise.models.profile import Profile
from shelfwise.models.review import Review
from shelfwise.models.schemas import BookRef, BookReview
from shelfwise.models.shelf import ShelfEntry, ShelfType
from shelfwise.utils.logging import LogContext, get_logger

logger = get_logger(__name__)


def clean_review_text(review_text: str | None) -> str | None:
    """Blank text counts as no text."""
    if review_text is None or not review_text.strip():
        return None
    return review_text


def has_content(review_text: str | None, rating: int | None) -> bool:
    """A review is worth keeping if it has a rating or non-blank text."""
    return rating is not None or clean_review_text(review_text) is not None


async def find_unlinked_review(
    db: AsyncSession,
    user_id: str,
    book_id: uuid.UUID,
) -> Review | None:
    """Find a review of the user's left behind when the book was unshelved."""
    linked = select(ShelfEntry.review_id).where(ShelfEntry.review_id.is_not(None))
    result = await db.execute(
        select(Review)
        .where(
            Review.user_id == user_id,
            Review.book_id == book_id,
            Review.id.not_in(linked),
        )
        .order_by(Review.updated_at.desc())
        .limit(1)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _update_review(
    db: AsyncSession,
    review_id: uuid.UUID,
    user_id: str,
    review_text: str | None,
    rating: int | None,
) -> bool:
    result = await db.execute(
        update(Review)
        .where(Review.id == review_id, Review.user_id == user_id)
        .values(rating=rating, review_text=review_text, updated_at=utcnow())
    )
    return result.rowcount > 0


async def _link_review(
    db: AsyncSession,
    entry_id: uuid.UUID,
    user_id: str,
    review_id: uuid.UUID | None,
) -> None:
    result = await db.execute(
        update(ShelfEntry)
        .where(ShelfEntry.id == entry_id, ShelfEntry.user_id == user_id)
        .values(review_id=review_id)
    )
    if result.rowcount == 0:
        raise NotFound("Failed to link review to bookshelf: shelf entry not found.")


async def set_review(
    db: AsyncSession,
    user_id: str | None,
    book_ref: BookRef,
    review_text: str | None,
    rating: int | None,
    shelf_entry_id: uuid.UUID | None = None,
) -> tuple[uuid.UUID | None, uuid.UUID, uuid.UUID]:
    """Write, change or clear the user's review of a book.

    Reviewing a book that is not shelved puts it on the "read" shelf. Empty
    content (no rating, blank text) deletes the review instead of storing
    it. The shelf entry's review_id is always written back, so the entry and
    the review are either linked or both absent.

    Returns:
        Tuple of (review id or None, shelf entry id, local book id)
    """
    if not user_id:
        raise NotAuthenticated()
    if rating is not None and not RATING_MIN <= rating <= RATING_MAX:
        raise ValidationFailure(f"Rating must be between {RATING_MIN} and {RATING_MAX}.")

    shelf_entry = None
    if shelf_entry_id is not None:
        shelf_entry = await get_shelf_entry(db, shelf_entry_id, user_id)
        if shelf_entry is None:
            raise NotFound("Failed to retrieve review data: shelf entry not found.")

    book_id = await resolve_book_id(db, book_ref, shelf_entry)
    log = LogContext(logger, user=user_id, book=book_id)

    if shelf_entry is None:
        shelf_type = ShelfType(DEFAULT_REVIEW_SHELF)
        shelf_entry, created = await add_to_shelf(db, user_id, book_id, shelf_type)
        if created:
            log.info(f"Review shelved book on {shelf_type.value} ({shelf_entry.id})")

    entry_id = shelf_entry.id
    current_review_id = shelf_entry.review_id
    text = clean_review_text(review_text)

    if not has_content(review_text, rating):
        # Unlink before deleting so the entry never points at a missing review
        await _link_review(db, entry_id, user_id, None)
        if current_review_id is not None:
            await db.execute(
                delete(Review).where(Review.id == current_review_id, Review.user_id == user_id)
            )
            log.info(f"Review {current_review_id} deleted (no content)")
        return None, entry_id, book_id

    review_id = None
    if current_review_id is not None and await _update_review(
        db, current_review_id, user_id, text, rating
    ):
        review_id = current_review_id
        log.info(f"Review {review_id} updated")

    if review_id is None:
        retained = await find_unlinked_review(db, user_id, book_id)
        if retained is not None:
            await _update_review(db, retained.id, user_id, text, rating)
            review_id = retained.id
            log.info(f"Retained review {review_id} relinked and updated")
        else:
            review_id = uuid.uuid4()
            now = utcnow()
            await db.execute(
                insert(Review).values(
                    id=review_id,
                    user_id=user_id,
                    book_id=book_id,
                    rating=rating,
                    review_text=text,
                    created_at=now,
                    updated_at=now,
                )
            )
            log.info(f"Review {review_id} created")

    await _link_review(db, entry_id, user_id, review_id)
    return review_id, entry_id, book_id


async def get_reviews(db: AsyncSession, book_id: uuid.UUID) -> list[BookReview]:
    """Get every written review of a book, newest first, with reviewer names."""
    result = await db.execute(
        select(Review, Profile.full_name)
        .outerjoin(Profile, Profile.id == Review.user_id)
        .where(Review.book_id == book_id, Review.review_text.is_not(None))
        .order_by(Review.created_at.desc(), Review.id)
        .execution_options(populate_existing=True)
    )
    return [
        BookReview(
            id=review.id,
            user_id=review.user_id,
            book_id=review.book_id,
            user_name=full_name or ANONYMOUS_REVIEWER_NAME,
            rating=review.rating,
            review_text=review.review_text,
            created_at=review.created_at,
            updated_at=review.updated_at,
        )
        for review, full_name in result.all()
    ]
