"""Tests for the library actions (structured results, never raising)."""

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from shelfwise.models.book import Book
from shelfwise.models.review import Review
from shelfwise.models.schemas import CatalogRef, LocalBookRef
from shelfwise.models.shelf import ShelfAction, ShelfEntry
from shelfwise.services import library


class TestEnsureBookExists:
    @pytest.mark.asyncio
    async def test_success(self, db_session: AsyncSession, make_details):
        result = await library.ensure_book_exists(db_session, "vol-1", make_details("vol-1"))

        assert result.success is True
        assert result.book_id is not None
        assert result.message == "Book and genres processed successfully."

    @pytest.mark.asyncio
    async def test_same_book_twice(self, db_session: AsyncSession, make_details):
        first = await library.ensure_book_exists(db_session, "vol-1", make_details("vol-1"))
        second = await library.ensure_book_exists(db_session, "vol-1", make_details("vol-1"))

        assert first.book_id == second.book_id
        count = await db_session.execute(select(func.count()).select_from(Book))
        assert count.scalar_one() == 1

    @pytest.mark.asyncio
    async def test_validation_failure_is_reported(self, db_session: AsyncSession, make_details):
        result = await library.ensure_book_exists(db_session, "vol-1", make_details("vol-2"))

        assert result.success is False
        assert result.error == "library.invalid"
        assert result.book_id is None

    @pytest.mark.asyncio
    async def test_database_error_is_reported(self, db_session: AsyncSession, make_details):
        failure = OperationalError("INSERT INTO books", {}, Exception("disk I/O error"))
        with patch(
            "shelfwise.db.crud.books.find_or_create",
            new_callable=AsyncMock,
            side_effect=failure,
        ):
            result = await library.ensure_book_exists(db_session, "vol-1", make_details("vol-1"))

        assert result.success is False
        assert result.error == "library.upstream"
        assert "Failed to add book details to database" in result.message


class TestSetShelf:
    @pytest.mark.asyncio
    async def test_add_move_remove_messages(
        self, db_session: AsyncSession, user_id: str, test_book: Book
    ):
        ref = LocalBookRef(book_id=test_book.id)

        added = await library.set_shelf(db_session, user_id, None, ShelfAction.WANT_TO_READ, ref)
        moved = await library.set_shelf(db_session, user_id, added.shelf_entry_id, ShelfAction.READ)
        removed = await library.set_shelf(
            db_session, user_id, added.shelf_entry_id, ShelfAction.REMOVED
        )

        assert added.success and moved.success and removed.success
        assert added.message == "Book added to shelf successfully."
        assert moved.message == "Shelf updated successfully."
        assert moved.shelf_entry_id == added.shelf_entry_id
        assert removed.message == "Book removed from shelf successfully."
        assert removed.shelf_entry_id is None
        assert removed.book_id == test_book.id

    @pytest.mark.asyncio
    async def test_not_authenticated(self, db_session: AsyncSession, test_book: Book):
        result = await library.set_shelf(
            db_session, None, None, ShelfAction.READ, LocalBookRef(book_id=test_book.id)
        )

        assert result.success is False
        assert result.error == "library.not_authenticated"
        assert result.message == "User not authenticated."

    @pytest.mark.asyncio
    async def test_remove_unknown_entry(self, db_session: AsyncSession, user_id: str):
        result = await library.set_shelf(db_session, user_id, uuid.uuid4(), ShelfAction.REMOVED)

        assert result.success is False
        assert result.error == "library.not_found"

    @pytest.mark.asyncio
    async def test_failed_shelving_keeps_mirrored_book(
        self, db_session: AsyncSession, user_id: str, make_details
    ):
        ref = CatalogRef(catalog_id="vol-3", details=make_details("vol-3"))
        with patch(
            "shelfwise.db.crud.shelves.add_to_shelf",
            new_callable=AsyncMock,
            side_effect=OperationalError("INSERT INTO bookshelves", {}, Exception("locked")),
        ):
            result = await library.set_shelf(db_session, user_id, None, ShelfAction.READ, ref)

        assert result.success is False
        assert result.error == "library.upstream"
        assert result.message.startswith("Database error:")
        books = await db_session.execute(select(Book.catalog_id))
        assert books.scalars().all() == ["vol-3"]
        entries = await db_session.execute(select(func.count()).select_from(ShelfEntry))
        assert entries.scalar_one() == 0


class TestSetReview:
    @pytest.mark.asyncio
    async def test_success(self, db_session: AsyncSession, user_id: str, test_book: Book):
        result = await library.set_review(
            db_session, user_id, LocalBookRef(book_id=test_book.id), "A review", 4
        )

        assert result.success is True
        assert result.message == "Review and shelf updated successfully."
        assert result.review_id is not None
        assert result.shelf_entry_id is not None
        assert result.book_id == test_book.id

    @pytest.mark.asyncio
    async def test_round_trip_and_clear(
        self, db_session: AsyncSession, user_id: str, test_book: Book
    ):
        ref = LocalBookRef(book_id=test_book.id)
        await library.set_review(db_session, user_id, ref, "A review", 4)

        listed = await library.get_reviews(db_session, test_book.id)
        assert listed.success is True
        assert [(r.rating, r.review_text) for r in listed.reviews] == [(4, "A review")]

        cleared = await library.set_review(db_session, user_id, ref, None, None)
        assert cleared.success is True
        assert cleared.review_id is None

        listed = await library.get_reviews(db_session, test_book.id)
        assert listed.reviews == []

    @pytest.mark.asyncio
    async def test_invalid_rating(self, db_session: AsyncSession, user_id: str, test_book: Book):
        result = await library.set_review(
            db_session, user_id, LocalBookRef(book_id=test_book.id), "x", 9
        )

        assert result.success is False
        assert result.error == "library.invalid"

    @pytest.mark.asyncio
    async def test_not_authenticated(self, db_session: AsyncSession, test_book: Book):
        result = await library.set_review(
            db_session, None, LocalBookRef(book_id=test_book.id), "x", 3
        )

        assert result.success is False
        assert result.error == "library.not_authenticated"

    @pytest.mark.asyncio
    async def test_failure_rolls_back_shelf_entry(
        self, db_session: AsyncSession, user_id: str, test_book: Book
    ):
        with patch(
            "shelfwise.db.crud.reviews._link_review",
            new_callable=AsyncMock,
            side_effect=OperationalError("UPDATE bookshelves", {}, Exception("locked")),
        ):
            result = await library.set_review(
                db_session, user_id, LocalBookRef(book_id=test_book.id), "x", 3
            )

        assert result.success is False
        entries = await db_session.execute(select(func.count()).select_from(ShelfEntry))
        reviews = await db_session.execute(select(func.count()).select_from(Review))
        assert entries.scalar_one() == 0
        assert reviews.scalar_one() == 0


class TestGetReviews:
    @pytest.mark.asyncio
    async def test_database_error_is_reported(self, db_session: AsyncSession):
        with patch(
            "shelfwise.db.crud.get_reviews",
            new_callable=AsyncMock,
            side_effect=OperationalError("SELECT", {}, Exception("gone")),
        ):
            result = await library.get_reviews(db_session, uuid.uuid4())

        assert result.success is False
        assert result.error == "library.upstream"
        assert result.reviews == []
