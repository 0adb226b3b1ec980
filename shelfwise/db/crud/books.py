"""Catalog mirror: local book records created on first reference."""

import re
import uuid
from collections.abc import Iterable
from datetime import date
from functools import partial

from sqlalchemy import insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shelfwise.db.crud.common import find_or_create
from shelfwise.errors import LibraryError, UpstreamFailure, ValidationFailure
from shelfwise.models.book import Book, Genre, books_genres
from shelfwise.models.schemas import CatalogDetails
from shelfwise.utils.logging import LogContext, get_logger

logger = get_logger(__name__)

_YEAR = re.compile(r"\d{4}")
_YEAR_MONTH = re.compile(r"\d{4}-\d{2}")
_FULL_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


def normalize_publication_date(raw: str | None) -> str | None:
    """Normalize a catalog publication date to ``YYYY-MM-DD``.

    ``2004`` -> ``2004-01-01``, ``2004-03`` -> ``2004-03-01``, full dates are
    kept. Anything else (``March 2004``, ``2004-13``) is dropped.
    """
    if not raw:
        return None
    value = raw.strip()

    if _YEAR.fullmatch(value):
        candidate = f"{value}-01-01"
    elif _YEAR_MONTH.fullmatch(value):
        candidate = f"{value}-01"
    elif _FULL_DATE.fullmatch(value):
        candidate = value
    else:
        logger.warning(f"Unrecognized publication_date format: {raw!r}")
        return None

    try:
        date.fromisoformat(candidate)
    except ValueError:
        logger.warning(f"Invalid publication_date: {raw!r}")
        return None
    return candidate


def normalize_genre_name(name: str) -> str:
    """Trim a catalog category and strip its trailing slashes."""
    return name.strip().rstrip("/").strip()


async def get_book(db: AsyncSession, book_id: uuid.UUID) -> Book | None:
    """Get a book by local id, with its genres."""
    result = await db.execute(
        select(Book).where(Book.id == book_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def book_exists(db: AsyncSession, book_id: uuid.UUID) -> bool:
    result = await db.execute(select(Book.id).where(Book.id == book_id))
    return result.scalar_one_or_none() is not None


async def get_book_id_by_catalog_id(db: AsyncSession, catalog_id: str) -> uuid.UUID | None:
    result = await db.execute(select(Book.id).where(Book.catalog_id == catalog_id))
    return result.scalar_one_or_none()


async def _get_genre_id(db: AsyncSession, name: str) -> uuid.UUID | None:
    result = await db.execute(select(Genre.id).where(Genre.name == name))
    return result.scalar_one_or_none()


async def _get_book_genre(db: AsyncSession, book_id: uuid.UUID, genre_id: uuid.UUID):
    result = await db.execute(
        select(books_genres.c.book_id).where(
            books_genres.c.book_id == book_id,
            books_genres.c.genre_id == genre_id,
        )
    )
    return result.first()


async def get_or_create_genre(db: AsyncSession, name: str) -> uuid.UUID:
    """Get existing genre id or create the genre."""
    genre_id, created = await find_or_create(
        db,
        find=partial(_get_genre_id, db, name),
        insert_stmt=insert(Genre).values(id=uuid.uuid4(), name=name),
        what=f"genre {name!r}",
    )
    if created:
        logger.debug(f"Created genre {name!r} ({genre_id})")
    return genre_id


async def link_book_genres(
    db: AsyncSession,
    book_id: uuid.UUID,
    categories: Iterable[str],
) -> list[str]:
    """Link a book to a genre per catalog category.

    Best effort: a genre that fails to resolve or link is logged and skipped.

    Returns:
        Names of the genres the book is linked to afterwards
    """
    log = LogContext(logger, book=book_id)
    linked: list[str] = []

    for category in categories:
        name = normalize_genre_name(category)
        if not name or name in linked:
            continue
        try:
            # One savepoint per genre: a failed lookup must not abort the book's transaction.
            async with db.begin_nested():
                genre_id = await get_or_create_genre(db, name)
                _, created = await find_or_create(
                    db,
                    find=partial(_get_book_genre, db, book_id, genre_id),
                    insert_stmt=books_genres.insert().values(book_id=book_id, genre_id=genre_id),
                    what=f"book-genre link {name!r}",
                )
        except (SQLAlchemyError, LibraryError) as e:
            log.error(f"Skipping genre {name!r}: {e}")
            continue
        if created:
            log.debug(f"Linked genre {name!r}")
        linked.append(name)

    return linked


def _book_values(book_id: uuid.UUID, catalog_id: str, details: CatalogDetails) -> dict:
    publication_date = normalize_publication_date(details.publication_date)
    return {
        "id": book_id,
        "catalog_id": catalog_id,
        "title": details.title,
        "authors": details.authors or None,
        "description": details.description or None,
        "cover_image_url": details.cover_image_url or None,
        "small_thumbnail_url": details.small_thumbnail_url or None,
        "publisher": details.publisher or None,
        "publication_date": date.fromisoformat(publication_date) if publication_date else None,
        "page_count": details.page_count or None,
        "language": details.language or None,
        "avg_rating": details.avg_rating,
        "ratings_count": details.ratings_count,
        "preview_link": details.preview_link or None,
        "info_link": details.info_link or None,
        "isbn": details.isbn or None,
    }


async def ensure_book_exists(
    db: AsyncSession,
    catalog_id: str,
    details: CatalogDetails,
) -> uuid.UUID:
    """Return the local book id for a catalog item, mirroring it on first reference.

    Existing books are returned as-is (descriptive fields are not refreshed).
    Genre links are reconciled on every call so an interrupted earlier mirror
    gets completed. Commits on success.

    Raises:
        ValidationFailure: details describe a different catalog item
        UpstreamFailure: the existence check or the book insert failed
    """
    if details.catalog_id != catalog_id:
        raise ValidationFailure(
            f"Book details are for {details.catalog_id!r}, not {catalog_id!r}."
        )

    log = LogContext(logger, catalog_id=catalog_id)
    try:
        book_id, created = await find_or_create(
            db,
            find=partial(get_book_id_by_catalog_id, db, catalog_id),
            insert_stmt=insert(Book).values(**_book_values(uuid.uuid4(), catalog_id, details)),
            what=f"book {catalog_id!r}",
        )
    except SQLAlchemyError as e:
        await db.rollback()
        log.error(f"Failed to mirror book: {e}")
        raise UpstreamFailure(f"Failed to add book details to database: {e}") from e

    if created:
        log.info(f"Mirrored new book {book_id}")
    else:
        log.debug(f"Book already mirrored as {book_id}")

    if details.categories:
        await link_book_genres(db, book_id, details.categories)

    await db.commit()
    return book_id
