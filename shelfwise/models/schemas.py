"""Pydantic schemas for API validation and serialization."""

import uuid
from datetime import date, datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from shelfwise.constants import RATING_MAX, RATING_MIN

# Re-export enums from the shelf model (avoid duplication)
from shelfwise.models.shelf import ShelfAction as ShelfActionEnum
from shelfwise.models.shelf import ShelfType as ShelfTypeEnum


# Catalog schemas
class CatalogDetails(BaseModel):
    """Descriptive payload of a catalog item, as fetched from the catalog API."""

    catalog_id: str = Field(min_length=1)
    title: str
    authors: list[str] | None = None
    description: str | None = None
    cover_image_url: str | None = None
    small_thumbnail_url: str | None = None
    publisher: str | None = None
    publication_date: str | None = None  # Raw catalog value, normalized on mirror
    page_count: int | None = None
    language: str | None = None
    avg_rating: float | None = None
    ratings_count: int | None = None
    preview_link: str | None = None
    info_link: str | None = None
    isbn: str | None = None
    categories: list[str] | None = None


class CatalogSearchPage(BaseModel):
    """One page of catalog search results."""

    items: list[CatalogDetails]
    total_count: int
    page: int


# Book references
class LocalBookRef(BaseModel):
    """Reference to a book already mirrored locally."""

    kind: Literal["local"] = "local"
    book_id: uuid.UUID


class CatalogRef(BaseModel):
    """Reference to a catalog item, with its details when it may need mirroring."""

    kind: Literal["catalog"] = "catalog"
    catalog_id: str = Field(min_length=1)
    details: CatalogDetails | None = None


BookRef = Annotated[LocalBookRef | CatalogRef, Field(discriminator="kind")]


# Action requests
class EnsureBookRequest(BaseModel):
    """Mirror a catalog item locally."""

    catalog_id: str = Field(min_length=1)
    details: CatalogDetails


class SetShelfRequest(BaseModel):
    """Move a book onto a shelf, or remove it."""

    shelf_entry_id: uuid.UUID | None = None
    shelf_type: ShelfActionEnum
    book: BookRef | None = None


class SetReviewRequest(BaseModel):
    """Write, change or clear a rating/review."""

    book: BookRef
    review_text: str | None = None
    rating: int | None = Field(None, ge=RATING_MIN, le=RATING_MAX)
    shelf_entry_id: uuid.UUID | None = None


# Action results
class ActionResult(BaseModel):
    """Structured outcome of a mutating action; failures never raise."""

    success: bool
    message: str
    error: str | None = None


class EnsureBookResult(ActionResult):
    book_id: uuid.UUID | None = None


class ShelfResult(ActionResult):
    shelf_entry_id: uuid.UUID | None = None
    book_id: uuid.UUID | None = None


class ReviewResult(ActionResult):
    review_id: uuid.UUID | None = None
    shelf_entry_id: uuid.UUID | None = None
    book_id: uuid.UUID | None = None


class BookReview(BaseModel):
    """A review annotated with the reviewer's display name."""

    id: uuid.UUID
    user_id: str
    book_id: uuid.UUID
    user_name: str
    rating: int | None = None
    review_text: str | None = None
    created_at: datetime
    updated_at: datetime


class ReviewsResult(ActionResult):
    reviews: list[BookReview] = []


# Library read schemas
class GenreRead(BaseModel):
    """Genre read schema."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str


class BookRead(BaseModel):
    """Book read schema."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    catalog_id: str
    title: str
    authors: list[str] | None = None
    description: str | None = None
    cover_image_url: str | None = None
    small_thumbnail_url: str | None = None
    publisher: str | None = None
    publication_date: date | None = None
    page_count: int | None = None
    language: str | None = None
    avg_rating: float | None = None
    ratings_count: int | None = None
    preview_link: str | None = None
    info_link: str | None = None
    isbn: str | None = None
    genres: list[GenreRead] = []


class ReviewRead(BaseModel):
    """Review read schema."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    rating: int | None = None
    review_text: str | None = None
    created_at: datetime
    updated_at: datetime


class ShelfEntryRead(BaseModel):
    """Shelf entry read schema."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    book_id: uuid.UUID
    shelf_type: ShelfTypeEnum
    date_added: datetime
    date_started: datetime | None = None
    date_finished: datetime | None = None
    review_id: uuid.UUID | None = None
    review: ReviewRead | None = None


class ShelfBookRead(ShelfEntryRead):
    """Shelf entry with its book, for the user's library listing."""

    book: BookRead


class ShelfCounts(BaseModel):
    """Number of books per shelf."""

    want_to_read: int = 0
    currently_reading: int = 0
    read: int = 0
    total: int = 0


class BookDetail(BaseModel):
    """A book merged with the caller's shelf state."""

    book: BookRead
    is_on_shelf: bool = False
    shelf_entry: ShelfEntryRead | None = None


# Profile schemas
class ProfileUpdate(BaseModel):
    """Profile update schema."""

    full_name: str = Field(min_length=1, max_length=255)


class ProfileRead(BaseModel):
    """Profile read schema."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    full_name: str | None = None
    email: str | None = None
