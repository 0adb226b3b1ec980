"""Book model and genre entities (shared across users)."""

import uuid
from datetime import date

from sqlalchemy import (
    JSON,
    Column,
    Date,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shelfwise.models.base import Base, TimestampMixin

# Association table; the composite primary key doubles as the uniqueness guard
books_genres = Table(
    "books_genres",
    Base.metadata,
    Column("book_id", Uuid, ForeignKey("books.id", ondelete="CASCADE"), primary_key=True),
    Column("genre_id", Uuid, ForeignKey("genres.id", ondelete="CASCADE"), primary_key=True),
)


class Genre(Base):
    """Genre entity, named after a catalog category."""

    __tablename__ = "genres"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Genre(id={self.id}, name={self.name})>"


class Book(Base, TimestampMixin):
    """Local mirror of a catalog item, created on first reference."""

    __tablename__ = "books"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    catalog_id: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)

    # Mirrored at creation time, never refreshed
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    authors: Mapped[list | None] = mapped_column(JSON, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    cover_image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    small_thumbnail_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    publisher: Mapped[str | None] = mapped_column(String(255), nullable=True)
    publication_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    page_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    language: Mapped[str | None] = mapped_column(String(20), nullable=True)
    avg_rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    ratings_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    preview_link: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    info_link: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    isbn: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)

    genres: Mapped[list[Genre]] = relationship("Genre", secondary=books_genres, lazy="selectin")

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, catalog_id={self.catalog_id}, title={self.title})>"
