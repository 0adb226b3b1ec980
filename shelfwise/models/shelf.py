"""Shelf entries: a user's membership of a book on one shelf."""

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shelfwise.models.base import Base, utcnow

if TYPE_CHECKING:
    from shelfwise.models.book import Book
    from shelfwise.models.review import Review


class ShelfType(str, enum.Enum):
    """Shelf a book can sit on."""

    WANT_TO_READ = "want_to_read"
    CURRENTLY_READING = "currently_reading"
    READ = "read"


class ShelfAction(str, enum.Enum):
    """Requested shelf change; REMOVED deletes the entry instead of storing a state."""

    WANT_TO_READ = "want_to_read"
    CURRENTLY_READING = "currently_reading"
    READ = "read"
    REMOVED = "removed"

    @property
    def shelf_type(self) -> ShelfType | None:
        if self is ShelfAction.REMOVED:
            return None
        return ShelfType(self.value)


class ShelfEntry(Base):
    """One book on one user's shelf (at most one entry per user and book)."""

    __tablename__ = "bookshelves"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    book_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True
    )
    shelf_type: Mapped[ShelfType] = mapped_column(
        Enum(ShelfType, values_callable=lambda e: [m.value for m in e], name="shelftype"),
        nullable=False,
    )
    date_added: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    date_started: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    date_finished: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    review_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("reviews.id", ondelete="SET NULL"), nullable=True
    )

    book: Mapped["Book"] = relationship("Book", lazy="raise")
    review: Mapped["Review | None"] = relationship("Review", lazy="raise")

    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_bookshelves_user_book"),
        Index("ix_bookshelves_user_shelf", "user_id", "shelf_type"),
    )

    def __repr__(self) -> str:
        return f"<ShelfEntry(id={self.id}, book_id={self.book_id}, shelf_type={self.shelf_type})>"
