"""SQLAlchemy models."""

from shelfwise.models.base import Base
from shelfwise.models.book import Book, Genre, books_genres
from shelfwise.models.profile import Profile
from shelfwise.models.review import Review
from shelfwise.models.shelf import ShelfAction, ShelfEntry, ShelfType

__all__ = [
    "Base",
    "Book",
    "Genre",
    "books_genres",
    "Profile",
    "Review",
    "ShelfAction",
    "ShelfEntry",
    "ShelfType",
]
