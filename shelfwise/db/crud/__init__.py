"""CRUD operations module."""

from shelfwise.db.crud.books import (
    ensure_book_exists,
    get_book,
    get_book_id_by_catalog_id,
    get_or_create_genre,
    link_book_genres,
    normalize_genre_name,
    normalize_publication_date,
)
from shelfwise.db.crud.profiles import get_profile, set_display_name
from shelfwise.db.crud.reviews import get_reviews, set_review
from shelfwise.db.crud.shelves import (
    get_book_detail,
    get_shelf_counts,
    get_shelf_entry,
    get_shelf_entry_for_book,
    get_user_shelves,
    resolve_book_id,
    set_shelf,
)

__all__ = [
    "ensure_book_exists",
    "get_book",
    "get_book_detail",
    "get_book_id_by_catalog_id",
    "get_or_create_genre",
    "get_profile",
    "get_reviews",
    "get_shelf_counts",
    "get_shelf_entry",
    "get_shelf_entry_for_book",
    "get_user_shelves",
    "link_book_genres",
    "normalize_genre_name",
    "normalize_publication_date",
    "resolve_book_id",
    "set_display_name",
    "set_review",
    "set_shelf",
]
