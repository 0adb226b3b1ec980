"""External book catalog integration."""

from shelfwise.services.catalog.google_books import (
    GoogleBooksClient,
    catalog_client,
    get_catalog_client,
    parse_volume,
)

__all__ = ["GoogleBooksClient", "catalog_client", "get_catalog_client", "parse_volume"]
