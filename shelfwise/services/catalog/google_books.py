"""Google Books catalog client.

Fetches single volumes and search pages from the Google Books ``volumes``
endpoints and maps them into ``CatalogDetails``. Responses are cached in
Redis; transport errors, 429 and 5xx are retried with backoff.
"""

import re
from datetime import timedelta
from functools import partial
from typing import Any

import httpx

from shelfwise.config import get_settings
from shelfwise.constants import (
    CACHE_TTL_CATALOG_ITEM,
    CACHE_TTL_CATALOG_SEARCH,
    CATALOG_PAGE_SIZE,
)
from shelfwise.errors import UpstreamFailure
from shelfwise.models.schemas import CatalogDetails, CatalogSearchPage
from shelfwise.utils.cache import cache, make_cache_key
from shelfwise.utils.http_client import get_general_client
from shelfwise.utils.logging import get_logger
from shelfwise.utils.retry import DEFAULT_RETRY_CONFIG, RetryConfig, retry_async

logger = get_logger(__name__)


def secure_url(url: str | None) -> str | None:
    """Force https on catalog image links."""
    if not url:
        return None
    url = url.replace("http://", "https://", 1)
    return re.sub(r"&edge=curl", "", url)


def pick_isbn(identifiers: list[dict[str, Any]] | None) -> str | None:
    """Pick the ISBN_13 identifier, falling back to ISBN_10."""
    by_type = {i.get("type"): i.get("identifier") for i in identifiers or []}
    return by_type.get("ISBN_13") or by_type.get("ISBN_10")


def parse_volume(item: dict[str, Any]) -> CatalogDetails | None:
    """Map a Google Books volume resource into CatalogDetails."""
    volume_id = item.get("id")
    info = item.get("volumeInfo") or {}
    if not volume_id or not info.get("title"):
        return None

    images = info.get("imageLinks") or {}
    return CatalogDetails(
        catalog_id=volume_id,
        title=info["title"],
        authors=info.get("authors"),
        description=info.get("description"),
        cover_image_url=secure_url(images.get("thumbnail")),
        small_thumbnail_url=secure_url(images.get("smallThumbnail")),
        publisher=info.get("publisher"),
        publication_date=info.get("publishedDate"),
        page_count=info.get("pageCount"),
        language=info.get("language"),
        avg_rating=info.get("averageRating"),
        ratings_count=info.get("ratingsCount"),
        preview_link=info.get("previewLink"),
        info_link=info.get("infoLink"),
        isbn=pick_isbn(info.get("industryIdentifiers")),
        categories=info.get("categories"),
    )


class GoogleBooksClient:
    """Client for the Google Books volumes API."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        retry_config: RetryConfig = DEFAULT_RETRY_CONFIG,
    ) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.google_books_api_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.google_books_api_key
        self._http_client = http_client
        self.retry_config = retry_config

    @property
    def http_client(self) -> httpx.AsyncClient:
        return self._http_client or get_general_client()

    async def _get(self, path: str, operation: str, **params: Any) -> httpx.Response:
        """GET a volumes endpoint, retrying transient failures."""
        if self.api_key:
            params["key"] = self.api_key
        url = f"{self.base_url}{path}"

        try:
            return await retry_async(
                partial(self.http_client.get, url, params=params),
                config=self.retry_config,
                operation_name=operation,
            )
        except httpx.HTTPError as e:
            raise UpstreamFailure(f"Catalog request failed: {e}") from e

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        if response.status_code != 200:
            raise UpstreamFailure(f"Catalog returned HTTP {response.status_code}.")
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamFailure(f"Catalog returned invalid JSON: {e}") from e

    async def fetch_catalog_item(self, catalog_id: str) -> CatalogDetails | None:
        """Fetch a single volume. None when the catalog does not know it."""
        cache_key = make_cache_key("googlebooks:volume", catalog_id)
        cached = await cache.get(cache_key)
        if cached is not None:
            return CatalogDetails.model_validate(cached)

        response = await self._get(f"/volumes/{catalog_id}", "google_books.volume")
        if response.status_code == 404:
            logger.info(f"Catalog item {catalog_id} not found")
            return None

        details = parse_volume(self._json(response))
        if details is not None:
            await cache.set(
                cache_key,
                details.model_dump(mode="json"),
                timedelta(seconds=CACHE_TTL_CATALOG_ITEM),
            )
        return details

    async def search_catalog(self, query: str, page_offset: int = 0) -> CatalogSearchPage:
        """Search volumes, one page of CATALOG_PAGE_SIZE at a time."""
        query = query.strip()
        if not query:
            return CatalogSearchPage(items=[], total_count=0, page=page_offset)

        cache_key = make_cache_key("googlebooks:search", query.lower(), page=page_offset)
        cached = await cache.get(cache_key)
        if cached is not None:
            return CatalogSearchPage.model_validate(cached)

        data = self._json(
            await self._get(
                "/volumes",
                "google_books.search",
                q=query,
                maxResults=CATALOG_PAGE_SIZE,
                startIndex=page_offset * CATALOG_PAGE_SIZE,
            )
        )
        items = [
            details
            for details in (parse_volume(item) for item in data.get("items") or [])
            if details is not None
        ]
        page = CatalogSearchPage(
            items=items,
            total_count=data.get("totalItems") or 0,
            page=page_offset,
        )
        await cache.set(
            cache_key,
            page.model_dump(mode="json"),
            timedelta(seconds=CACHE_TTL_CATALOG_SEARCH),
        )
        return page


# Singleton instance
catalog_client = GoogleBooksClient()


def get_catalog_client() -> GoogleBooksClient:
    """FastAPI dependency returning the shared catalog client."""
    return catalog_client
