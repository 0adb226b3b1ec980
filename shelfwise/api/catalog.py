"""Catalog API endpoints (proxy to Google Books)."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from shelfwise.constants import CATALOG_MAX_PAGE, SEARCH_MIN_LENGTH
from shelfwise.errors import UpstreamFailure
from shelfwise.models.schemas import CatalogDetails, CatalogSearchPage
from shelfwise.services.catalog import GoogleBooksClient, get_catalog_client

router = APIRouter()


@router.get("/search", response_model=CatalogSearchPage)
async def search_catalog(
    q: Annotated[str, Query(min_length=SEARCH_MIN_LENGTH)],
    client: Annotated[GoogleBooksClient, Depends(get_catalog_client)],
    page: Annotated[int, Query(ge=0, le=CATALOG_MAX_PAGE)] = 0,
) -> CatalogSearchPage:
    """Search the catalog, one page at a time."""
    try:
        return await client.search_catalog(q, page)
    except UpstreamFailure as e:
        raise HTTPException(status_code=int(e.status), detail=e.message) from e


@router.get("/{catalog_id}", response_model=CatalogDetails)
async def get_catalog_item(
    catalog_id: str,
    client: Annotated[GoogleBooksClient, Depends(get_catalog_client)],
) -> CatalogDetails:
    """Get one catalog item's details."""
    try:
        details = await client.fetch_catalog_item(catalog_id)
    except UpstreamFailure as e:
        raise HTTPException(status_code=int(e.status), detail=e.message) from e
    if details is None:
        raise HTTPException(status_code=404, detail="Catalog item not found")
    return details
