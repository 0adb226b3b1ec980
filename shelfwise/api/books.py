"""Book API endpoints."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from shelfwise.auth import get_optional_user_id
from shelfwise.db import crud, get_db
from shelfwise.models.schemas import BookDetail, EnsureBookRequest, EnsureBookResult, ReviewsResult
from shelfwise.services import library

router = APIRouter()


@router.post("/ensure", response_model=EnsureBookResult)
async def ensure_book(
    data: EnsureBookRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EnsureBookResult:
    """Mirror a catalog item into the local library (idempotent)."""
    return await library.ensure_book_exists(db, data.catalog_id, data.details)


@router.get("/{book_id}", response_model=BookDetail)
async def get_book_detail(
    book_id: uuid.UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str | None, Depends(get_optional_user_id)],
) -> BookDetail:
    """Get a book with the caller's shelf entry and review."""
    detail = await crud.get_book_detail(db, book_id, user_id)
    if detail is None:
        raise HTTPException(status_code=404, detail="Book not found")
    return detail


@router.get("/{book_id}/reviews", response_model=ReviewsResult)
async def get_book_reviews(
    book_id: uuid.UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReviewsResult:
    """Get every written review of a book, newest first."""
    return await library.get_reviews(db, book_id)
