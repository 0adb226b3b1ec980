"""Review API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shelfwise.auth import get_optional_user_id
from shelfwise.db import get_db
from shelfwise.models.schemas import ReviewResult, SetReviewRequest
from shelfwise.services import library

router = APIRouter()


@router.post("", response_model=ReviewResult)
async def set_review(
    data: SetReviewRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str | None, Depends(get_optional_user_id)],
) -> ReviewResult:
    """Write, change or clear the caller's rating and review of a book."""
    return await library.set_review(
        db,
        user_id,
        data.book,
        data.review_text,
        data.rating,
        data.shelf_entry_id,
    )
