"""Shelf API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shelfwise.auth import get_current_user_id, get_optional_user_id
from shelfwise.db import crud, get_db
from shelfwise.models.schemas import (
    SetShelfRequest,
    ShelfBookRead,
    ShelfCounts,
    ShelfResult,
    ShelfTypeEnum,
)
from shelfwise.services import library

router = APIRouter()


@router.post("", response_model=ShelfResult)
async def set_shelf(
    data: SetShelfRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str | None, Depends(get_optional_user_id)],
) -> ShelfResult:
    """Put a book on a shelf, move it, or remove it."""
    return await library.set_shelf(db, user_id, data.shelf_entry_id, data.shelf_type, data.book)


@router.get("", response_model=list[ShelfBookRead])
async def list_shelves(
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(get_current_user_id)],
    shelf_type: Annotated[ShelfTypeEnum | None, Query()] = None,
) -> list[ShelfBookRead]:
    """List the caller's shelved books, newest first."""
    entries = await crud.get_user_shelves(db, user_id, shelf_type)
    return [ShelfBookRead.model_validate(entry) for entry in entries]


@router.get("/counts", response_model=ShelfCounts)
async def shelf_counts(
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> ShelfCounts:
    """Count the caller's books per shelf."""
    return ShelfCounts(**await crud.get_shelf_counts(db, user_id))
