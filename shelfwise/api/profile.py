"""Profile API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from shelfwise.auth import get_current_user_id
from shelfwise.db import crud, get_db
from shelfwise.models.schemas import ProfileRead, ProfileUpdate

router = APIRouter()


@router.get("", response_model=ProfileRead)
async def get_profile(
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> ProfileRead:
    """Get the caller's profile."""
    profile = await crud.get_profile(db, user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return ProfileRead.model_validate(profile)


@router.put("", response_model=ProfileRead)
async def update_profile(
    data: ProfileUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> ProfileRead:
    """Set the caller's display name, shown next to their reviews."""
    profile = await crud.set_display_name(db, user_id, data.full_name.strip())
    await db.commit()
    return ProfileRead.model_validate(profile)
