"""Profile operations: reviewer display names."""

from functools import partial

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from shelfwise.db.crud.common import find_or_create
from shelfwise.models.base import utcnow
from shelfwise.models.profile import Profile


async def get_profile(db: AsyncSession, user_id: str) -> Profile | None:
    """Get a user's profile, if one exists."""
    result = await db.execute(
        select(Profile).where(Profile.id == user_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def set_display_name(db: AsyncSession, user_id: str, full_name: str) -> Profile:
    """Create or update the user's profile display name."""
    profile, created = await find_or_create(
        db,
        find=partial(get_profile, db, user_id),
        insert_stmt=insert(Profile).values(id=user_id, full_name=full_name),
        what=f"profile {user_id}",
    )
    if created:
        return profile

    await db.execute(
        update(Profile)
        .where(Profile.id == user_id)
        .values(full_name=full_name, updated_at=utcnow())
    )
    return await get_profile(db, user_id)
