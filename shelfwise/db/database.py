"""Database engine and session management.

``get_db`` only hands out a session. Library actions and write routes
commit their own work; anything left uncommitted when the request ends is
rolled back as the session closes.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from shelfwise.config import get_settings
from shelfwise.constants import (
    DB_COMMAND_TIMEOUT,
    DB_MAX_OVERFLOW,
    DB_POOL_RECYCLE,
    DB_POOL_SIZE,
    DB_POOL_TIMEOUT,
)

settings = get_settings()

engine = create_async_engine(
    settings.database_url_async,
    echo=settings.is_development,
    pool_pre_ping=True,
    pool_size=DB_POOL_SIZE,
    max_overflow=DB_MAX_OVERFLOW,
    pool_timeout=DB_POOL_TIMEOUT,
    pool_recycle=DB_POOL_RECYCLE,
    connect_args={
        "command_timeout": DB_COMMAND_TIMEOUT,
        "server_settings": {"application_name": settings.app_name.lower()},
    },
)

# Actions read rows back after committing them.
async_session_maker = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


async def init_db() -> None:
    """Create missing tables. Migrations own the schema outside development."""
    from shelfwise.models import Base  # imports every model module

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a request-scoped session. Callers commit."""
    async with async_session_maker() as session:
        yield session
