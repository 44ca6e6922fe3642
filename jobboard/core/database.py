from typing import Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from jobboard.core.settings import settings


class Base(DeclarativeBase):
    pass


def create_engine(
    url: Optional[str] = None, echo: Optional[bool] = None
) -> AsyncEngine:
    return create_async_engine(
        url or settings.DATABASE_URL,
        echo=settings.DATABASE_ECHO if echo is None else echo,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Rows are serialized after commit, keep attributes loaded
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables registered on Base (local development and tests)."""
    # Import models so they register on the metadata
    from jobboard.models import job_post  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
