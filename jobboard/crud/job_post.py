import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.sql import Select

from jobboard.core.exceptions import BackingStoreError
from jobboard.models.job_post import JobPost, JobStatus
from jobboard.schemas.job_post import JobPostCreate, JobPostFilters

logger = logging.getLogger(__name__)


def _contains(value: str) -> str:
    """ILIKE pattern matching ``value`` literally anywhere in the column."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class CRUDJobPost:
    """
    Queries against the ``job_posts`` table.

    Every call opens its own session so independent queries (rows and count)
    can run concurrently. SQLAlchemy failures surface as BackingStoreError.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    def _filtered(
        self,
        stmt: Select,
        filters: Optional[JobPostFilters] = None,
        owner_id: Optional[str] = None,
    ) -> Select:
        filters = filters or JobPostFilters()

        if owner_id:
            stmt = stmt.where(JobPost.user_id == owner_id)

        if filters.status:
            stmt = stmt.where(JobPost.status == filters.status)
        elif not owner_id:
            # Public view shows only active posts by default
            stmt = stmt.where(JobPost.status == JobStatus.ACTIVE)

        if filters.type:
            stmt = stmt.where(JobPost.type == filters.type)

        if filters.company:
            stmt = stmt.where(
                JobPost.company.ilike(_contains(filters.company), escape="\\")
            )

        if filters.location:
            stmt = stmt.where(
                JobPost.location.ilike(_contains(filters.location), escape="\\")
            )

        if filters.search:
            pattern = _contains(filters.search)
            stmt = stmt.where(
                or_(
                    JobPost.title.ilike(pattern, escape="\\"),
                    JobPost.description.ilike(pattern, escape="\\"),
                    JobPost.company.ilike(pattern, escape="\\"),
                )
            )

        return stmt

    async def get_page(
        self,
        *,
        filters: Optional[JobPostFilters] = None,
        owner_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> List[JobPost]:
        """Filtered rows, newest first, ties broken by id ascending."""
        stmt = (
            self._filtered(select(JobPost), filters, owner_id)
            .order_by(JobPost.created_at.desc(), JobPost.id.asc())
            .offset(skip)
            .limit(limit)
        )
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error fetching job postings page: {e}")
            raise BackingStoreError("Failed to fetch job postings") from e

    async def count(
        self,
        *,
        filters: Optional[JobPostFilters] = None,
        owner_id: Optional[str] = None,
    ) -> int:
        stmt = self._filtered(select(func.count(JobPost.id)), filters, owner_id)
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                return int(result.scalar_one())
        except SQLAlchemyError as e:
            logger.error(f"Error counting job postings: {e}")
            raise BackingStoreError("Failed to count job postings") from e

    async def get(self, id: str) -> Optional[JobPost]:
        try:
            async with self.session_factory() as session:
                return await session.get(JobPost, id)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching job posting {id}: {e}")
            raise BackingStoreError("Failed to fetch job posting") from e

    async def get_owned(self, id: str, *, owner_id: str) -> Optional[JobPost]:
        stmt = select(JobPost).where(JobPost.id == id, JobPost.user_id == owner_id)
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching job posting {id}: {e}")
            raise BackingStoreError("Failed to fetch job posting") from e

    async def create(self, *, obj_in: JobPostCreate, owner_id: str) -> JobPost:
        db_obj = JobPost(**obj_in.model_dump(), user_id=owner_id)
        try:
            async with self.session_factory() as session:
                session.add(db_obj)
                await session.commit()
                await session.refresh(db_obj)
                return db_obj
        except SQLAlchemyError as e:
            logger.error(f"Error creating job posting: {e}")
            raise BackingStoreError("Failed to create job posting") from e

    async def update(
        self, id: str, *, owner_id: str, update_data: Dict[str, Any]
    ) -> Optional[JobPost]:
        """Apply ``update_data`` to a posting owned by ``owner_id``; None if absent."""
        stmt = select(JobPost).where(JobPost.id == id, JobPost.user_id == owner_id)
        try:
            async with self.session_factory() as session:
                db_obj = (await session.execute(stmt)).scalar_one_or_none()
                if db_obj is None:
                    return None
                for field, value in update_data.items():
                    setattr(db_obj, field, value)
                await session.commit()
                await session.refresh(db_obj)
                return db_obj
        except SQLAlchemyError as e:
            logger.error(f"Error updating job posting {id}: {e}")
            raise BackingStoreError("Failed to update job posting") from e

    async def remove(self, id: str, *, owner_id: str) -> bool:
        stmt = select(JobPost).where(JobPost.id == id, JobPost.user_id == owner_id)
        try:
            async with self.session_factory() as session:
                db_obj = (await session.execute(stmt)).scalar_one_or_none()
                if db_obj is None:
                    return False
                await session.delete(db_obj)
                await session.commit()
                return True
        except SQLAlchemyError as e:
            logger.error(f"Error deleting job posting {id}: {e}")
            raise BackingStoreError("Failed to delete job posting") from e
