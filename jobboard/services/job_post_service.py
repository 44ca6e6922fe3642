"""
Job posting service: cache-aside reads and cache-invalidating writes.

Listing pages and their total counts are cached under keys derived from the
filters, page and limit (see ``jobboard.cache.keys``). Any write clears every
cached page and count of the public scope and of the writer's own scope.

Page and count are separate entries, so a request can combine a page and a
count cached at slightly different moments; both are bounded by their TTLs.
A read that misses, queries the store just before a write, and populates the
cache just after the write's invalidation can leave that page stale until it
expires.
"""

import asyncio
import logging
from datetime import date
from typing import Any, List, Optional, Tuple

from pydantic import ValidationError

from jobboard.cache.client import RedisCache
from jobboard.cache.invalidation import InvalidationResult, invalidate_job_posts
from jobboard.cache.keys import CacheTTL, filter_hash, job_post_key, page_keys
from jobboard.common.pagination import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    PaginationEnvelope,
    clamp_pagination,
    page_offset,
)
from jobboard.core.exceptions import BackingStoreError, InvalidJobPostData, JobPostNotFound
from jobboard.crud.job_post import CRUDJobPost
from jobboard.models.job_post import JobStatus
from jobboard.schemas.job_post import (
    JobPostCreate,
    JobPostFilters,
    JobPostResponse,
    JobPostUpdate,
    PaginatedJobPosts,
)

logger = logging.getLogger(__name__)


class JobPostService:
    def __init__(
        self,
        crud: CRUDJobPost,
        cache: RedisCache,
        ttl: Optional[CacheTTL] = None,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
    ):
        self.crud = crud
        self.cache = cache
        self.ttl = ttl or CacheTTL()
        self.default_limit = default_limit
        self.max_limit = max_limit

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def _cached_page(
        self, page_key: str, count_key: str
    ) -> Optional[Tuple[List[JobPostResponse], int]]:
        cached_items, cached_count = await asyncio.gather(
            self.cache.get_json(page_key), self.cache.get_json(count_key)
        )
        if cached_items is None or cached_count is None:
            return None

        if (
            not isinstance(cached_items, list)
            or not isinstance(cached_count, int)
            or isinstance(cached_count, bool)
            or cached_count < 0
        ):
            logger.warning(f"Ignoring malformed cache entries {page_key} / {count_key}")
            return None

        try:
            items = [JobPostResponse.model_validate(item) for item in cached_items]
        except ValidationError as e:
            logger.warning(f"Ignoring unreadable cached page {page_key}: {e}")
            return None
        return items, cached_count

    async def get_page(
        self,
        filters: Optional[JobPostFilters] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        owner_id: Optional[str] = None,
    ) -> PaginatedJobPosts:
        """
        One page of job postings plus pagination metadata.

        Served from the cache when both the page and its count are cached,
        otherwise from the database (rows and count concurrently), after which
        both entries are cached. ``owner_id`` selects the owner's own postings
        of any status; without it only active postings are listed unless a
        status filter is given.

        Never raises for store failures: the result then carries ``error``,
        no items and a zero-filled envelope.
        """
        filters = filters or JobPostFilters()
        page, limit = clamp_pagination(
            page, limit, default_limit=self.default_limit, max_limit=self.max_limit
        )
        page_key, count_key = page_keys(page, limit, filter_hash(filters), owner_id)

        cached = await self._cached_page(page_key, count_key)
        if cached is not None:
            items, total = cached
            logger.debug(f"Cache hit for {page_key}")
            return PaginatedJobPosts(
                data=items, pagination=PaginationEnvelope.build(page, limit, total)
            )

        logger.debug(f"Cache miss for {page_key}")
        try:
            rows, total = await asyncio.gather(
                self.crud.get_page(
                    filters=filters,
                    owner_id=owner_id,
                    skip=page_offset(page, limit),
                    limit=limit,
                ),
                self.crud.count(filters=filters, owner_id=owner_id),
            )
        except BackingStoreError as e:
            logger.error(f"Failed to load job postings for {page_key}: {e}")
            return PaginatedJobPosts(
                data=[],
                pagination=PaginationEnvelope.empty(page, limit),
                error=str(e),
            )

        items = [JobPostResponse.model_validate(row) for row in rows]
        stored = await asyncio.gather(
            self.cache.set_json(page_key, items, self.ttl.job_posts),
            self.cache.set_json(count_key, total, self.ttl.job_posts_count),
        )
        if not all(stored):
            logger.warning(f"Could not cache job postings for {page_key}")

        return PaginatedJobPosts(
            data=items, pagination=PaginationEnvelope.build(page, limit, total)
        )

    async def get_job_post(self, job_post_id: str) -> Optional[JobPostResponse]:
        key = job_post_key(job_post_id)
        cached = await self.cache.get_json(key)
        if cached is not None:
            try:
                return JobPostResponse.model_validate(cached)
            except ValidationError as e:
                logger.warning(f"Ignoring unreadable cached job posting {key}: {e}")

        db_obj = await self.crud.get(job_post_id)
        if db_obj is None:
            return None

        job_post = JobPostResponse.model_validate(db_obj)
        await self.cache.set_json(key, job_post, self.ttl.job_post)
        return job_post

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def invalidate(
        self, job_post_id: Optional[str] = None, owner_id: Optional[str] = None
    ) -> InvalidationResult:
        result = await invalidate_job_posts(
            self.cache, job_post_id=job_post_id, owner_id=owner_id
        )
        if not result.ok:
            logger.warning(
                f"Stale cache entries may remain after write to {job_post_id}: "
                f"{result.failed_patterns}"
            )
        return result

    async def create_job_post(
        self, owner_id: str, obj_in: JobPostCreate
    ) -> JobPostResponse:
        db_obj = await self.crud.create(obj_in=obj_in, owner_id=owner_id)
        job_post = JobPostResponse.model_validate(db_obj)
        logger.info(f"Job posting {job_post.id} created by {owner_id}")

        await self.invalidate(job_post.id, owner_id)
        return job_post

    async def update_job_post(
        self, job_post_id: str, owner_id: str, obj_in: JobPostUpdate
    ) -> JobPostResponse:
        update_data = obj_in.model_dump(exclude_unset=True)

        current = await self.crud.get_owned(job_post_id, owner_id=owner_id)
        if current is None:
            raise JobPostNotFound(job_post_id)

        start_date = update_data.get("start_date", current.start_date)
        end_date = update_data.get("end_date", current.end_date)
        self._check_dates(start_date, end_date)

        db_obj = await self.crud.update(
            job_post_id, owner_id=owner_id, update_data=update_data
        )
        if db_obj is None:
            raise JobPostNotFound(job_post_id)

        job_post = JobPostResponse.model_validate(db_obj)
        logger.info(f"Job posting {job_post_id} updated by {owner_id}")

        await self.invalidate(job_post_id, owner_id)
        return job_post

    async def delete_job_post(self, job_post_id: str, owner_id: str) -> None:
        deleted = await self.crud.remove(job_post_id, owner_id=owner_id)
        if not deleted:
            raise JobPostNotFound(job_post_id)
        logger.info(f"Job posting {job_post_id} deleted by {owner_id}")

        await self.invalidate(job_post_id, owner_id)

    async def toggle_job_post_status(
        self, job_post_id: str, owner_id: str
    ) -> JobPostResponse:
        current = await self.crud.get_owned(job_post_id, owner_id=owner_id)
        if current is None:
            raise JobPostNotFound(job_post_id)

        new_status = (
            JobStatus.INACTIVE if current.status == JobStatus.ACTIVE else JobStatus.ACTIVE
        )
        db_obj = await self.crud.update(
            job_post_id, owner_id=owner_id, update_data={"status": new_status}
        )
        if db_obj is None:
            raise JobPostNotFound(job_post_id)

        job_post = JobPostResponse.model_validate(db_obj)
        logger.info(f"Job posting {job_post_id} status set to {new_status.value}")

        await self.invalidate(job_post_id, owner_id)
        return job_post

    @staticmethod
    def _check_dates(start_date: Any, end_date: Any) -> None:
        if isinstance(start_date, date) and isinstance(end_date, date):
            if end_date <= start_date:
                raise InvalidJobPostData("End date must be after start date")
