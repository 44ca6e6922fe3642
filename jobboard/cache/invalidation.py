import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from jobboard.cache.client import RedisCache
from jobboard.cache.keys import invalidation_patterns, job_post_key

logger = logging.getLogger(__name__)


@dataclass
class InvalidationResult:
    """Outcome of a best-effort invalidation; callers log it, never raise on it."""

    ok: bool = True
    deleted: int = 0
    failed_patterns: List[str] = field(default_factory=list)


async def invalidate_job_posts(
    cache: RedisCache,
    job_post_id: Optional[str] = None,
    owner_id: Optional[str] = None,
) -> InvalidationResult:
    """
    Drop every cache entry a write to a job posting could have made stale.

    Clears all public pages and counts, all pages and counts of ``owner_id``
    and the single-item entry of ``job_post_id``. Failures are collected in
    the result; nothing is retried.
    """
    patterns = invalidation_patterns(owner_id)
    outcomes = await asyncio.gather(
        *(cache.delete_pattern(pattern) for pattern in patterns)
    )

    result = InvalidationResult()
    for pattern, deleted in zip(patterns, outcomes):
        if deleted is None:
            result.failed_patterns.append(pattern)
        else:
            result.deleted += deleted

    if job_post_id:
        item_key = job_post_key(job_post_id)
        if await cache.delete(item_key):
            logger.debug(f"Removed cached job posting {item_key}")
        else:
            result.failed_patterns.append(item_key)

    result.ok = not result.failed_patterns
    if result.ok:
        logger.debug(
            f"Invalidated {result.deleted} cached job posting entries "
            f"(job_post_id={job_post_id}, owner_id={owner_id})"
        )
    else:
        logger.warning(
            f"Cache invalidation incomplete for job_post_id={job_post_id}, "
            f"owner_id={owner_id}: {result.failed_patterns}"
        )
    return result
