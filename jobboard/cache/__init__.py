"""
Read-through cache for job posting queries.

- client: best-effort Redis adapter with a shared lazy connection
- keys: cache keys, filter hashing, TTLs and invalidation patterns
- invalidation: pattern-wide invalidation after writes
- serializers: JSON encoding of cached payloads
"""

from jobboard.cache.client import RedisCache
from jobboard.cache.invalidation import InvalidationResult, invalidate_job_posts
from jobboard.cache.keys import CacheTTL, filter_hash

__all__ = [
    "RedisCache",
    "InvalidationResult",
    "invalidate_job_posts",
    "CacheTTL",
    "filter_hash",
]
