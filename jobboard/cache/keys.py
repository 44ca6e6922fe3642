"""
Cache key and filter-hash derivation for job posting queries.

Key namespace (shared with the existing deployment, must stay bit-exact):

    jobs:page:{page}:limit:{limit}:filters:{hash}
    jobs:count:filters:{hash}
    user:{user_id}:jobs:page:{page}:limit:{limit}:filters:{hash}
    user:{user_id}:jobs:count:filters:{hash}
    job:{id}

``{hash}`` is the URL-safe base64 of the canonical JSON of the active
filters, or ``none`` when no filter is active.
"""

import base64
import json
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel

NO_FILTERS = "none"

# Fields that never take part in the filter hash
PAGINATION_FIELDS = frozenset({"page", "limit"})

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


@dataclass(frozen=True)
class CacheTTL:
    """Expiration, in seconds, for each kind of cached payload."""

    job_posts: int = 300
    job_post: int = 600
    job_posts_count: int = 300


def _active_filters(filters: Union[BaseModel, Mapping[str, Any], None]) -> Dict[str, Any]:
    if filters is None:
        return {}
    if isinstance(filters, BaseModel):
        data = filters.model_dump(mode="json", exclude_none=True)
    else:
        data = dict(filters)

    active = {}
    for name, value in data.items():
        if name in PAGINATION_FIELDS or value is None:
            continue
        if isinstance(value, str):
            value = value.strip()
            if not value:
                continue
        active[name] = value
    return active


def canonical_filters(filters: Union[BaseModel, Mapping[str, Any], None]) -> Optional[str]:
    """Deterministic JSON for the active filters, None when there are none."""
    active = _active_filters(filters)
    if not active:
        return None
    return json.dumps(active, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def filter_hash(filters: Union[BaseModel, Mapping[str, Any], None]) -> str:
    """
    Stable hash of filter criteria, ignoring pagination.

    Two criteria hash identically iff their canonical serialization is
    byte-identical. The sentinel ``none`` can never collide with an encoded
    value since every encoding starts with the base64 of ``{``.
    """
    canonical = canonical_filters(filters)
    if canonical is None:
        return NO_FILTERS
    return base64.urlsafe_b64encode(canonical.encode("utf-8")).decode("ascii")


def job_posts_key(page: int, limit: int, filters_hash: Optional[str] = None) -> str:
    return f"jobs:page:{page}:limit:{limit}:filters:{filters_hash or NO_FILTERS}"


def user_job_posts_key(
    user_id: str, page: int, limit: int, filters_hash: Optional[str] = None
) -> str:
    return (
        f"user:{user_id}:jobs:page:{page}:limit:{limit}"
        f":filters:{filters_hash or NO_FILTERS}"
    )


def job_posts_count_key(filters_hash: Optional[str] = None) -> str:
    return f"jobs:count:filters:{filters_hash or NO_FILTERS}"


def user_job_posts_count_key(user_id: str, filters_hash: Optional[str] = None) -> str:
    return f"user:{user_id}:jobs:count:filters:{filters_hash or NO_FILTERS}"


def job_post_key(job_post_id: str) -> str:
    return f"job:{job_post_id}"


def page_keys(
    page: int, limit: int, filters_hash: str, owner_id: Optional[str] = None
) -> Tuple[str, str]:
    """(page key, count key) for the public scope or an owner's scope."""
    if owner_id:
        return (
            user_job_posts_key(owner_id, page, limit, filters_hash),
            user_job_posts_count_key(owner_id, filters_hash),
        )
    return job_posts_key(page, limit, filters_hash), job_posts_count_key(filters_hash)


def escape_glob(value: str) -> str:
    """Escape glob metacharacters so a value matches only itself in SCAN MATCH."""
    return _GLOB_SPECIAL.sub(r"\\\1", str(value))


def invalidation_patterns(owner_id: Optional[str] = None) -> List[str]:
    """
    Every page/count key pattern that may hold data made stale by a write.

    Pages are keyed by filters, not by listing, so all cached pages and counts
    of the public scope (and of the owner's scope) are cleared on any write.
    """
    patterns = ["jobs:page:*", "jobs:count:*"]
    if owner_id:
        owner = escape_glob(owner_id)
        patterns.append(f"user:{owner}:jobs:page:*")
        patterns.append(f"user:{owner}:jobs:count:*")
    return patterns
