import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional
from urllib.parse import urlsplit, urlunsplit

import redis.asyncio as redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError

from jobboard.cache.serializers import SerializationError, deserialize, serialize
from jobboard.core.exceptions import CacheUnavailable

logger = logging.getLogger(__name__)

DEFAULT_REDIS_URL = "redis://localhost:6379"

# Everything a broken or hung backend can raise at us
CACHE_ERRORS = (RedisError, OSError, asyncio.TimeoutError)

ClientFactory = Callable[[str], redis.Redis]


def _redact(url: str) -> str:
    parts = urlsplit(url)
    if parts.password:
        netloc = parts.netloc.replace(f":{parts.password}@", ":***@")
        return urlunsplit(parts._replace(netloc=netloc))
    return url


class RedisCache:
    """
    Best-effort Redis adapter shared by every request.

    The connection is opened lazily on first use. Concurrent callers share a
    single in-flight connection attempt instead of racing to open their own.
    Operations never raise: a failing, unreachable or slow backend turns a
    read into a miss and a write into ``False``, and is logged as a warning.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        connect_timeout: float = 10.0,
        operation_timeout: float = 2.0,
        client_factory: Optional[ClientFactory] = None,
        scan_count: int = 500,
    ):
        """
        Args:
            url: Redis URL, defaults to the local instance
            connect_timeout: Seconds allowed for opening the connection
            operation_timeout: Seconds allowed for any single cache operation
            client_factory: Builds the client from the URL (tests inject fakes)
            scan_count: SCAN batch size used by pattern deletes
        """
        self.url = url or DEFAULT_REDIS_URL
        self.connect_timeout = connect_timeout
        self.operation_timeout = operation_timeout
        self.scan_count = scan_count
        self._client_factory = client_factory
        self._client: Optional[redis.Redis] = None
        self._connecting: Optional[asyncio.Future] = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def _create_client(self) -> redis.Redis:
        if self._client_factory is not None:
            return self._client_factory(self.url)
        return redis.from_url(
            self.url,
            decode_responses=True,
            socket_connect_timeout=self.connect_timeout,
            socket_timeout=self.operation_timeout,
        )

    async def _open(self) -> redis.Redis:
        logger.debug(f"Connecting to Redis at {_redact(self.url)}")
        client = self._create_client()
        try:
            await asyncio.wait_for(client.ping(), timeout=self.connect_timeout)
        except BaseException:
            await self._close_client(client)
            raise
        logger.info(f"Redis client connected: {_redact(self.url)}")
        return client

    def _on_connect_done(self, attempt: asyncio.Future) -> None:
        if self._connecting is not attempt:
            return
        self._connecting = None
        if attempt.cancelled():
            return
        error = attempt.exception()
        if error is None:
            self._client = attempt.result()
        else:
            logger.warning(f"Failed to connect to Redis: {error!r}")

    async def connect(self) -> redis.Redis:
        """
        Return the shared client, opening it if needed.

        Raises whatever the connection attempt raised, or ConnectionError when
        ``close()`` aborted it; the next call retries.
        """
        if self._client is not None:
            return self._client

        if self._connecting is None:
            attempt = asyncio.ensure_future(self._open())
            attempt.add_done_callback(self._on_connect_done)
            self._connecting = attempt

        attempt = self._connecting
        try:
            # Shielded so one cancelled waiter does not abort the attempt for others
            return await asyncio.shield(attempt)
        except asyncio.CancelledError:
            if not attempt.cancelled():
                raise
            # The shared attempt was aborted, not this caller
            raise RedisConnectionError(
                "Redis connection attempt was cancelled"
            ) from None

    async def close(self) -> None:
        attempt, self._connecting = self._connecting, None
        if attempt is not None and not attempt.done():
            attempt.cancel()

        client, self._client = self._client, None
        if client is not None:
            await self._close_client(client)
            logger.info("Redis client disconnected")

    async def _close_client(self, client: redis.Redis) -> None:
        try:
            await client.aclose()
        except CACHE_ERRORS as e:
            logger.warning(f"Redis disconnect error: {e!r}")

    async def _execute(
        self, operation: str, func: Callable[[redis.Redis], Awaitable[Any]]
    ) -> Any:
        try:
            client = await self.connect()
            return await asyncio.wait_for(func(client), timeout=self.operation_timeout)
        except CACHE_ERRORS as e:
            logger.warning(f"Redis {operation} error: {e!r}")
            raise CacheUnavailable(f"Redis {operation} failed") from e

    async def ping(self) -> bool:
        try:
            return bool(await self._execute("PING", lambda client: client.ping()))
        except CacheUnavailable:
            return False

    async def get(self, key: str) -> Optional[str]:
        """Cached value, or None on a miss or when the cache is unavailable."""
        try:
            return await self._execute("GET", lambda client: client.get(key))
        except CacheUnavailable:
            return None

    async def set(self, key: str, value: str, ttl: int = 300) -> bool:
        try:
            await self._execute("SET", lambda client: client.set(key, value, ex=ttl))
            return True
        except CacheUnavailable:
            return False

    async def delete(self, *keys: str) -> bool:
        if not keys:
            return True
        try:
            await self._execute("DEL", lambda client: client.delete(*keys))
            return True
        except CacheUnavailable:
            return False

    async def delete_pattern(self, pattern: str) -> Optional[int]:
        """
        Delete every key matching a glob pattern.

        Keys are enumerated with SCAN and removed in batches.

        Returns:
            Number of keys deleted, or None when the backend failed
        """

        async def scan_and_delete(client: redis.Redis) -> int:
            deleted = 0
            batch = []
            async for key in client.scan_iter(match=pattern, count=self.scan_count):
                batch.append(key)
                if len(batch) >= self.scan_count:
                    deleted += await client.delete(*batch)
                    batch = []
            if batch:
                deleted += await client.delete(*batch)
            return deleted

        try:
            return await self._execute(f"invalidate {pattern}", scan_and_delete)
        except CacheUnavailable:
            return None

    async def get_json(self, key: str) -> Any:
        """Decoded JSON value; a corrupt entry is reported and treated as a miss."""
        raw = await self.get(key)
        if raw is None:
            return None
        try:
            return deserialize(raw)
        except SerializationError as e:
            logger.warning(f"Discarding unreadable cache entry {key}: {e}")
            return None

    async def set_json(self, key: str, value: Any, ttl: int = 300) -> bool:
        try:
            payload = serialize(value)
        except (TypeError, ValueError) as e:
            logger.error(f"Cannot serialize value for cache key {key}: {e}")
            return False
        return await self.set(key, payload, ttl)
