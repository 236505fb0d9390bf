"""
Redis Streams log store implementation.

This module provides the production backend, built on redis-py:
- append() issues XADD
- range() issues XRANGE and returns the unparsed nested reply

Invariants:
    - Entry ids are always assigned by Redis when "*" is requested
    - range() replies are [id, [name, value, ...]] byte lists, untouched
      by redis-py's own stream parsing
    - Redis errors surface as LogStoreError subclasses

How to change safely:
    - Test against a real Redis (TIMELOG_REDIS_TESTS=1) before deploying
    - Keep decode_responses off, parse_entry handles decoding
"""

from __future__ import annotations

import logging
from typing import Any, List, Sequence, Tuple

import redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from .base import (
    AUTO_ID,
    LogStoreConnectionError,
    LogStoreError,
    LogStoreTimeoutError,
)

logger = logging.getLogger(__name__)


def _raw_reply(response: Any, **options: Any) -> Any:
    return response


class RedisLogStore:
    """Redis Streams implementation of LogStore protocol.

    Attributes:
        config: Redis configuration

    Example:
        >>> config = RedisConfig(url="redis://localhost:6379/0")
        >>> store = RedisLogStore(config)
        >>> entry_id = store.append("test", [("owner", "Taro")])
    """

    def __init__(self, config: Any, client: redis.Redis | None = None) -> None:
        """Initialize Redis log store.

        Args:
            config: RedisConfig instance with connection settings
            client: Optional pre-built client (tests)
        """
        self.config = config
        if client is None:
            client = redis.Redis.from_url(
                config.url,
                socket_timeout=config.socket_timeout,
                socket_connect_timeout=config.socket_connect_timeout,
                decode_responses=False,
            )
        self._client = client
        self._client.set_response_callback("XRANGE", _raw_reply)

    def append(
        self,
        stream: str,
        fields: Sequence[Tuple[str, str]],
        entry_id: str = AUTO_ID,
    ) -> str:
        """Append a field map to a Redis stream with XADD.

        Args:
            stream: Stream key
            fields: Ordered (name, value) pairs
            entry_id: "*" to let Redis assign the id

        Returns:
            The id Redis assigned

        Raises:
            LogStoreConnectionError: If Redis is unreachable
            LogStoreTimeoutError: If the command times out
            LogStoreError: For other Redis errors
        """
        try:
            new_id = self._client.xadd(stream, dict(fields), id=entry_id)
        except RedisTimeoutError as e:
            raise LogStoreTimeoutError(f"XADD to '{stream}' timed out: {e}") from e
        except RedisConnectionError as e:
            raise LogStoreConnectionError(f"Failed to connect to Redis: {e}") from e
        except RedisError as e:
            raise LogStoreError(f"XADD to '{stream}' failed: {e}") from e

        if isinstance(new_id, bytes):
            new_id = new_id.decode("utf-8", errors="replace")

        logger.debug("Entry appended to Redis stream", extra={"stream": stream, "entry_id": new_id})
        return new_id

    def range(self, stream: str, lower: str, upper: str) -> List[Any]:
        """Read raw entries with XRANGE.

        Args:
            stream: Stream key
            lower: Lower id bound, passed verbatim
            upper: Upper id bound, passed verbatim

        Returns:
            Raw XRANGE reply, oldest first

        Raises:
            LogStoreConnectionError: If Redis is unreachable
            LogStoreTimeoutError: If the command times out
            LogStoreError: For other Redis errors
        """
        try:
            reply = self._client.xrange(stream, min=lower, max=upper)
        except RedisTimeoutError as e:
            raise LogStoreTimeoutError(f"XRANGE on '{stream}' timed out: {e}") from e
        except RedisConnectionError as e:
            raise LogStoreConnectionError(f"Failed to connect to Redis: {e}") from e
        except RedisError as e:
            raise LogStoreError(f"XRANGE on '{stream}' failed: {e}") from e

        return list(reply or [])

    def close(self) -> None:
        """Close the Redis connection pool."""
        try:
            self._client.close()
        except RedisError as e:
            logger.warning(f"Error closing Redis client: {e}")
        logger.info("Redis connection closed")
