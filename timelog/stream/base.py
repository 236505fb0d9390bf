"""
Base protocol and types for log store access.

This module defines the LogStore protocol that all backends must implement,
along with the error types raised by store operations.

Invariants:
    - append() lets the store assign the entry id when entry_id is "*"
    - range() returns raw entry replies ordered oldest to newest
    - A raw entry reply is [entry_id, [name, value, name, value, ...]]
      with byte-string members, as Redis XRANGE returns it
    - Backend driver errors are translated into LogStoreError subclasses

How to change safely:
    - Protocol changes require updating all implementations
    - Keep the raw reply shape identical across backends, parse_entry
      depends on it
"""

from __future__ import annotations

from abc import abstractmethod
from typing import (
    Any,
    List,
    Protocol,
    Sequence,
    Tuple,
    runtime_checkable,
    TYPE_CHECKING,
)
import logging

if TYPE_CHECKING:
    from ..config import AppConfig

logger = logging.getLogger(__name__)

# Range bounds meaning "oldest entry" and "newest entry".
MIN_ID = "-"
MAX_ID = "+"

# Entry id request asking the store to assign the id.
AUTO_ID = "*"


class LogStoreError(Exception):
    """Base exception for log store operations."""
    pass


class LogStoreConnectionError(LogStoreError):
    """Connection to the log store failed."""
    pass


class LogStoreTimeoutError(LogStoreError):
    """Log store operation timed out."""
    pass


@runtime_checkable
class LogStore(Protocol):
    """Protocol for append-only log store backends.

    Streams are addressed by name. Every appended entry gets an opaque,
    monotonically increasing id from the store.

    Example:
        >>> store = RedisLogStore(config)
        >>> entry_id = store.append("test", [("owner", "Taro")])
        >>> raw = store.range("test", "-", "+")
    """

    @abstractmethod
    def append(
        self,
        stream: str,
        fields: Sequence[Tuple[str, str]],
        entry_id: str = AUTO_ID,
    ) -> str:
        """Append a field map to a stream.

        Args:
            stream: Stream name
            fields: Ordered (name, value) pairs
            entry_id: Id request, "*" lets the store assign one

        Returns:
            The id of the new entry

        Raises:
            LogStoreConnectionError: If the store is unreachable
            LogStoreTimeoutError: If the write times out
            LogStoreError: For other write failures
        """
        ...

    @abstractmethod
    def range(self, stream: str, lower: str, upper: str) -> List[Any]:
        """Read raw entries between two ids, inclusive, oldest first.

        Args:
            stream: Stream name
            lower: Lower id bound ("-" for the oldest entry)
            upper: Upper id bound ("+" for the newest entry)

        Returns:
            Raw entry replies, see parse_entry for the shape

        Raises:
            LogStoreConnectionError: If the store is unreachable
            LogStoreTimeoutError: If the read times out
            LogStoreError: For other read failures
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the connection to the store."""
        ...


def create_log_store(config: "AppConfig") -> LogStore:
    """Factory function to create a log store from configuration.

    Args:
        config: Application configuration

    Returns:
        Appropriate LogStore implementation

    Raises:
        ValueError: If backend is not supported
    """
    from ..config import StoreBackend
    from .memory import InMemoryLogStore
    from .redis import RedisLogStore

    if config.store_backend == StoreBackend.REDIS:
        return RedisLogStore(config.redis)
    elif config.store_backend == StoreBackend.MEMORY:
        return InMemoryLogStore()
    else:
        raise ValueError(f"Unsupported store backend: {config.store_backend}")
