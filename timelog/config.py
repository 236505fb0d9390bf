"""
Configuration management for timelog.

All configuration is done via environment variables.
This module provides typed configuration classes with validation.

Invariants:
    - All settings have sensible defaults for local development
    - Secrets are never logged or exposed in error messages

How to change safely:
    - Add new settings with defaults that maintain backward compatibility
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlsplit, urlunsplit

logger = logging.getLogger(__name__)

# Schemes accepted by redis.Redis.from_url
REDIS_URL_SCHEMES = ("redis", "rediss", "unix")


class StoreBackend(Enum):
    """Supported log store backends."""

    REDIS = "redis"
    MEMORY = "memory"


@dataclass(frozen=True)
class RedisConfig:
    """Redis backend configuration.

    Attributes:
        url: Redis connection URL (redis://[user:password@]host:port/db)
        socket_timeout: Command timeout in seconds
        socket_connect_timeout: Connect timeout in seconds
    """

    url: str = "redis://localhost:6379/0"
    socket_timeout: float = 5.0
    socket_connect_timeout: float = 5.0

    @classmethod
    def from_env(cls) -> RedisConfig:
        """Load configuration from environment variables."""
        return cls(
            url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
            socket_timeout=float(os.getenv("REDIS_SOCKET_TIMEOUT", "5.0")),
            socket_connect_timeout=float(os.getenv("REDIS_CONNECT_TIMEOUT", "5.0")),
        )

    @property
    def redacted_url(self) -> str:
        """URL with any password replaced, safe to log."""
        parts = urlsplit(self.url)
        if parts.password is None:
            return self.url
        netloc = parts.netloc.replace(f":{parts.password}@", ":***@", 1)
        return urlunsplit(parts._replace(netloc=netloc))


@dataclass(frozen=True)
class StreamConfig:
    """Stream naming configuration.

    Attributes:
        name: Default stream used by the CLI
    """

    name: str = "test"

    @classmethod
    def from_env(cls) -> StreamConfig:
        """Load configuration from environment variables."""
        return cls(name=os.getenv("TIMELOG_STREAM", "test"))


@dataclass(frozen=True)
class ObservabilityConfig:
    """Logging configuration.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: Log format (json, text)
    """

    log_level: str = "INFO"
    log_format: str = "text"

    @classmethod
    def from_env(cls) -> ObservabilityConfig:
        """Load configuration from environment variables."""
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "text"),
        )


@dataclass
class AppConfig:
    """Complete application configuration.

    Attributes:
        store_backend: Which log store backend to use
        redis: Redis configuration (if store_backend is REDIS)
        stream: Stream naming configuration
        observability: Logging configuration
    """

    store_backend: StoreBackend = StoreBackend.REDIS
    redis: RedisConfig = field(default_factory=RedisConfig)
    stream: StreamConfig = field(default_factory=StreamConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)

    @classmethod
    def from_env(cls) -> AppConfig:
        """Load complete configuration from environment variables.

        Returns:
            AppConfig with all sections populated from environment.

        Raises:
            ValueError: If required configuration is missing or invalid.
        """
        backend_str = os.getenv("TIMELOG_BACKEND", "redis").lower()
        try:
            store_backend = StoreBackend(backend_str)
        except ValueError:
            raise ValueError(
                f"Invalid TIMELOG_BACKEND '{backend_str}'. Must be one of: redis, memory"
            )

        config = cls(
            store_backend=store_backend,
            redis=RedisConfig.from_env(),
            stream=StreamConfig.from_env(),
            observability=ObservabilityConfig.from_env(),
        )

        config.validate()
        return config

    def validate(self) -> None:
        """Validate configuration consistency.

        Raises:
            ValueError: If configuration is invalid.
        """
        if self.store_backend == StoreBackend.REDIS:
            if not self.redis.url:
                raise ValueError("REDIS_URL is required when TIMELOG_BACKEND=redis")
            scheme = urlsplit(self.redis.url).scheme
            if scheme not in REDIS_URL_SCHEMES:
                raise ValueError(
                    f"Invalid REDIS_URL scheme '{scheme}'. Must be one of: "
                    f"{', '.join(REDIS_URL_SCHEMES)}"
                )
            if self.redis.socket_timeout <= 0:
                raise ValueError("REDIS_SOCKET_TIMEOUT must be positive")
            if self.redis.socket_connect_timeout <= 0:
                raise ValueError("REDIS_CONNECT_TIMEOUT must be positive")

        if not self.stream.name:
            raise ValueError("TIMELOG_STREAM must not be empty")

        if self.observability.log_format not in ("json", "text"):
            raise ValueError(
                f"Invalid LOG_FORMAT '{self.observability.log_format}'. Must be one of: json, text"
            )

    def log_config(self) -> None:
        """Log configuration (redacting secrets)."""
        logger.info(
            "Configuration loaded",
            extra={
                "store_backend": self.store_backend.value,
                "redis_url": self.redis.redacted_url
                if self.store_backend == StoreBackend.REDIS
                else None,
                "stream": self.stream.name,
                "log_level": self.observability.log_level,
            },
        )
