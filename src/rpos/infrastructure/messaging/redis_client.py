from __future__ import annotations

import logging
import os
from functools import lru_cache

import redis

logger = logging.getLogger(__name__)


def redis_url() -> str | None:
    return os.getenv("REDIS_URL") or None


def redis_configured() -> bool:
    """Terminals fall back to log-only events when no broker is configured."""
    return redis_url() is not None


@lru_cache(maxsize=8)
def _build_client(url: str, timeout_seconds: float) -> redis.Redis:
    return redis.Redis.from_url(
        url,
        socket_connect_timeout=timeout_seconds,
        socket_timeout=timeout_seconds,
    )


def get_redis_client(timeout_seconds: float = 1.0) -> redis.Redis:
    url = redis_url()
    if url is None:
        raise RuntimeError("REDIS_URL is not set")
    return _build_client(url, timeout_seconds)


def ping_redis(timeout_seconds: float = 1.0) -> bool:
    try:
        return bool(get_redis_client(timeout_seconds).ping())
    except (redis.RedisError, RuntimeError) as exc:
        logger.warning("redis_ping_failed", extra={"error_type": type(exc).__name__})
        return False
