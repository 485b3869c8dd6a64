from __future__ import annotations

import os
from functools import lru_cache

import redis.asyncio as redis


def redis_url() -> str | None:
    return os.getenv("REDIS_URL") or None


@lru_cache(maxsize=8)
def _build_client(url: str, timeout_seconds: float) -> redis.Redis:
    return redis.Redis.from_url(
        url,
        socket_connect_timeout=timeout_seconds,
        socket_timeout=timeout_seconds,
    )


def get_redis_client(timeout_seconds: float = 1.0) -> redis.Redis:
    url = redis_url()
    if not url:
        raise RuntimeError("REDIS_URL is not set")
    return _build_client(url, timeout_seconds)


async def ping_redis(timeout_seconds: float = 1.0) -> bool:
    try:
        return bool(await get_redis_client(timeout_seconds).ping())
    except Exception:
        return False
