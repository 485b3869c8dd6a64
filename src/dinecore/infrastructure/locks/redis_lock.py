from __future__ import annotations

import logging
from uuid import uuid4

from redis.exceptions import RedisError

from dinecore.application.ports.action_lock import ActionLock
from dinecore.application.ports.api import TransportError
from dinecore.infrastructure.cache.redis_client import get_redis_client

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 30


class RedisActionLock(ActionLock):
    """Cross-worker lock: one holder per action key, released on completion or TTL expiry."""

    def __init__(
        self,
        client=None,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        prefix: str = "dinecore:action:",
    ) -> None:
        self._client = client
        self._ttl_seconds = ttl_seconds
        self._prefix = prefix
        self._tokens: dict[str, str] = {}

    def _redis(self):
        return self._client if self._client is not None else get_redis_client()

    async def acquire(self, key: str) -> bool:
        token = uuid4().hex
        try:
            acquired = await self._redis().set(
                self._prefix + key, token, nx=True, ex=self._ttl_seconds
            )
        except RedisError as exc:
            logger.warning("action_lock_unavailable", extra={"action": key})
            raise TransportError("action lock unavailable") from exc
        if acquired:
            self._tokens[key] = token
        return bool(acquired)

    async def release(self, key: str) -> None:
        token = self._tokens.pop(key, None)
        if token is None:
            return
        name = self._prefix + key
        try:
            current = await self._redis().get(name)
            if isinstance(current, bytes):
                current = current.decode("utf-8")
            if current == token:
                await self._redis().delete(name)
        except RedisError:
            # the key expires on its own after the TTL
            logger.warning("action_lock_release_failed", extra={"action": key})
