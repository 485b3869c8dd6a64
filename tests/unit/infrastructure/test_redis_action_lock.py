from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from dinecore.application.ports.api import TransportError
from dinecore.application.use_cases.action_guard import ActionGuard
from dinecore.infrastructure.locks.redis_lock import RedisActionLock


class FakeRedis:
    def __init__(self) -> None:
        self.values: dict[str, bytes] = {}
        self.expiry: dict[str, int] = {}

    async def set(self, name: str, value: str, nx: bool = False, ex: int | None = None):
        if nx and name in self.values:
            return None
        self.values[name] = value.encode("utf-8")
        if ex is not None:
            self.expiry[name] = ex
        return True

    async def get(self, name: str):
        return self.values.get(name)

    async def delete(self, name: str) -> int:
        return 1 if self.values.pop(name, None) is not None else 0


def test_only_one_worker_holds_a_key() -> None:
    redis = FakeRedis()
    first = RedisActionLock(client=redis, ttl_seconds=15)
    second = RedisActionLock(client=redis)

    assert asyncio.run(first.acquire("checkout:usr_1")) is True
    assert asyncio.run(second.acquire("checkout:usr_1")) is False
    assert redis.expiry["dinecore:action:checkout:usr_1"] == 15

    asyncio.run(first.release("checkout:usr_1"))
    assert asyncio.run(second.acquire("checkout:usr_1")) is True


def test_release_leaves_a_key_taken_over_after_expiry() -> None:
    redis = FakeRedis()
    lock = RedisActionLock(client=redis)
    asyncio.run(lock.acquire("k"))
    redis.values["dinecore:action:k"] = b"someone-else"

    asyncio.run(lock.release("k"))

    assert redis.values["dinecore:action:k"] == b"someone-else"


def test_guard_runs_through_redis_lock() -> None:
    redis = FakeRedis()
    guard = ActionGuard(lock=RedisActionLock(client=redis))

    async def ok() -> str:
        return "ok"

    assert asyncio.run(guard.run("status:order:1", ok)) == "ok"
    assert redis.values == {}


class UnreachableRedis(FakeRedis):
    def __init__(self, fail_on: set[str]) -> None:
        super().__init__()
        self.fail_on = fail_on

    async def set(self, name: str, value: str, nx: bool = False, ex: int | None = None):
        if "set" in self.fail_on:
            raise RedisConnectionError("connection refused")
        return await super().set(name, value, nx=nx, ex=ex)

    async def get(self, name: str):
        if "get" in self.fail_on:
            raise RedisConnectionError("connection refused")
        return await super().get(name)


def test_unreachable_redis_surfaces_as_transport_error() -> None:
    guard = ActionGuard(lock=RedisActionLock(client=UnreachableRedis({"set"})))
    calls: list[str] = []

    async def submit() -> str:
        calls.append("submit")
        return "ok"

    with pytest.raises(TransportError):
        asyncio.run(guard.run("checkout:usr_1", submit))
    assert calls == []


def test_failed_release_keeps_the_action_result() -> None:
    redis = UnreachableRedis({"get"})
    guard = ActionGuard(lock=RedisActionLock(client=redis))

    async def submit() -> str:
        return "ok"

    assert asyncio.run(guard.run("checkout:usr_1", submit)) == "ok"
    assert "dinecore:action:checkout:usr_1" in redis.values


def test_failed_release_keeps_the_action_error() -> None:
    guard = ActionGuard(lock=RedisActionLock(client=UnreachableRedis({"get"})))

    async def submit() -> str:
        raise ValueError("rejected")

    with pytest.raises(ValueError, match="rejected"):
        asyncio.run(guard.run("checkout:usr_1", submit))
