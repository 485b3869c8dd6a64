from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, TypeVar

from dinecore.application.ports.action_lock import ActionLock

T = TypeVar("T")


class ActionInProgressError(Exception):
    def __init__(self, key: str) -> None:
        super().__init__(f"action {key} is already in progress")
        self.key = key
        self.details = {"action": key}


class ViewDisposedError(Exception):
    def __init__(self, key: str) -> None:
        super().__init__(f"result of action {key} discarded after disposal")
        self.key = key


class LocalActionLock:
    """In-process lock set for a single event loop."""

    def __init__(self) -> None:
        self._held: set[str] = set()

    async def acquire(self, key: str) -> bool:
        if key in self._held:
            return False
        self._held.add(key)
        return True

    async def release(self, key: str) -> None:
        self._held.discard(key)


def action_key(*parts: object) -> str:
    return ":".join(str(part) for part in parts)


class ActionGuard:
    """Runs each keyed action at most once at a time and drops results after dispose()."""

    def __init__(self, lock: ActionLock | None = None) -> None:
        self._lock: ActionLock = lock or LocalActionLock()
        self._tasks: dict[str, asyncio.Task] = {}
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def in_flight(self, key: str) -> bool:
        return key in self._tasks

    async def run(self, key: str, action: Callable[[], Awaitable[T]]) -> T:
        if self._disposed:
            raise ViewDisposedError(key)
        if key in self._tasks or not await self._lock.acquire(key):
            raise ActionInProgressError(key)

        task = asyncio.ensure_future(action())
        self._tasks[key] = task
        try:
            result = await task
        except asyncio.CancelledError:
            if self._disposed:
                raise ViewDisposedError(key) from None
            raise
        finally:
            self._tasks.pop(key, None)
            await self._lock.release(key)

        if self._disposed:
            raise ViewDisposedError(key)
        return result

    def dispose(self) -> None:
        self._disposed = True
        for task in list(self._tasks.values()):
            task.cancel()
