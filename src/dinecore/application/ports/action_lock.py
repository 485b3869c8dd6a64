from __future__ import annotations

from typing import Protocol


class ActionLock(Protocol):
    async def acquire(self, key: str) -> bool: ...

    async def release(self, key: str) -> None: ...
