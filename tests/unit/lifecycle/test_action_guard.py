from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from dinecore.application.use_cases.action_guard import (
    ActionGuard,
    ActionInProgressError,
    LocalActionLock,
    ViewDisposedError,
    action_key,
)


def test_action_key_joins_parts() -> None:
    assert action_key("status", "order", "ord_1") == "status:order:ord_1"


def test_second_trigger_while_in_flight_is_rejected() -> None:
    guard = ActionGuard()
    calls: list[str] = []

    async def scenario() -> tuple[object, BaseException | None]:
        release = asyncio.Event()

        async def slow() -> str:
            calls.append("sent")
            await release.wait()
            return "done"

        first = asyncio.ensure_future(guard.run("cancel:order:1", slow))
        await asyncio.sleep(0)
        assert guard.in_flight("cancel:order:1")
        second_error: BaseException | None = None
        try:
            await guard.run("cancel:order:1", slow)
        except ActionInProgressError as exc:
            second_error = exc
        release.set()
        return await first, second_error

    result, second_error = asyncio.run(scenario())
    assert result == "done"
    assert isinstance(second_error, ActionInProgressError)
    assert calls == ["sent"]
    assert not guard.in_flight("cancel:order:1")


def test_key_is_released_after_failure() -> None:
    guard = ActionGuard()

    async def boom() -> None:
        raise RuntimeError("boom")

    async def ok() -> str:
        return "ok"

    with pytest.raises(RuntimeError):
        asyncio.run(guard.run("k", boom))
    assert asyncio.run(guard.run("k", ok)) == "ok"


def test_dispose_discards_pending_results() -> None:
    guard = ActionGuard()

    async def scenario() -> None:
        async def slow() -> str:
            await asyncio.sleep(10)
            return "late"

        pending = asyncio.ensure_future(guard.run("k", slow))
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        guard.dispose()
        with pytest.raises(ViewDisposedError):
            await pending

    asyncio.run(scenario())
    assert guard.disposed is True


def test_disposed_guard_refuses_new_work() -> None:
    guard = ActionGuard()
    guard.dispose()

    async def ok() -> str:
        return "ok"

    with pytest.raises(ViewDisposedError):
        asyncio.run(guard.run("k", ok))


def test_shared_lock_blocks_other_guards() -> None:
    lock = LocalActionLock()
    assert asyncio.run(lock.acquire("checkout:usr_1")) is True
    guard = ActionGuard(lock=lock)

    async def ok() -> str:
        return "ok"

    with pytest.raises(ActionInProgressError):
        asyncio.run(guard.run("checkout:usr_1", ok))
    asyncio.run(lock.release("checkout:usr_1"))
    assert asyncio.run(guard.run("checkout:usr_1", ok)) == "ok"
