import asyncio
import threading

import pytest

from stealstickers.services.dispatcher import TaskDispatcher


def test_dispatch_without_loop_raises_and_closes_coroutine() -> None:
    ran = []

    async def job() -> None:
        ran.append(True)

    coro = job()
    with pytest.raises(RuntimeError):
        TaskDispatcher().dispatch(coro)
    assert coro.cr_frame is None
    assert ran == []


def test_dispatch_from_other_thread_uses_bound_loop() -> None:
    loop = asyncio.new_event_loop()
    done = threading.Event()
    worker = threading.Thread(target=loop.run_forever, daemon=True)
    worker.start()
    try:
        async def job() -> None:
            done.set()

        TaskDispatcher(loop).dispatch(job())
        assert done.wait(timeout=5)
    finally:
        loop.call_soon_threadsafe(loop.stop)
        worker.join(timeout=5)
        loop.close()


def test_failed_task_does_not_break_others() -> None:
    results = []

    async def fails() -> None:
        raise ValueError("boom")

    async def succeeds() -> None:
        results.append("ok")

    async def scenario() -> None:
        dispatcher = TaskDispatcher()
        dispatcher.dispatch(fails())
        dispatcher.dispatch(succeeds())
        await dispatcher.wait_idle()
        assert dispatcher.pending == 0

    asyncio.run(scenario())
    assert results == ["ok"]


def test_cross_thread_dispatch_is_tracked_until_done() -> None:
    loop = asyncio.new_event_loop()
    worker = threading.Thread(target=loop.run_forever, daemon=True)
    worker.start()
    gate = threading.Event()
    finished = []

    async def job() -> None:
        while not gate.is_set():
            await asyncio.sleep(0.01)
        finished.append(True)

    try:
        dispatcher = TaskDispatcher(loop)
        dispatcher.dispatch(job())
        assert dispatcher.pending == 1

        gate.set()
        asyncio.run(dispatcher.wait_idle())

        assert finished == [True]
        assert dispatcher.pending == 0
    finally:
        loop.call_soon_threadsafe(loop.stop)
        worker.join(timeout=5)
        loop.close()
