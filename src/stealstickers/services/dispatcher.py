import asyncio
import concurrent.futures
import logging
import threading
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)


class TaskDispatcher:
    """
    把协程作为独立任务调度出去，调用方不等待结果。

    在事件循环线程内调用时直接 create_task；在其他线程调用时投递到绑定的循环。
    两种方式产生的任务都会被跟踪，直到完成。
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._tasks: set[asyncio.Task[Any]] = set()
        self._futures: set[concurrent.futures.Future[Any]] = set()
        self._lock = threading.Lock()

    def dispatch(self, coro: Coroutine[Any, Any, Any]) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is not None and (self._loop is None or self._loop is running):
            task = running.create_task(coro)
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)
            return

        if self._loop is not None and not self._loop.is_closed():
            future = asyncio.run_coroutine_threadsafe(coro, self._loop)
            with self._lock:
                self._futures.add(future)
            future.add_done_callback(self._on_future_done)
            return

        coro.close()
        raise RuntimeError("没有可用的事件循环，无法调度后台任务")

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._tasks) + len(self._futures)

    async def wait_idle(self) -> None:
        while True:
            with self._lock:
                futures = list(self._futures)
            awaitables = [*self._tasks, *(asyncio.wrap_future(f) for f in futures)]
            if not awaitables:
                return
            await asyncio.gather(*awaitables, return_exceptions=True)

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        _log_failure(task.exception())

    def _on_future_done(self, future: concurrent.futures.Future[Any]) -> None:
        with self._lock:
            self._futures.discard(future)
        if future.cancelled():
            return
        _log_failure(future.exception())


def _log_failure(exc: BaseException | None) -> None:
    if exc is not None:
        logger.error("后台任务异常退出", exc_info=exc)
