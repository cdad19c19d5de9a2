from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any


class Debouncer:
    """Runs a coroutine function once input has been quiet for ``delay`` seconds.

    Every :meth:`trigger` cancels the pending run and schedules a new one.
    Must be used from inside a running event loop.
    """

    def __init__(self, delay: float) -> None:
        if delay < 0:
            raise ValueError("delay must not be negative")
        self._delay = delay
        self._task: asyncio.Task[None] | None = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def trigger(self, fn: Callable[..., Awaitable[Any]], *args: Any) -> None:
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run(fn, *args))

    async def _run(self, fn: Callable[..., Awaitable[Any]], *args: Any) -> None:
        await asyncio.sleep(self._delay)
        await fn(*args)

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def wait(self) -> None:
        # Loop because a trigger during the wait replaces the task.
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})
