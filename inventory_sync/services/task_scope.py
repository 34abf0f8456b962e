from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any


class TaskScope:
    """Owns every task a coordinator launches so they can be torn down together."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def active_tasks(self) -> frozenset[asyncio.Task]:
        return frozenset(task for task in self._tasks if not task.done())

    def launch(self, coro: Coroutine[Any, Any, Any], *, name: str | None = None) -> asyncio.Task:
        if self._closed:
            coro.close()
            raise RuntimeError('Task scope is closed')
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def aclose(self) -> None:
        self._closed = True
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
