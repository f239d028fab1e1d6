"""Cancellable periodic and one-shot tasks on the running event loop."""

import asyncio
import inspect
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class ScheduledTask:
    """Handle for a scheduled callback. Cancelling is idempotent."""

    def __init__(self, name: str, task: asyncio.Task):
        self.name = name
        self._task = task

    @property
    def done(self) -> bool:
        return self._task.done()

    def cancel(self) -> None:
        if not self._task.done():
            self._task.cancel()

    async def wait(self) -> None:
        try:
            await self._task
        except asyncio.CancelledError:
            logger.debug("Task %s cancelled", self.name)


class TaskScheduler:
    def __init__(self):
        self._tasks: list[ScheduledTask] = []

    def every(
        self,
        name: str,
        seconds: float,
        callback: Callable,
        run_immediately: bool = False,
    ) -> ScheduledTask:
        """Run `callback` every `seconds` until cancelled.

        A failing callback is logged and the schedule keeps running.
        """
        task = asyncio.create_task(
            self._repeat(name, seconds, callback, run_immediately), name=name
        )
        return self._track(name, task)

    def after(self, name: str, seconds: float, callback: Callable) -> ScheduledTask:
        """Run `callback` once after `seconds` unless cancelled first."""
        task = asyncio.create_task(self._once(name, seconds, callback), name=name)
        return self._track(name, task)

    def spawn(self, name: str, callback: Callable) -> ScheduledTask:
        """Run `callback` as soon as the loop gets to it."""
        return self.after(name, 0, callback)

    async def shutdown(self) -> None:
        """Cancel every pending task and wait for them to unwind."""
        tasks, self._tasks = self._tasks, []
        for t in tasks:
            t.cancel()
        for t in tasks:
            await t.wait()
        logger.debug("Scheduler stopped %d tasks", len(tasks))

    @property
    def pending(self) -> list[str]:
        return [t.name for t in self._tasks if not t.done]

    def _track(self, name: str, task: asyncio.Task) -> ScheduledTask:
        handle = ScheduledTask(name, task)
        self._tasks = [t for t in self._tasks if not t.done]
        self._tasks.append(handle)
        return handle

    async def _repeat(
        self, name: str, seconds: float, callback: Callable, run_immediately: bool
    ) -> None:
        if run_immediately:
            await _invoke(name, callback)
        while True:
            await asyncio.sleep(seconds)
            await _invoke(name, callback)

    async def _once(self, name: str, seconds: float, callback: Callable) -> None:
        await asyncio.sleep(seconds)
        await _invoke(name, callback)


async def _invoke(name: str, callback: Callable) -> None:
    try:
        result = callback()
        if inspect.isawaitable(result):
            await result
    except Exception:
        logger.exception("Scheduled task %s failed", name)
