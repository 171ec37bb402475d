"""Cancellable delayed trigger for search-as-you-type."""

import asyncio
from typing import Any, Awaitable, Callable, Optional


class DebouncedTrigger:
    """Runs ``action`` once input has been quiet for ``delay`` seconds.

    Every ``trigger()`` resets the timer. If the previous run is already
    awaiting its request, that task is cancelled, so its result is never
    applied.
    """

    def __init__(self, delay: float, action: Callable[..., Awaitable[Any]]):
        self.delay = delay
        self.action = action
        self._task: Optional[asyncio.Task] = None

    async def _fire(self, args: tuple) -> None:
        await asyncio.sleep(self.delay)
        await self.action(*args)

    def trigger(self, *args) -> None:
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._fire(args))

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    async def wait(self) -> None:
        """Wait for the current run (if any) to finish or be cancelled."""
        if self._task is not None:
            await asyncio.wait([self._task])
