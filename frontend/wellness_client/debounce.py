import asyncio
from typing import Awaitable, Callable


class Debouncer:
    """Run ``callback`` once, ``delay`` seconds after the last :meth:`schedule`.

    Each schedule cancels the pending timer. Once the delay has elapsed the
    callback is in flight and a later schedule or cancel no longer touches it.
    Must be used from inside a running event loop.
    """

    def __init__(self, delay: float, callback: Callable[[], Awaitable[None]]):
        self.delay = delay
        self._callback = callback
        self._timer: asyncio.Task | None = None
        self._inflight: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def schedule(self) -> None:
        self.cancel()
        self._timer = asyncio.get_running_loop().create_task(self._fire_later())

    def cancel(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def _fire_later(self) -> None:
        await asyncio.sleep(self.delay)
        task = asyncio.current_task()
        if self._timer is task:
            self._timer = None
        self._inflight.add(task)
        try:
            await self._callback()
        finally:
            self._inflight.discard(task)

    async def drain(self) -> None:
        """Wait until no timer is pending and no callback is running."""
        while self.pending or self._inflight:
            waiting = [t for t in (self._timer, *self._inflight) if t is not None]
            await asyncio.gather(*waiting, return_exceptions=True)
