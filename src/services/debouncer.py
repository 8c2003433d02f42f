"""Debounced scheduling of async callbacks."""

import asyncio
from typing import Awaitable, Callable, Optional

import structlog

logger = structlog.get_logger(__name__)


class Debouncer:
    """Run an async callback once activity has been quiet for ``delay`` seconds.

    Scheduling cancels whatever is pending, including a callback that has
    already started, so at most one task is alive at any time and a
    superseded callback never reaches its side effects.
    """

    def __init__(self, delay: float, name: str = "debouncer"):
        self.delay = delay
        self.name = name
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        """Whether a scheduled callback has not finished yet."""
        return self._task is not None and not self._task.done()

    def schedule(self, callback: Callable[[], Awaitable[None]]) -> asyncio.Task:
        """Replace any pending callback with ``callback`` after the quiet period."""
        self.cancel()
        self._task = asyncio.create_task(self._run(callback))
        return self._task

    async def _run(self, callback: Callable[[], Awaitable[None]]) -> None:
        await asyncio.sleep(self.delay)
        try:
            await callback()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(
                "debounced_callback_error",
                debouncer=self.name,
                error=str(e),
                error_type=type(e).__name__,
            )

    def cancel(self) -> None:
        """Cancel the pending callback, if any. Safe to call repeatedly."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            logger.debug("debounce_cancelled", debouncer=self.name)
        self._task = None

    async def aclose(self) -> None:
        """Cancel the pending callback and wait for it to unwind."""
        task = self._task
        self.cancel()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass
