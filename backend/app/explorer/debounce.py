"""
Debounced calls.

Scheduling a call starts a quiet period; a new call during that period
cancels the pending one and starts over. Only the most recent call fires.
"""
import asyncio
import inspect
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class Debouncer:
    """Runs `callback` once calls have stopped for `wait` seconds."""

    def __init__(self, callback: Callable[..., Any], wait: float = 0.3):
        self.callback = callback
        self.wait = wait
        self._handle: Optional[asyncio.TimerHandle] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def __call__(self, *args, **kwargs) -> None:
        """Schedule the callback on the running loop, superseding any pending call."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.wait, self._fire, args, kwargs)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, args: tuple, kwargs: dict) -> None:
        self._handle = None
        result = self.callback(*args, **kwargs)
        if inspect.isawaitable(result):
            self._task = asyncio.ensure_future(result)
            self._task.add_done_callback(self._report)

    @staticmethod
    def _report(task: asyncio.Task) -> None:
        if not task.cancelled() and task.exception() is not None:
            logger.error("Debounced call failed", exc_info=task.exception())

    async def flush(self) -> None:
        """Wait for the scheduled call (and any coroutine it started) to finish."""
        while self._handle is not None:
            await asyncio.sleep(self.wait / 4 or 0)
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)
