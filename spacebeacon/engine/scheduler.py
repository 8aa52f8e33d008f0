"""Background expiry loop: every tick_interval, ask the store to close a lapsed keep-open window."""

import asyncio
import logging
from typing import Optional

from spacebeacon.core.clock import Clock, SystemClock
from spacebeacon.engine.store import StatusStore

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL_SEC = 0.1


class ExpiryScheduler:
    """Periodic check_expiry driver running as an asyncio task.

    Start once per server instance; stop() cancels the task and waits for it.
    """

    def __init__(
        self,
        store: StatusStore,
        tick_interval: float = DEFAULT_TICK_INTERVAL_SEC,
        clock: Optional[Clock] = None,
    ):
        if tick_interval <= 0:
            raise ValueError("tick_interval must be > 0")
        self._store = store
        self._tick_interval = float(tick_interval)
        self._clock = clock or SystemClock()
        self._task: Optional[asyncio.Task] = None
        self._ticks = 0

    @property
    def tick_interval(self) -> float:
        return self._tick_interval

    @property
    def ticks(self) -> int:
        """Number of completed expiry checks."""
        return self._ticks

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def tick(self) -> bool:
        """Run one expiry check now. Returns True if the store closed."""
        closed = self._store.check_expiry(self._clock.now())
        self._ticks += 1
        return closed

    async def _run(self) -> None:
        while True:
            self.tick()
            await asyncio.sleep(self._tick_interval)

    def _on_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Expiry scheduler died; keep-open windows will not auto-close", exc_info=exc)

    def start(self) -> asyncio.Task:
        """Spawn the loop on the running event loop. A second start while running is refused."""
        if self.is_running:
            logger.warning("Expiry scheduler already running; ignoring start()")
            return self._task
        self._task = asyncio.get_running_loop().create_task(self._run(), name="expiry-scheduler")
        self._task.add_done_callback(self._on_done)
        logger.info(
            "Expiry scheduler started (tick=%.3fs, keep_open_window=%.0fs)",
            self._tick_interval,
            self._store.keep_open_window,
        )
        return self._task

    async def stop(self) -> None:
        """Cancel the loop and wait until it has exited."""
        task = self._task
        if task is None:
            return
        self._task = None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.debug("Expiry scheduler raised before cancel: %s", e)
        logger.info("Expiry scheduler stopped after %d ticks", self._ticks)
