import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class Ticker:
    """Cancellable repeating timer that calls ``callback`` every ``interval`` seconds."""

    def __init__(self, callback: Callable[[], object], interval: float = 1.0):
        self.callback = callback
        self.interval = interval
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            # Called on the loop thread, snapshot write included.
            try:
                self.callback()
            except Exception:
                logger.exception("Tick callback failed")

