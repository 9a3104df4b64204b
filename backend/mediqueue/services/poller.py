"""
Recurring timer with an explicit Idle / Polling state machine.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, Awaitable, Optional, Any

logger = logging.getLogger(__name__)


class PollState(str, Enum):
    """Timer states."""
    IDLE = "idle"
    POLLING = "polling"


class Poller:
    """
    Runs `tick` every `interval` seconds while in the Polling state.

    At most one timer task exists per poller. `start` and `stop` are
    idempotent, and `condition_changed` only creates or tears down the task
    when the requested state differs from the current one, so the timer's
    phase survives repeated calls with the same answer.
    """

    def __init__(self, interval: float, tick: Callable[[], Awaitable[Any]], name: str = "poller"):
        if interval <= 0:
            raise ValueError("Poll interval must be positive")
        self.interval = interval
        self.tick = tick
        self.name = name
        self._task: Optional[asyncio.Task] = None
        self._stopped_task: Optional[asyncio.Task] = None
        self.ticks = 0

    @property
    def state(self) -> PollState:
        return PollState.POLLING if self._task is not None else PollState.IDLE

    @property
    def polling(self) -> bool:
        return self._task is not None

    def start(self) -> None:
        """Idle -> Polling."""
        if self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=f"{self.name}-poll")
        logger.debug(f"{self.name}: polling every {self.interval}s")

    def stop(self) -> None:
        """Polling -> Idle. The pending tick is cancelled before it can fire."""
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            self._stopped_task = task
            logger.debug(f"{self.name}: polling stopped")

    def condition_changed(self, should_poll: bool) -> None:
        """Move to the state the latest condition asks for."""
        if should_poll and self._task is None:
            self.start()
        elif not should_poll and self._task is not None:
            self.stop()

    async def cancel(self) -> None:
        """Stop and wait for the timer task to finish unwinding."""
        self.stop()
        task, self._stopped_task = self._stopped_task, None
        if task is not None and task is not asyncio.current_task():
            await asyncio.gather(task, return_exceptions=True)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.ticks += 1
            try:
                await self.tick()
            except Exception:
                logger.exception(f"{self.name}: tick failed")
