"""
Registry of mounted views, at most one per key.
"""

import asyncio
import logging
from typing import Callable, Dict, Optional

from .view import QueueView

logger = logging.getLogger(__name__)


class ViewRegistry:
    """
    Mounted views keyed by page and resource id.

    Lookups and inserts never await, so two requests for the same key always
    share one view. The first load runs in its own task outside any lock:
    a slow endpoint only delays callers of that key.
    """

    def __init__(self):
        self._views: Dict[str, QueueView] = {}
        self._first_loads: Dict[str, asyncio.Task] = {}

    def __len__(self) -> int:
        return len(self._views)

    def __contains__(self, key: str) -> bool:
        return key in self._views

    def get(self, key: str) -> Optional[QueueView]:
        return self._views.get(key)

    async def mount(self, key: str, factory: Callable[[], QueueView]) -> QueueView:
        """Return the mounted view for `key`, creating and mounting it if needed."""
        view = self._views.get(key)
        if view is None:
            view = factory()
            self._views[key] = view
            task = asyncio.get_running_loop().create_task(view.mount(), name=f"{key}-mount")
            self._first_loads[key] = task
            task.add_done_callback(lambda done, key=key: self._forget_first_load(key, done))

        first_load = self._first_loads.get(key)
        if first_load is not None:
            # a cancelled caller must not cancel the load other callers wait on
            await asyncio.shield(first_load)
        return view

    def _forget_first_load(self, key: str, task: asyncio.Task) -> None:
        if self._first_loads.get(key) is task:
            del self._first_loads[key]

    async def unmount(self, key: str) -> bool:
        view = self._views.pop(key, None)
        self._first_loads.pop(key, None)
        if view is None:
            return False
        await view.unmount()
        return True

    async def unmount_all(self) -> None:
        """
        Close every view, then wait for their timers.

        Every view is closed before the first await, so this completes its
        job even when it runs inside a tick of one of the views it closes.
        """
        views = list(self._views.values())
        self._views.clear()
        self._first_loads.clear()
        for view in views:
            view.close()
        for view in views:
            await view.unmount()
        logger.info(f"Unmounted {len(views)} views")
