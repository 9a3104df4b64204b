"""
Live view over one backend endpoint.

A view fetches a snapshot, keeps the last good one, polls in the background
and exposes a manual refresh. Snapshots are replaced wholesale; failures are
turned into view state and never raised to callers.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Awaitable, Optional, Generic, TypeVar

from ..models.view import FetchError, FetchErrorKind, PageState, ViewPhase
from .api_client import ApiError, GENERIC_ERROR
from .poller import Poller

logger = logging.getLogger(__name__)

T = TypeVar("T")


def always_poll(snapshot) -> bool:
    return True


class QueueView(Generic[T]):
    """Fetch / poll / refresh lifecycle for a single mounted view."""

    def __init__(
        self,
        name: str,
        loader: Callable[[], Awaitable[T]],
        interval: Optional[float],
        should_poll: Optional[Callable[[Optional[T]], bool]] = None
    ):
        self.name = name
        self.loader = loader
        self.should_poll = should_poll or always_poll
        self.poller = Poller(interval, self._poll_tick, name) if interval else None

        self.snapshot: Optional[T] = None
        self.error: Optional[FetchError] = None
        self.last_updated: Optional[datetime] = None
        self.mounted = False

        self._foreground_in_flight = 0
        self._silent_in_flight = 0
        self._manual_in_flight = False
        self._issued_seq = 0
        self._applied_seq = 0

    # State

    @property
    def loading(self) -> bool:
        return self._foreground_in_flight > 0

    @property
    def refreshing(self) -> bool:
        return self._silent_in_flight > 0

    @property
    def refresh_disabled(self) -> bool:
        return self._manual_in_flight

    @property
    def phase(self) -> ViewPhase:
        if self.snapshot is None:
            return ViewPhase.ERROR if self.error is not None else ViewPhase.LOADING
        return ViewPhase.STALE if self.error is not None else ViewPhase.READY

    def state(self) -> PageState:
        return PageState(
            view=self.name,
            phase=self.phase,
            loading=self.loading,
            refreshing=self.refreshing,
            refresh_disabled=self.refresh_disabled,
            polling=self.poller is not None and self.poller.polling,
            error=self.error,
            last_updated=self.last_updated
        )

    # Lifecycle

    async def mount(self) -> None:
        """Fetch in the foreground once; the poller is armed from the result."""
        if self.mounted:
            return
        self.mounted = True
        logger.info(f"Mounted view {self.name}")
        await self.fetch(silent=False)

    def close(self) -> bool:
        """
        Mark the view dead and stop its timer without awaiting anything.

        Safe to call from inside one of this view's own ticks; later
        completions are dropped. Returns False when already closed.
        """
        if not self.mounted:
            return False
        self.mounted = False
        if self.poller is not None:
            self.poller.stop()
        logger.info(f"Unmounted view {self.name}")
        return True

    async def unmount(self) -> None:
        """Close, then wait for the timer task to finish unwinding."""
        self.close()
        if self.poller is not None:
            await self.poller.cancel()

    async def refresh(self) -> bool:
        """
        Manual refresh: one silent fetch.

        Returns False without fetching while a previous manual refresh is
        still in flight.
        """
        if self._manual_in_flight or not self.mounted:
            return False
        self._manual_in_flight = True
        try:
            await self.fetch(silent=True)
        finally:
            self._manual_in_flight = False
        return True

    async def retry(self) -> bool:
        """Foreground fetch, as offered by the error panel."""
        return await self.fetch(silent=False)

    async def _poll_tick(self) -> None:
        await self.fetch(silent=True)

    # Fetcher

    async def fetch(self, silent: bool = False) -> bool:
        """
        Run the loader once and reconcile the outcome into view state.

        Returns True when a new snapshot was applied.
        """
        if not self.mounted:
            return False

        self._issued_seq += 1
        seq = self._issued_seq
        if silent:
            self._silent_in_flight += 1
        else:
            self._foreground_in_flight += 1

        try:
            try:
                snapshot = await self.loader()
            except ApiError as e:
                self._apply_failure(seq, e.to_fetch_error(), silent)
                return False
            except Exception:
                logger.exception(f"{self.name}: unexpected loader failure")
                self._apply_failure(seq, FetchError(kind=FetchErrorKind.SERVER, message=GENERIC_ERROR), silent)
                return False
            return self._apply_snapshot(seq, snapshot)
        finally:
            if silent:
                self._silent_in_flight -= 1
            else:
                self._foreground_in_flight -= 1

    def _accepts(self, seq: int) -> bool:
        if not self.mounted:
            logger.debug(f"{self.name}: dropping response #{seq} after unmount")
            return False
        if seq < self._applied_seq:
            logger.debug(f"{self.name}: dropping response #{seq}, #{self._applied_seq} already applied")
            return False
        self._applied_seq = seq
        return True

    def _apply_snapshot(self, seq: int, snapshot: T) -> bool:
        if not self._accepts(seq):
            return False
        self.snapshot = snapshot
        self.error = None
        self.last_updated = datetime.now(timezone.utc)
        self._condition_changed()
        return True

    def _apply_failure(self, seq: int, error: FetchError, silent: bool) -> None:
        if not self._accepts(seq):
            return
        self.error = error
        if silent:
            logger.warning(f"{self.name}: background refresh failed ({error.kind.value}): {error.message}")
        else:
            self.snapshot = None
            logger.error(f"{self.name}: load failed ({error.kind.value}): {error.message}")
        self._condition_changed()

    def _condition_changed(self) -> None:
        if self.poller is None:
            return
        self.poller.condition_changed(self.should_poll(self.snapshot))
