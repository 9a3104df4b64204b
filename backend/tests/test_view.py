"""Tests for the fetch / poll / refresh lifecycle of a view."""

import asyncio

import pytest

from mediqueue.models.view import FetchErrorKind, ViewPhase
from mediqueue.services.api_client import ApiError
from mediqueue.services.view import QueueView

from .helpers import GatedLoader, ListLoader, settle


async def mount_with(view: QueueView, loader: GatedLoader, value):
    task = asyncio.create_task(view.mount())
    await settle()
    loader.calls[-1].set_result(value)
    await task


class TestFetch:

    @pytest.mark.asyncio
    async def test_mount_loads_in_foreground(self):
        loader = GatedLoader()
        view = QueueView("queue", loader, None)
        task = asyncio.create_task(view.mount())
        await settle()

        assert view.loading is True
        assert view.refreshing is False
        assert view.phase == ViewPhase.LOADING

        loader.calls[0].set_result({"currentToken": 3})
        await task
        assert view.loading is False
        assert view.phase == ViewPhase.READY
        assert view.snapshot == {"currentToken": 3}
        assert view.last_updated is not None

    @pytest.mark.asyncio
    async def test_foreground_failure_is_an_error_state(self):
        view = QueueView("queue", ListLoader(ApiError(FetchErrorKind.NOT_FOUND, "Appointment not found", 404)), None)
        await view.mount()

        assert view.phase == ViewPhase.ERROR
        assert view.snapshot is None
        assert view.error.kind == FetchErrorKind.NOT_FOUND
        assert view.error.message == "Appointment not found"
        assert view.loading is False

    @pytest.mark.asyncio
    async def test_silent_failure_keeps_last_snapshot(self):
        loader = ListLoader("first", ApiError(FetchErrorKind.NETWORK, "offline"))
        view = QueueView("queue", loader, None)
        await view.mount()

        applied = await view.fetch(silent=True)

        assert applied is False
        assert view.snapshot == "first"
        assert view.phase == ViewPhase.STALE
        assert view.error.kind == FetchErrorKind.NETWORK
        assert view.refreshing is False

    @pytest.mark.asyncio
    async def test_success_clears_previous_error(self):
        loader = ListLoader(ApiError(FetchErrorKind.SERVER, "down", 503), "back")
        view = QueueView("queue", loader, None)
        await view.mount()
        assert view.phase == ViewPhase.ERROR

        assert await view.retry() is True
        assert view.phase == ViewPhase.READY
        assert view.error is None
        assert view.snapshot == "back"

    @pytest.mark.asyncio
    async def test_unexpected_loader_exception_becomes_state(self):
        view = QueueView("queue", ListLoader(RuntimeError("bug")), None)
        await view.mount()
        assert view.phase == ViewPhase.ERROR
        assert view.error.kind == FetchErrorKind.SERVER

    @pytest.mark.asyncio
    async def test_later_request_wins_when_it_resolves_first(self):
        loader = GatedLoader()
        view = QueueView("queue", loader, None)
        await mount_with(view, loader, "initial")

        older = asyncio.create_task(view.fetch(silent=True))
        newer = asyncio.create_task(view.fetch(silent=True))
        await settle()
        assert len(loader.calls) == 3

        loader.calls[2].set_result("newer")
        assert await newer is True
        loader.calls[1].set_result("older")
        assert await older is False

        assert view.snapshot == "newer"
        assert view.refreshing is False

    @pytest.mark.asyncio
    async def test_stale_failure_does_not_override_newer_success(self):
        loader = GatedLoader()
        view = QueueView("queue", loader, None)
        await mount_with(view, loader, "initial")

        older = asyncio.create_task(view.fetch(silent=True))
        newer = asyncio.create_task(view.fetch(silent=True))
        await settle()
        loader.calls[2].set_result("newer")
        await newer
        loader.calls[1].set_exception(ApiError(FetchErrorKind.NETWORK, "late failure"))
        await older

        assert view.snapshot == "newer"
        assert view.error is None


class TestManualRefresh:

    @pytest.mark.asyncio
    async def test_disabled_only_while_in_flight(self):
        loader = GatedLoader()
        view = QueueView("queue", loader, None)
        await mount_with(view, loader, "initial")
        assert view.refresh_disabled is False

        task = asyncio.create_task(view.refresh())
        await settle()
        assert view.refresh_disabled is True
        assert view.refreshing is True
        assert view.state().refresh_disabled is True

        loader.calls[-1].set_result("fresh")
        assert await task is True
        assert view.refresh_disabled is False
        assert view.snapshot == "fresh"

    @pytest.mark.asyncio
    async def test_re_enabled_after_rejection(self):
        loader = GatedLoader()
        view = QueueView("queue", loader, None)
        await mount_with(view, loader, "initial")

        task = asyncio.create_task(view.refresh())
        await settle()
        loader.calls[-1].set_exception(ApiError(FetchErrorKind.SERVER, "boom", 500))
        assert await task is True

        assert view.refresh_disabled is False
        assert view.snapshot == "initial"
        assert view.phase == ViewPhase.STALE
        assert view.error.message == "boom"

    @pytest.mark.asyncio
    async def test_second_press_while_in_flight_is_ignored(self):
        loader = GatedLoader()
        view = QueueView("queue", loader, None)
        await mount_with(view, loader, "initial")

        task = asyncio.create_task(view.refresh())
        await settle()
        assert await view.refresh() is False
        assert len(loader.calls) == 2

        loader.calls[-1].set_result("fresh")
        await task


class TestUnmount:

    @pytest.mark.asyncio
    async def test_no_updates_after_unmount(self):
        loader = ListLoader("snapshot")
        view = QueueView("queue", loader, 0.01)
        await view.mount()
        await asyncio.sleep(0.05)
        assert loader.count > 1

        await view.unmount()
        count = loader.count
        snapshot, updated = view.snapshot, view.last_updated
        await asyncio.sleep(0.05)

        assert loader.count == count
        assert view.snapshot is snapshot
        assert view.last_updated == updated
        assert view.poller.polling is False

    @pytest.mark.asyncio
    async def test_in_flight_response_dropped_after_unmount(self):
        loader = GatedLoader()
        view = QueueView("queue", loader, None)
        await mount_with(view, loader, "initial")

        task = asyncio.create_task(view.refresh())
        await settle()
        await view.unmount()
        loader.calls[-1].set_result("late")
        await task

        assert view.snapshot == "initial"
        assert view.refresh_disabled is False

    @pytest.mark.asyncio
    async def test_fetch_after_unmount_is_noop(self):
        loader = ListLoader("snapshot")
        view = QueueView("queue", loader, None)
        await view.mount()
        await view.unmount()

        assert await view.fetch() is False
        assert await view.refresh() is False
        assert loader.count == 1

    @pytest.mark.asyncio
    async def test_close_is_immediate_and_idempotent(self):
        loader = ListLoader("snapshot")
        view = QueueView("queue", loader, 60)
        await view.mount()

        assert view.close() is True
        assert view.mounted is False
        assert view.poller.polling is False
        assert view.close() is False
        await view.unmount()


class TestPollCondition:

    @pytest.mark.asyncio
    async def test_always_polls_by_default(self):
        view = QueueView("queue", ListLoader("a"), 60)
        await view.mount()
        assert view.poller.polling is True
        await view.unmount()

    @pytest.mark.asyncio
    async def test_no_interval_never_polls(self):
        view = QueueView("history", ListLoader(["r1"]), None)
        await view.mount()
        assert view.poller is None
        assert view.state().polling is False

    @pytest.mark.asyncio
    async def test_timer_follows_condition_without_rearming(self):
        loader = ListLoader({"today": 1}, {"today": 2}, {"today": None}, {"today": 3})
        view = QueueView("dashboard", loader, 60, should_poll=lambda s: bool(s and s["today"]))

        await view.mount()
        first_task = view.poller._task
        assert first_task is not None

        await view.fetch(silent=True)
        # content changed, condition did not: same timer, phase kept
        assert view.poller._task is first_task

        await view.fetch(silent=True)
        assert view.poller.polling is False
        await settle()
        assert first_task.cancelled()

        await view.fetch(silent=True)
        assert view.poller.polling is True
        assert view.poller._task is not first_task

        await view.unmount()

    @pytest.mark.asyncio
    async def test_condition_evaluated_on_failed_first_load(self):
        loader = ListLoader(ApiError(FetchErrorKind.NETWORK, "offline"))
        view = QueueView("dashboard", loader, 60, should_poll=lambda s: s is not None)
        await view.mount()
        assert view.poller.polling is False
        assert view.phase == ViewPhase.ERROR
