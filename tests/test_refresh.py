from __future__ import annotations

import asyncio
import logging

import pytest

from loadlink.core.refresh import RefreshCoordinator


def test_interval_must_be_positive():
    async def _tick() -> None:
        pass

    with pytest.raises(ValueError):
        RefreshCoordinator(_tick, interval=0)


def test_overlapping_tick_is_skipped():
    async def scenario() -> RefreshCoordinator:
        release = asyncio.Event()
        calls = 0

        async def _tick() -> None:
            nonlocal calls
            calls += 1
            await release.wait()

        coordinator = RefreshCoordinator(_tick, interval=1)
        first = asyncio.create_task(coordinator.tick_once())
        await asyncio.sleep(0)
        assert coordinator.busy

        assert await coordinator.tick_once() is False
        release.set()
        assert await first is True
        assert calls == 1
        return coordinator

    coordinator = asyncio.run(scenario())
    assert coordinator.ticks_run == 1
    assert coordinator.ticks_skipped == 1
    assert not coordinator.busy


def test_timer_never_runs_ticks_concurrently():
    async def scenario() -> tuple[int, int]:
        running = 0
        peak = 0

        async def _tick() -> None:
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.03)
            running -= 1

        coordinator = RefreshCoordinator(_tick, interval=0.01)
        coordinator.start()
        await asyncio.sleep(0.15)
        await coordinator.stop()
        return peak, coordinator.ticks_skipped

    peak, skipped = asyncio.run(scenario())
    assert peak == 1
    assert skipped > 0


def test_stop_cancels_inflight_tick():
    async def scenario() -> tuple[RefreshCoordinator, list[str]]:
        events: list[str] = []

        async def _tick() -> None:
            events.append("start")
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                events.append("cancelled")
                raise

        coordinator = RefreshCoordinator(_tick, interval=0.01)
        coordinator.start()
        await asyncio.sleep(0.02)
        await coordinator.stop()
        ticks = len(events)
        await asyncio.sleep(0.05)
        assert len(events) == ticks
        return coordinator, events

    coordinator, events = asyncio.run(scenario())
    assert events == ["start", "cancelled"]
    assert not coordinator.running
    assert not coordinator.busy


def test_failing_tick_is_logged_and_timer_continues(caplog):
    async def scenario() -> RefreshCoordinator:
        async def _tick() -> None:
            raise RuntimeError("boom")

        coordinator = RefreshCoordinator(_tick, interval=0.01)
        coordinator.start()
        await asyncio.sleep(0.05)
        await coordinator.stop()
        return coordinator

    with caplog.at_level(logging.ERROR, logger="loadlink.core.refresh"):
        coordinator = asyncio.run(scenario())

    assert coordinator.ticks_run >= 2
    assert "Refresh tick failed" in caplog.text
