"""Tests for the timer abstractions."""

import asyncio

from algotracer.scheduling import AsyncioScheduler, ManualScheduler


class TestManualScheduler:
    def test_nothing_runs_until_advanced(self):
        scheduler = ManualScheduler()
        fired = []
        scheduler.schedule(1.0, lambda: fired.append("a"))
        assert fired == []
        assert scheduler.pending == 1

    def test_advance_runs_due_callbacks_in_order(self):
        scheduler = ManualScheduler()
        fired = []
        scheduler.schedule(2.0, lambda: fired.append("late"))
        scheduler.schedule(1.0, lambda: fired.append("early"))
        assert scheduler.advance(1.5) == 1
        assert fired == ["early"]
        assert scheduler.advance(1.0) == 1
        assert fired == ["early", "late"]
        assert scheduler.now == 2.5

    def test_cancelled_callback_never_runs(self):
        scheduler = ManualScheduler()
        fired = []
        call = scheduler.schedule(1.0, lambda: fired.append("x"))
        call.cancel()
        call.cancel()
        assert call.cancelled
        assert scheduler.pending == 0
        assert scheduler.advance(5.0) == 0
        assert fired == []

    def test_callbacks_scheduled_while_advancing_run_when_due(self):
        scheduler = ManualScheduler()
        fired = []

        def chain():
            fired.append(scheduler.now)
            if len(fired) < 3:
                scheduler.schedule(1.0, chain)

        scheduler.schedule(1.0, chain)
        assert scheduler.advance(10.0) == 3
        assert fired == [1.0, 2.0, 3.0]

    def test_run_next_jumps_the_clock(self):
        scheduler = ManualScheduler()
        fired = []
        scheduler.schedule(4.0, lambda: fired.append("x"))
        assert scheduler.run_next()
        assert scheduler.now == 4.0
        assert fired == ["x"]
        assert not scheduler.run_next()


class TestAsyncioScheduler:
    def test_runs_on_the_event_loop(self):
        async def scenario():
            done = asyncio.Event()
            AsyncioScheduler().schedule(0, done.set)
            await asyncio.wait_for(done.wait(), timeout=1.0)
            return done.is_set()

        assert asyncio.run(scenario())

    def test_cancel(self):
        async def scenario():
            fired = []
            call = AsyncioScheduler().schedule(0, lambda: fired.append("x"))
            call.cancel()
            await asyncio.sleep(0.01)
            return fired, call.cancelled

        fired, cancelled = asyncio.run(scenario())
        assert fired == []
        assert cancelled
