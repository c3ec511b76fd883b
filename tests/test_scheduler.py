"""
Tests for the deferred step schedulers.
"""

import asyncio

from meta_opt.optimisation.runners import AsyncioScheduler, ManualScheduler


class TestManualScheduler:
    """Test the queue-based scheduler used for headless runs."""

    def test_callbacks_run_in_order(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.schedule(lambda: calls.append("a"), delay=0.5)
        scheduler.schedule(lambda: calls.append("b"))

        assert scheduler.pending_count == 2
        assert scheduler.run_pending() == 2
        assert calls == ["a", "b"]
        assert scheduler.pending_count == 0

    def test_delay_recorded_on_token(self):
        token = ManualScheduler().schedule(lambda: None, delay=0.25)
        assert token.delay == 0.25
        assert not token.cancelled

    def test_cancel(self):
        scheduler = ManualScheduler()
        calls = []
        token = scheduler.schedule(lambda: calls.append(1))

        assert scheduler.cancel(token) is True
        assert token.cancelled
        assert scheduler.cancel(token) is False
        assert scheduler.run_pending() == 0
        assert calls == []

        print("✅ Cancelled callback never runs")

    def test_nested_scheduling(self):
        """Callbacks scheduled while running are executed by run_pending."""
        scheduler = ManualScheduler()
        calls = []

        def chain(n):
            calls.append(n)
            if n < 3:
                scheduler.schedule(lambda: chain(n + 1))

        scheduler.schedule(lambda: chain(0))
        assert scheduler.run_pending() == 4
        assert calls == [0, 1, 2, 3]

    def test_run_next_and_limit(self):
        scheduler = ManualScheduler()
        for _ in range(3):
            scheduler.schedule(lambda: None)

        assert scheduler.run_next() is True
        assert scheduler.run_pending(max_callbacks=1) == 1
        assert scheduler.pending_count == 1
        scheduler.run_pending()
        assert scheduler.run_next() is False


class TestAsyncioScheduler:
    """Test the event-loop backed scheduler."""

    def test_callback_runs_on_loop(self):
        calls = []

        async def main():
            scheduler = AsyncioScheduler()
            scheduler.schedule(lambda: calls.append("done"), delay=0.0)
            await asyncio.sleep(0.01)

        asyncio.run(main())
        assert calls == ["done"]

    def test_cancelled_callback_does_not_run(self):
        calls = []

        async def main():
            scheduler = AsyncioScheduler(asyncio.get_running_loop())
            token = scheduler.schedule(lambda: calls.append("late"), delay=0.01)
            assert scheduler.cancel(token) is True
            assert scheduler.cancel(token) is False
            await asyncio.sleep(0.03)

        asyncio.run(main())
        assert calls == []

        print("✅ Cancelled asyncio callback never runs")
