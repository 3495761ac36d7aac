import asyncio

import pytest

from humantyper.keyboard import AsyncioScheduler, ManualScheduler, TypingEngine


class TestManualScheduler:
    def test_nothing_runs_until_advanced(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.call_later(10, lambda: calls.append("a"))
        assert calls == []
        assert scheduler.pending == 1

    def test_callbacks_fire_in_due_order_and_ties_keep_order(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.call_later(20, lambda: calls.append("late"))
        scheduler.call_later(5, lambda: calls.append("first"))
        scheduler.call_later(5, lambda: calls.append("second"))
        scheduler.call_soon(lambda: calls.append("soon"))
        scheduler.advance(20)
        assert calls == ["soon", "first", "second", "late"]
        assert scheduler.now() == 20

    def test_clock_reads_due_time_inside_callbacks(self):
        scheduler = ManualScheduler(start=100)
        seen = []
        scheduler.call_later(30, lambda: seen.append(scheduler.now()))
        scheduler.advance(1000)
        assert seen == [130]
        assert scheduler.now() == 1100

    def test_cancelled_handles_never_run(self):
        scheduler = ManualScheduler()
        calls = []
        handle = scheduler.call_later(5, lambda: calls.append(True))
        handle.cancel()
        assert scheduler.pending == 0
        scheduler.advance(10)
        assert calls == []

    def test_callbacks_scheduled_during_advance_run_if_due(self):
        scheduler = ManualScheduler()
        calls = []

        def chain(n):
            calls.append(n)
            if n < 3:
                scheduler.call_later(10, lambda: chain(n + 1))

        scheduler.call_soon(lambda: chain(0))
        scheduler.advance(25)
        assert calls == [0, 1, 2]
        scheduler.advance(5)
        assert calls == [0, 1, 2, 3]

    def test_run_until_stops_at_predicate(self):
        scheduler = ManualScheduler()
        calls = []
        for delay in (10, 20, 30):
            scheduler.call_later(delay, lambda d=delay: calls.append(d))
        assert scheduler.run_until(lambda: len(calls) == 2)
        assert calls == [10, 20]
        assert scheduler.now() == 20

    def test_run_until_respects_the_time_limit(self):
        scheduler = ManualScheduler()
        scheduler.call_later(5000, lambda: None)
        assert not scheduler.run_until(lambda: False, limit_ms=1000)
        assert scheduler.pending == 1


class TestAsyncioScheduler:
    def test_now_without_a_running_loop(self):
        first = AsyncioScheduler().now()
        assert AsyncioScheduler().now() >= first

    @pytest.mark.asyncio
    async def test_call_later_uses_milliseconds(self):
        scheduler = AsyncioScheduler()
        fired = asyncio.Event()
        start = scheduler.now()
        scheduler.call_later(20, fired.set)
        await asyncio.wait_for(fired.wait(), timeout=1.0)
        assert scheduler.now() - start >= 15

    @pytest.mark.asyncio
    async def test_cancel_prevents_the_callback(self):
        scheduler = AsyncioScheduler()
        calls = []
        handle = scheduler.call_later(10, lambda: calls.append(True))
        handle.cancel()
        await asyncio.sleep(0.05)
        assert calls == []

    @pytest.mark.asyncio
    async def test_engine_completes_on_the_running_loop(self, fast_config):
        engine = TypingEngine("hello world", fast_config.merged(mistake_frequency=0), seed=1)
        done = asyncio.Event()
        engine.on_complete(done.set)
        engine.start()
        await asyncio.wait_for(done.wait(), timeout=5.0)
        assert engine.display_text == "hello world"
        assert engine.stats.total_duration >= 0
