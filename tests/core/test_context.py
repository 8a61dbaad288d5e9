"""Tests for core.context: scoped failure buffering."""

import asyncio
import threading

import pytest

from verity import that
from verity.core.config import get_config, set_config
from verity.core.context import AssertionContext, active_config
from verity.core.types import AssertionFailedError, MultipleFailuresError, UsageError
from verity.report.adapters import ConsoleAdapter


class TestLifecycle:
    def test_begin_activates(self):
        ctx = AssertionContext.begin("flow")
        try:
            assert AssertionContext.current() is ctx
            assert AssertionContext.is_active()
        finally:
            ctx.dispose()
        assert AssertionContext.current() is None

    def test_default_name_is_caller(self):
        with AssertionContext.begin() as ctx:
            assert ctx.name == "test_default_name_is_caller"

    def test_nested_begin_rejected(self):
        with AssertionContext.begin("outer"):
            with pytest.raises(UsageError, match="already active"):
                AssertionContext.begin("inner")

    def test_dispose_twice_is_noop(self):
        ctx = AssertionContext.begin("twice")
        ctx.dispose()
        ctx.dispose()
        assert not AssertionContext.is_active()

    def test_no_failures_no_report(self):
        with AssertionContext.begin("clean") as ctx:
            that(1).is_(1)
            that("a").is_("a")
        assert (ctx.passed, ctx.failed, ctx.ratio) == (2, 0, 1.0)


class TestAggregation:
    def test_all_failures_reported_together(self):
        with pytest.raises(MultipleFailuresError) as info:
            with AssertionContext.begin("pair"):
                that(1).is_(2)
                that("x").is_("y")
        err = info.value
        assert err.args[0] == "2 of 2 assertions failed in 'pair'"
        assert len(err.errors) == 2
        assert all(isinstance(e, AssertionFailedError) for e in err.errors)
        assert "1" in str(err.errors[0]) and '"x"' in str(err.errors[1])

    def test_counts_include_passes(self):
        with pytest.raises(MultipleFailuresError, match="1 of 3 assertions failed in 'mixed'"):
            with AssertionContext.begin("mixed"):
                that(1).is_(1)
                that(2).is_(2)
                that(3).is_(4)

    def test_single_assertion_wording(self):
        with pytest.raises(MultipleFailuresError, match="1 of 1 assertion failed"):
            with AssertionContext.begin("one"):
                that(True).is_false()

    def test_failures_do_not_raise_inside(self):
        reached = False
        with pytest.raises(MultipleFailuresError):
            with AssertionContext.begin("buffered"):
                that(1).is_(2)
                reached = True
        assert reached

    def test_console_adapter_does_not_raise(self, caplog):
        set_config(adapter=ConsoleAdapter())
        with caplog.at_level("ERROR", logger="verity"):
            with AssertionContext.begin("logged"):
                that(1).is_(2)
        assert "1 of 1 assertion failed in 'logged'" in caplog.text


class TestDequeue:
    def test_taken_failures_are_not_reported(self):
        with AssertionContext.begin("expected") as ctx:
            that(1).is_(2)
            failure = ctx.next_failure()
        assert "is not" in failure.message
        assert ctx.pending == 0
        assert ctx.failed == 1

    def test_total_excludes_taken_failures(self):
        with pytest.raises(MultipleFailuresError) as info:
            with AssertionContext.begin("partial") as ctx:
                that(1).is_(2)
                that(2).is_(3)
                ctx.next_failure()
        assert info.value.args[0] == "1 of 1 assertion failed in 'partial'"
        assert len(info.value.errors) == 1

    def test_next_failure_on_empty_queue(self):
        with AssertionContext.begin("empty") as ctx:
            with pytest.raises(UsageError, match="No failures queued"):
                ctx.next_failure()

    def test_take_failures_in_order(self):
        with AssertionContext.begin("ordered") as ctx:
            that(1).is_(10)
            that(2).is_(20)
            that(3).is_(30)
            first, second = ctx.take_failures(2)
            assert first.actual == 1 and second.actual == 2
            assert ctx.pending == 1
            ctx.next_failure()

    def test_repr(self):
        with AssertionContext.begin("shown") as ctx:
            assert repr(ctx) == "AssertionContext(name='shown', passed=0, failed=0, pending=0)"


class TestPropagation:
    def test_asyncio_task_inherits(self):
        async def child():
            that(1).is_(2)

        async def main():
            await asyncio.create_task(child())

        def flow():
            with AssertionContext.begin("async") as ctx:
                asyncio.run(main())
                return ctx.take_failures(1)

        assert len(flow()) == 1

    def test_thread_via_bind(self):
        with AssertionContext.begin("threaded") as ctx:
            worker = threading.Thread(target=AssertionContext.bind(lambda: that(5).is_(6)))
            worker.start()
            worker.join()
            assert ctx.pending == 1
            ctx.next_failure()

    def test_run_sees_active_context(self):
        with AssertionContext.begin("copied") as ctx:
            assert AssertionContext.run(AssertionContext.current) is ctx

    def test_independent_flows(self):
        results = {}

        def flow(name, value):
            with AssertionContext.begin(name) as ctx:
                that(value).is_(value)
                results[name] = ctx.total

        threads = [threading.Thread(target=flow, args=(f"t{i}", i)) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert results == {"t0": 1, "t1": 1, "t2": 1, "t3": 1}

    def test_task_created_before_begin_sees_no_context(self):
        async def main():
            gate = asyncio.Event()

            async def early():
                await gate.wait()
                return AssertionContext.current()

            task = asyncio.create_task(early())
            await asyncio.sleep(0)
            with AssertionContext.begin("late"):
                gate.set()
                return await task

        assert asyncio.run(main()) is None

    def test_thread_started_before_begin_sees_no_context(self):
        started, go = threading.Event(), threading.Event()
        seen = []

        def worker():
            started.set()
            go.wait(5)
            seen.append(AssertionContext.current())

        thread = threading.Thread(target=worker)
        thread.start()
        started.wait(5)
        with AssertionContext.begin("late"):
            go.set()
            thread.join()
        assert seen == [None]

    def test_dispose_from_copied_context(self):
        def flow():
            ctx = AssertionContext.begin("outer")
            AssertionContext.run(ctx.dispose)
            assert AssertionContext.current() is None
            assert active_config() is get_config()
            with pytest.raises(AssertionFailedError):
                that(1).is_(2)
            assert ctx.pending == 0
            with AssertionContext.begin("again") as fresh:
                assert AssertionContext.current() is fresh

        AssertionContext.run(flow)


class TestConfigurationClone:
    def test_context_changes_stay_local(self):
        with AssertionContext.begin("local") as ctx:
            ctx.config.tolerance = 0.5
            assert active_config().tolerance == 0.5
            assert get_config().tolerance == 1e-6
        assert active_config().tolerance == 1e-6

    def test_global_changes_after_begin_not_seen(self):
        with AssertionContext.begin("snapshot"):
            set_config(tolerance=0.25)
            assert active_config().tolerance == 1e-6
