import pytest
from pacer import CallableError, InvokerStatus, debounce
from pacer.testing import CallRecorder, ManualScheduler


class TestDebounceTrailing:
    def test_burst_executes_once_with_last_call_after_quiet_period(
        self, scheduler: ManualScheduler, record: CallRecorder
    ):
        limited = debounce(record, 300, scheduler=scheduler)

        for when, label in [(0, "a"), (100, "b"), (200, "c")]:
            scheduler.advance_to(when)
            limited(label)

        scheduler.advance_to(499)
        assert record.calls == []

        scheduler.advance_to(500)
        assert record.calls == [(500, ("c",), {})]
        assert limited.status is InvokerStatus.IDLE

    @pytest.mark.parametrize("burst_size", [1, 2, 25])
    def test_calls_within_delay_collapse_into_one(
        self, scheduler: ManualScheduler, record: CallRecorder, burst_size: int
    ):
        limited = debounce(record, 100, scheduler=scheduler)

        for i in range(burst_size):
            scheduler.advance_to(i * 3)
            limited(i, source="input")
        scheduler.run_all()

        assert record.args == [(burst_size - 1,)]
        assert record.calls[0][2] == {"source": "input"}

    def test_separate_bursts_execute_separately(
        self, scheduler: ManualScheduler, record: CallRecorder
    ):
        limited = debounce(record, 100, scheduler=scheduler)

        limited("first")
        scheduler.advance_to(150)
        limited("second")
        scheduler.run_all()

        assert record.calls == [(100, ("first",), {}), (250, ("second",), {})]

    def test_zero_delay_executes_on_next_tick(
        self, scheduler: ManualScheduler, record: CallRecorder
    ):
        limited = debounce(record, 0, scheduler=scheduler)

        limited("a")
        assert record.calls == []

        scheduler.advance(0)
        assert record.args == [("a",)]

    def test_call_count_counts_attempts(
        self, scheduler: ManualScheduler, record: CallRecorder
    ):
        limited = debounce(record, 100, scheduler=scheduler)

        for _ in range(5):
            limited()
        scheduler.run_all()

        assert limited.call_count == 5
        assert len(record.calls) == 1


class TestDebounceImmediate:
    def test_burst_executes_once_with_first_call(
        self, scheduler: ManualScheduler, record: CallRecorder
    ):
        limited = debounce(record, 1000, immediate=True, scheduler=scheduler)

        limited("first")
        assert record.calls == [(0, ("first",), {})]

        scheduler.advance_to(500)
        limited("second")
        assert limited.pending

        scheduler.run_all()
        assert record.calls == [(0, ("first",), {})]

    def test_new_burst_after_quiet_period_executes_again(
        self, scheduler: ManualScheduler, record: CallRecorder
    ):
        limited = debounce(record, 100, immediate=True, scheduler=scheduler)

        limited("a")
        scheduler.advance_to(50)
        limited("b")
        scheduler.advance_to(200)
        limited("c")

        assert record.calls == [(0, ("a",), {}), (200, ("c",), {})]

    def test_flush_forces_an_execution(
        self, scheduler: ManualScheduler, record: CallRecorder
    ):
        limited = debounce(record, 100, immediate=True, scheduler=scheduler)
        limited("a")

        limited.flush()

        assert record.args == [("a",), ("a",)]
        assert not limited.pending


class TestDebounceCancelAndFlush:
    def test_cancel_suppresses_pending_execution(
        self, scheduler: ManualScheduler, record: CallRecorder
    ):
        limited = debounce(record, 100, scheduler=scheduler)
        limited("a")

        scheduler.advance_to(50)
        limited.cancel()
        scheduler.run_all()

        assert record.calls == []
        assert limited.status is InvokerStatus.IDLE

    def test_cancel_when_idle_is_a_no_op(
        self, scheduler: ManualScheduler, record: CallRecorder
    ):
        limited = debounce(record, 100, scheduler=scheduler)

        limited.cancel()

        assert record.calls == []

    def test_flush_replays_latest_call_synchronously(
        self, scheduler: ManualScheduler, record: CallRecorder
    ):
        limited = debounce(record, 100, scheduler=scheduler)
        limited("a")
        scheduler.advance_to(50)
        limited("b")

        scheduler.advance_to(60)
        limited.flush()

        assert record.calls == [(60, ("b",), {})]
        assert not limited.pending

        scheduler.run_all()
        assert len(record.calls) == 1

    def test_flush_with_arguments_uses_them(
        self, scheduler: ManualScheduler, record: CallRecorder
    ):
        limited = debounce(record, 100, scheduler=scheduler)
        limited("a")

        limited.flush("saved", force=True)

        assert record.calls == [(0, ("saved",), {"force": True})]

    def test_flush_when_idle_is_a_no_op(
        self, scheduler: ManualScheduler, record: CallRecorder
    ):
        limited = debounce(record, 100, scheduler=scheduler)

        limited.flush("ignored")

        assert record.calls == []


class TestDebounceErrors:
    def test_immediate_failure_keeps_the_burst_tracked(
        self, scheduler: ManualScheduler
    ):
        attempts = []

        def save(value):
            attempts.append(value)
            raise OSError("disk full")

        limited = debounce(save, 100, immediate=True, scheduler=scheduler)

        with pytest.raises(CallableError, match="OSError") as exc_info:
            limited("a")
        assert exc_info.value.policy == "debounce"
        assert limited.pending

        scheduler.advance_to(10)
        limited("b")
        assert attempts == ["a"]

    def test_trailing_failure_propagates_to_timer_context(
        self, scheduler: ManualScheduler, record: CallRecorder
    ):
        def handler(value):
            if value == "bad":
                raise RuntimeError("cannot handle")
            record(value)

        limited = debounce(handler, 100, scheduler=scheduler)
        limited("bad")

        with pytest.raises(CallableError) as exc_info:
            scheduler.advance_to(100)

        assert isinstance(exc_info.value.exception, RuntimeError)
        assert limited.status is InvokerStatus.IDLE
        timer = limited._state.timer
        assert timer.arms == timer.releases == 1

        limited("good")
        scheduler.run_all()
        assert record.args == [("good",)]


class TestDebounceReentrancy:
    def test_invoke_from_inside_execution_starts_a_new_burst(
        self, scheduler: ManualScheduler, record: CallRecorder
    ):
        def handler(value):
            record(value)
            if value == "a":
                limited("again")

        limited = debounce(handler, 100, scheduler=scheduler)
        limited("a")
        scheduler.run_all()

        assert record.calls == [(100, ("a",), {}), (200, ("again",), {})]

    def test_flush_from_inside_immediate_execution(
        self, scheduler: ManualScheduler, record: CallRecorder
    ):
        def handler(value):
            record(value)
            if value == "a":
                limited.flush("flushed")

        limited = debounce(handler, 100, immediate=True, scheduler=scheduler)
        limited("a")

        assert record.args == [("a",), ("flushed",)]
        assert not limited.pending

    def test_single_pending_timer_invariant(
        self, scheduler: ManualScheduler, record: CallRecorder
    ):
        limited = debounce(record, 50, scheduler=scheduler)

        for when in range(0, 1000, 17):
            scheduler.advance_to(when)
            limited(when)
            assert scheduler.pending == 1
            timer = limited._state.timer
            assert timer.arms - timer.releases == 1


async def test_coroutine_results_are_spawned(scheduler: ManualScheduler):
    received = []

    async def handler(value):
        received.append(value)

    limited = debounce(handler, 10, scheduler=scheduler)
    limited("payload")
    scheduler.advance(10)

    assert len(scheduler.spawned) == 1
    await scheduler.spawned[0]
    assert received == ["payload"]
