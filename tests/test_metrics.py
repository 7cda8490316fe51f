"""Tests for per-tick accounting and the final report."""

from devlin.metrics import Metrics, MetricsReport
from devlin.process import ProcessState, ProcessTable

CAPACITY = 5
BUDGET = 10
TICKS = 4


def _table_with_two() -> ProcessTable:
    """One RUNNING and one READY process."""
    table = ProcessTable(capacity=CAPACITY)
    table.admit(budget=BUDGET).dispatch()
    table.admit(budget=BUDGET)
    return table


class TestOnTick:
    """Verify what a single observation records."""

    def test_visited_flags(self) -> None:
        """Each process remembers the states it was seen in."""
        table = _table_with_two()
        Metrics().on_tick(table)
        runner, waiter = table
        assert runner.stats.visited == {ProcessState.RUNNING}
        assert waiter.stats.visited == {ProcessState.READY}

    def test_visited_flags_are_sticky(self) -> None:
        """Leaving a state does not clear its flag."""
        table = _table_with_two()
        metrics = Metrics()
        metrics.on_tick(table)
        runner, _ = table
        runner.preempt()
        metrics.on_tick(table)
        assert runner.stats.visited == {ProcessState.RUNNING, ProcessState.READY}

    def test_time_counters(self) -> None:
        """Running and ready ticks accumulate."""
        table = _table_with_two()
        metrics = Metrics()
        for _ in range(TICKS):
            metrics.on_tick(table)
        runner, waiter = table
        assert runner.stats.running_ticks == TICKS
        assert runner.stats.ready_ticks == 0
        assert waiter.stats.ready_ticks == TICKS

    def test_blocked_time_not_counted(self) -> None:
        """BLOCKED ticks count toward neither average."""
        table = ProcessTable(capacity=CAPACITY)
        process = table.admit(budget=BUDGET)
        process.dispatch()
        process.block(latency=BUDGET, device="disk")
        Metrics().on_tick(table)
        assert process.stats.running_ticks == 0
        assert process.stats.ready_ticks == 0
        assert process.stats.visited == {ProcessState.BLOCKED}

    def test_transition_counters(self) -> None:
        """Preemptions, blocks, and per-device blocks come from transitions."""
        table = ProcessTable(capacity=CAPACITY)
        first = table.admit(budget=BUDGET)
        second = table.admit(budget=BUDGET)
        metrics = Metrics()
        first.dispatch()
        preempted = first.preempt()
        second.dispatch()
        blocked = second.block(latency=BUDGET, device="tape")
        metrics.on_tick(table, [preempted, blocked])
        report = metrics.report(table)
        assert report.preemptions == 1
        assert report.blocks == 1
        assert report.device_blocks == {"tape": 1}

    def test_states_passed_within_a_tick(self) -> None:
        """Admitted-and-dispatched or woken-and-dispatched still visit READY."""
        table = ProcessTable(capacity=CAPACITY)
        process = table.admit(budget=BUDGET)
        metrics = Metrics()
        metrics.on_tick(table, [process.dispatch()])
        metrics.on_tick(table, [process.block(latency=1, device="disk")])
        metrics.on_tick(table, [process.wake(), process.dispatch()])

        assert process.stats.ready_ticks == 0
        assert process.stats.visited == set(ProcessState) - {ProcessState.DEALLOCATED}
        report = metrics.report(table)
        assert report.visited[ProcessState.READY] == report.admitted


class TestReport:
    """Verify the summary."""

    def test_empty_run(self) -> None:
        """Zero admissions give zeros, not a division error."""
        report = Metrics().report(ProcessTable(capacity=CAPACITY))
        assert report.admitted == 0
        assert report.average_running == 0.0
        assert report.average_ready == 0.0
        assert all(n == 0 for n in report.visited.values())

    def test_averages(self) -> None:
        """Averages divide by every admitted process."""
        table = _table_with_two()
        metrics = Metrics()
        for _ in range(TICKS):
            metrics.on_tick(table)
        report = metrics.report(table, ticks=TICKS)
        assert report.ticks == TICKS
        assert report.average_running == TICKS / 2
        assert report.average_ready == TICKS / 2

    def test_visit_counts(self) -> None:
        """visited counts processes, not ticks."""
        table = _table_with_two()
        metrics = Metrics()
        for _ in range(TICKS):
            metrics.on_tick(table)
        report = metrics.report(table)
        assert report.visited[ProcessState.RUNNING] == 1
        assert report.visited[ProcessState.READY] == 1
        assert report.visited[ProcessState.BLOCKED] == 0

    def test_to_dict(self) -> None:
        """to_dict uses plain strings for states."""
        report = MetricsReport(
            admitted=1,
            ticks=2,
            average_running=1.0,
            average_ready=1.0,
            visited=dict.fromkeys(ProcessState, 1),
        )
        data = report.to_dict()
        assert data["visited"] == {"ready": 1, "running": 1, "blocked": 1, "deallocated": 1}
        assert data["device_blocks"] == {}
