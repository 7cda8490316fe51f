"""Run metrics — where every process spent its time.

Metrics look at the table once per tick, after all state changes for
that tick have happened.  The tick's transitions are also replayed so a
process admitted and dispatched on the same tick still counts as
having been READY.  Each process collects a set of states it
has visited plus running and ready tick counters.  At the end of the
run those are averaged over every admitted process.

Preemptions and I/O blocks are counted from the tick's transitions,
so the report also says how often the fairness quantum fired and how
hard each device class was hit.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from devlin.process.pcb import ProcessState

if TYPE_CHECKING:
    from collections.abc import Iterable

    from devlin.process.pcb import StateTransition
    from devlin.process.table import ProcessTable


@dataclass(frozen=True)
class MetricsReport:
    """Summary of a finished (or paused) run.

    Attributes:
        admitted: Processes ever admitted.
        ticks: Ticks simulated.
        average_running: Mean ticks spent RUNNING per admitted process.
        average_ready: Mean ticks spent READY per admitted process.
        visited: Per state, how many processes ever visited it, including
            states entered and left within a single tick.
        preemptions: RUNNING → READY transitions.
        blocks: RUNNING → BLOCKED transitions.
        device_blocks: Blocks per device class name.

    """

    admitted: int
    ticks: int
    average_running: float
    average_ready: float
    visited: dict[ProcessState, int]
    preemptions: int = 0
    blocks: int = 0
    device_blocks: dict[str, int] = field(default_factory=lambda: {})  # noqa: PIE807

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly dict."""
        return {
            "admitted": self.admitted,
            "ticks": self.ticks,
            "average_running": self.average_running,
            "average_ready": self.average_ready,
            "visited": {str(state): n for state, n in self.visited.items()},
            "preemptions": self.preemptions,
            "blocks": self.blocks,
            "device_blocks": dict(self.device_blocks),
        }


class Metrics:
    """Per-tick accounting over the process table."""

    def __init__(self) -> None:
        """Start with every counter at zero."""
        self._preemptions = 0
        self._blocks = 0
        self._device_blocks: Counter[str] = Counter()

    def on_tick(
        self,
        table: ProcessTable,
        transitions: Iterable[StateTransition] = (),
    ) -> None:
        """Record one tick's worth of observations.

        Args:
            table: The process table after the tick's state changes.
            transitions: The transitions that happened this tick.

        """
        for process in table:
            process.stats.visited.add(process.state)
            if process.state is ProcessState.RUNNING:
                process.stats.running_ticks += 1
            elif process.state is ProcessState.READY:
                process.stats.ready_ticks += 1

        for transition in transitions:
            process = table.get(transition.pid)
            if process is None:
                continue
            # States passed through mid-tick count as visited
            process.stats.visited.update((transition.source, transition.target))
            if transition.source is not ProcessState.RUNNING:
                continue
            if transition.target is ProcessState.READY:
                self._preemptions += 1
            elif transition.target is ProcessState.BLOCKED:
                self._blocks += 1
                if process.device is not None:
                    self._device_blocks[process.device] += 1

    def report(self, table: ProcessTable, *, ticks: int = 0) -> MetricsReport:
        """Summarise the run so far.

        Averages are 0.0 when nothing was ever admitted.
        """
        admitted = len(table)
        visited = dict.fromkeys(ProcessState, 0)
        running_total = 0
        ready_total = 0
        for process in table:
            running_total += process.stats.running_ticks
            ready_total += process.stats.ready_ticks
            for state in process.stats.visited:
                visited[state] += 1

        return MetricsReport(
            admitted=admitted,
            ticks=ticks,
            average_running=running_total / admitted if admitted else 0.0,
            average_ready=ready_total / admitted if admitted else 0.0,
            visited=visited,
            preemptions=self._preemptions,
            blocks=self._blocks,
            device_blocks=dict(self._device_blocks),
        )
