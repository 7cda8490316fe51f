"""Tick driver — one fixed-order pass over every component per tick.

Each tick runs, in this order:

1. **Admission** — maybe admit a new READY process.
2. **Scheduler advance** — charge the running process, deallocate or
   preempt it.
3. **I/O** — count down blocked processes, maybe block the running one.
4. **Scheduler fill** — dispatch a READY process if the CPU is idle.
5. **Ageing** — every live process's wait score goes up by one.
6. **Metrics** — record where everyone is.

All mutable state lives in a ``SimulationContext`` that the driver
owns and hands to each component, so two simulations never share
anything.  The random stream lives there too: the same seed and the
same config always replay the same run.

Pacing (the wall-clock sleep between ticks) is not part of a tick; the
command-line front end owns it.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from devlin.io.devices import IOSubsystem
from devlin.logging import Logger, LogLevel
from devlin.metrics import Metrics, MetricsReport
from devlin.process.admission import Admission
from devlin.process.pcb import ProcessState, StateTransition
from devlin.process.scheduler import POLICIES, Scheduler
from devlin.process.table import ProcessTable

if TYPE_CHECKING:
    from collections.abc import Callable

    from devlin.config import SimulationConfig


@dataclass
class SimulationContext:
    """The mutable state of one run, passed to every component."""

    table: ProcessTable
    rng: random.Random
    log: Logger
    tick: int = 0
    transitions: list[StateTransition] = field(default_factory=lambda: [])  # noqa: PIE807

    def record(
        self,
        transition: StateTransition,
        *,
        source: str,
        level: LogLevel = LogLevel.DEBUG,
    ) -> None:
        """Remember a transition for this tick and log it."""
        self.transitions.append(transition)
        self.log.log(level, str(transition), source=source, tick=self.tick)


@dataclass(frozen=True)
class TickSnapshot:
    """Read-only view of the simulation after one tick.

    Attributes:
        tick: The tick number, counting from 0.
        counts: Processes per state.
        running_pid: PID on the CPU, or None if idle.
        run_streak: The running process's streak (0 if idle).
        admitted: PID admitted this tick, or None.
        transitions: Every state change that happened this tick.

    """

    tick: int
    counts: dict[ProcessState, int]
    running_pid: int | None = None
    run_streak: int = 0
    admitted: int | None = None
    transitions: tuple[StateTransition, ...] = ()

    @property
    def total(self) -> int:
        """Return how many processes have been admitted so far."""
        return sum(self.counts.values())

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly dict."""
        return {
            "tick": self.tick,
            "counts": {str(state): n for state, n in self.counts.items()},
            "running_pid": self.running_pid,
            "run_streak": self.run_streak,
            "admitted": self.admitted,
            "transitions": [
                {"pid": t.pid, "source": str(t.source), "target": str(t.target)}
                for t in self.transitions
            ],
        }


class Simulation:
    """Owns the context and drives the components tick by tick.

    Usage::

        sim = Simulation(SimulationConfig(capacity=10, seed=1))
        report = sim.run()

    """

    def __init__(self, config: SimulationConfig, *, rng: random.Random | None = None) -> None:
        """Build every component from *config*.

        Args:
            config: The run's settings (validated here).
            rng: Random stream to use; defaults to one seeded from
                ``config.seed``.

        """
        self._config = config.validate()
        self._ctx = SimulationContext(
            table=ProcessTable(capacity=config.capacity),
            rng=rng if rng is not None else random.Random(config.seed),  # noqa: S311
            log=Logger(),
        )
        self._admission = Admission(
            probability=config.admission_probability,
            budget_range=config.budget_range,
            budget_extra_range=config.budget_extra_range,
        )
        self._scheduler = Scheduler(
            policy=POLICIES[config.policy](),
            max_run_streak=config.max_run_streak,
        )
        self._io = IOSubsystem(probability=config.io_probability, devices=config.devices)
        self._metrics = Metrics()
        self._ticks = 0
        self._snapshot: TickSnapshot | None = None

    @property
    def config(self) -> SimulationConfig:
        """Return the run's configuration."""
        return self._config

    @property
    def context(self) -> SimulationContext:
        """Return the live simulation context."""
        return self._ctx

    @property
    def table(self) -> ProcessTable:
        """Return the process table."""
        return self._ctx.table

    @property
    def log(self) -> Logger:
        """Return the event log."""
        return self._ctx.log

    @property
    def admission(self) -> Admission:
        """Return the admission component."""
        return self._admission

    @property
    def scheduler(self) -> Scheduler:
        """Return the scheduler."""
        return self._scheduler

    @property
    def io(self) -> IOSubsystem:
        """Return the I/O subsystem."""
        return self._io

    @property
    def ticks(self) -> int:
        """Return how many ticks have run."""
        return self._ticks

    @property
    def finished(self) -> bool:
        """Return True once nothing is left to do.

        Every admitted process must be deallocated *and* admission must
        be unable to produce more work, either because the table is
        full or because the admission probability is zero.
        """
        return self._ctx.table.all_deallocated and self._admission.exhausted(self._ctx.table)

    @property
    def out_of_ticks(self) -> bool:
        """Return True if ``max_ticks`` is set and has been reached."""
        limit = self._config.max_ticks
        return limit is not None and self._ticks >= limit

    def tick(self) -> TickSnapshot:
        """Run one full tick and return the resulting snapshot.

        Raises:
            RuntimeError: If the simulation has already finished.

        """
        if self.finished:
            msg = f"Simulation finished after {self._ticks} ticks"
            raise RuntimeError(msg)
        ctx = self._ctx
        ctx.tick = self._ticks
        ctx.transitions = []

        admitted = self._admission.admit_if_eligible(ctx)
        self._scheduler.advance(ctx)
        self._io.step(ctx)
        self._scheduler.fill(ctx)
        for process in ctx.table:
            if process.is_alive:
                process.age()
        self._metrics.on_tick(ctx.table, ctx.transitions)

        running = ctx.table.running
        self._snapshot = TickSnapshot(
            tick=ctx.tick,
            counts=ctx.table.counts(),
            running_pid=running.pid if running is not None else None,
            run_streak=running.run_streak if running is not None else 0,
            admitted=admitted,
            transitions=tuple(ctx.transitions),
        )
        self._ticks += 1
        return self._snapshot

    def snapshot(self) -> TickSnapshot | None:
        """Return the snapshot of the last tick, or None before the first."""
        return self._snapshot

    def run(self, on_tick: Callable[[TickSnapshot], None] | None = None) -> MetricsReport:
        """Tick until finished (or ``max_ticks``) and return the report.

        Args:
            on_tick: Called with each snapshot, e.g. to draw a dashboard.

        """
        while not self.finished:
            if self.out_of_ticks:
                self._ctx.log.log(
                    LogLevel.WARNING,
                    f"stopped after max_ticks={self._config.max_ticks} with work left",
                    source="simulation",
                    tick=self._ticks,
                )
                break
            snapshot = self.tick()
            if on_tick is not None:
                on_tick(snapshot)
        return self.report()

    def report(self) -> MetricsReport:
        """Return the metrics for everything simulated so far."""
        return self._metrics.report(self._ctx.table, ticks=self._ticks)
