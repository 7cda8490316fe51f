"""CPU scheduler — decides which READY process gets the CPU next.

The scheduler runs twice per tick:

- **advance** charges one tick of CPU to the running process, then
  deallocates it if its budget is spent or preempts it if it has held
  the CPU for a whole fairness quantum.  Budget exhaustion wins when
  both happen on the same tick.
- **fill** runs after the I/O subsystem has had its turn.  If the CPU
  is idle it asks a selection policy to pick one READY process.

Two policies ship out of the box:

- **LongestWaitPolicy** (default): the READY process with the highest
  wait score runs next, ties going to the lowest PID.  A process that
  has waited longest is always served first, which bounds how long
  anyone can starve.
- **ArrivalOrderPolicy**: the lowest PID runs next, i.e. arrival order.

Design: Strategy pattern
    The Scheduler is the *context*; SelectionPolicy is the *strategy*.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from devlin.logging import LogLevel

if TYPE_CHECKING:
    from collections.abc import Iterable

    from devlin.process.pcb import Process
    from devlin.simulation import SimulationContext

DEFAULT_MAX_RUN_STREAK = 50


class SelectionPolicy(Protocol):
    """Interface that every selection rule must satisfy."""

    @property
    def name(self) -> str:
        """Return a short policy name for dashboards."""
        ...  # pragma: no cover

    def select(self, candidates: Iterable[Process]) -> Process | None:
        """Return the process to run next, or None if there are none."""
        ...  # pragma: no cover


class LongestWaitPolicy:
    """Longest wait first — maximum wait score, lowest PID on ties."""

    @property
    def name(self) -> str:
        """Return 'longest-wait'."""
        return "longest-wait"

    def select(self, candidates: Iterable[Process]) -> Process | None:
        """Scan once for the highest wait score."""
        best: Process | None = None
        for process in candidates:
            # Candidates arrive in PID order, so strict > keeps the lowest PID
            if best is None or process.wait_score > best.wait_score:
                best = process
        return best


class ArrivalOrderPolicy:
    """Arrival order — the oldest admitted READY process runs next."""

    @property
    def name(self) -> str:
        """Return 'arrival'."""
        return "arrival"

    def select(self, candidates: Iterable[Process]) -> Process | None:
        """Pick the lowest PID."""
        return min(candidates, key=lambda p: p.pid, default=None)


POLICIES: dict[str, type[LongestWaitPolicy] | type[ArrivalOrderPolicy]] = {
    "longest-wait": LongestWaitPolicy,
    "arrival": ArrivalOrderPolicy,
}


class Scheduler:
    """Single-CPU scheduler with a fairness quantum."""

    def __init__(
        self,
        *,
        policy: SelectionPolicy | None = None,
        max_run_streak: int = DEFAULT_MAX_RUN_STREAK,
    ) -> None:
        """Create a scheduler.

        Args:
            policy: The selection rule for the fill phase
                (defaults to LongestWaitPolicy).
            max_run_streak: Consecutive RUNNING ticks before a
                process is preempted.

        Raises:
            ValueError: If max_run_streak is not positive.

        """
        if max_run_streak <= 0:
            msg = f"Fairness quantum must be positive, got {max_run_streak}"
            raise ValueError(msg)
        self._policy: SelectionPolicy = policy if policy is not None else LongestWaitPolicy()
        self._max_run_streak = max_run_streak

    @property
    def policy(self) -> SelectionPolicy:
        """Return the active selection policy."""
        return self._policy

    @property
    def max_run_streak(self) -> int:
        """Return the fairness quantum in ticks."""
        return self._max_run_streak

    def advance(self, ctx: SimulationContext) -> None:
        """Charge one tick to the running process and apply the rules."""
        process = ctx.table.running
        if process is None:
            return
        process.advance_budget()
        if process.remaining_budget <= 0:
            ctx.record(process.deallocate(), level=LogLevel.INFO, source="scheduler")
        elif process.run_streak == self._max_run_streak:
            ctx.record(process.preempt(), source="scheduler")

    def fill(self, ctx: SimulationContext) -> Process | None:
        """Dispatch a READY process if the CPU is idle.

        Returns:
            The newly dispatched process, or None.

        """
        if ctx.table.running is not None:
            return None
        process = self._policy.select(ctx.table.ready())
        if process is None:
            return None
        ctx.record(process.dispatch(), source="scheduler")
        return process
