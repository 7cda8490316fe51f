"""Process and Process Control Block (PCB).

Each simulated process carries a CPU budget, a few counters the
scheduler reads, and a state.  Processes follow a strict state
machine — each transition method (dispatch, preempt, block, wake,
deallocate) enforces that the process is in the correct source state
before moving it.

State machine::

    READY ⇄ RUNNING → DEALLOCATED
      ↑        ↓
      └─ BLOCKED

There is no NEW state: admission creates a process directly in READY.
DEALLOCATED is terminal and the record is kept for reporting.
"""

from dataclasses import dataclass, field
from enum import StrEnum


class ProcessState(StrEnum):
    """Lifecycle states of a simulated process.

    - READY: waiting for the CPU.
    - RUNNING: occupying the CPU (at most one process at a time).
    - BLOCKED: waiting on a simulated device.
    - DEALLOCATED: budget exhausted, finished for good.
    """

    READY = "ready"
    RUNNING = "running"
    BLOCKED = "blocked"
    DEALLOCATED = "deallocated"


class TransitionError(RuntimeError):
    """Raise when a process is asked to make an illegal move.

    These are logic faults in the simulator, not user errors.
    """


@dataclass(frozen=True)
class StateTransition:
    """One observed state change of one process."""

    pid: int
    source: ProcessState
    target: ProcessState

    def __str__(self) -> str:
        """Format as ``pid 3: ready -> running``."""
        return f"pid {self.pid}: {self.source} -> {self.target}"


@dataclass
class ProcessStats:
    """Cumulative per-process accounting, written only by Metrics.

    Attributes:
        visited: Every state the process was observed in (sticky).
        running_ticks: Ticks observed in RUNNING.
        ready_ticks: Ticks observed in READY.

    """

    visited: set[ProcessState] = field(default_factory=lambda: set[ProcessState]())
    running_ticks: int = 0
    ready_ticks: int = 0


class Process:
    """A simulated process (the Process Control Block).

    PIDs are handed out by the process table, so two independent
    simulations never share a counter.
    """

    def __init__(self, *, pid: int, budget: int) -> None:
        """Create a new process in the READY state.

        Args:
            pid: Unique process identifier assigned at admission.
            budget: CPU ticks the process needs before it completes.

        """
        self._pid: int = pid
        self._state: ProcessState = ProcessState.READY
        self._remaining_budget: int = budget
        self._run_streak: int = 0
        self._wait_score: int = 0
        self._io_remaining: int = 0
        self._device: str | None = None
        self.stats = ProcessStats()

    @property
    def pid(self) -> int:
        """Return the unique process identifier."""
        return self._pid

    @property
    def state(self) -> ProcessState:
        """Return the current process state."""
        return self._state

    @property
    def remaining_budget(self) -> int:
        """Return the CPU ticks left before completion."""
        return self._remaining_budget

    @property
    def run_streak(self) -> int:
        """Return consecutive RUNNING ticks since the last dispatch."""
        return self._run_streak

    @property
    def wait_score(self) -> int:
        """Return ticks elapsed since the last state transition."""
        return self._wait_score

    @property
    def io_remaining(self) -> int:
        """Return the ticks left BLOCKED (only meaningful while BLOCKED)."""
        return self._io_remaining

    @property
    def device(self) -> str | None:
        """Return the device class this process is blocked on, if any."""
        return self._device

    @property
    def is_alive(self) -> bool:
        """Return True unless the process has been deallocated."""
        return self._state is not ProcessState.DEALLOCATED

    def age(self) -> None:
        """Let one tick pass for a live process.

        Raises:
            TransitionError: If the process is already deallocated.

        """
        if not self.is_alive:
            msg = f"Cannot age: process {self._pid} is deallocated"
            raise TransitionError(msg)
        self._wait_score += 1

    def advance_budget(self) -> None:
        """Spend one tick of CPU: grow the streak, shrink the budget."""
        self._require("run", ProcessState.RUNNING)
        self._run_streak += 1
        self._remaining_budget -= 1

    def advance_io(self) -> None:
        """Count one tick off the I/O wait."""
        self._require("count down I/O", ProcessState.BLOCKED)
        self._io_remaining -= 1

    def _require(self, action: str, expected: ProcessState) -> None:
        """Raise unless the process is in *expected*."""
        if self._state is not expected:
            msg = f"Cannot {action}: process {self._pid} is {self._state}, expected {expected}"
            raise TransitionError(msg)

    def _transition(
        self, action: str, expected: ProcessState, target: ProcessState
    ) -> StateTransition:
        """Enforce a state transition and reset the per-state counters.

        Args:
            action: Name of the transition (for error messages).
            expected: The state the process must be in.
            target: The state to move to.

        Returns:
            The transition that just happened.

        Raises:
            TransitionError: If the process is not in the expected state.

        """
        self._require(action, expected)
        self._state = target
        self._run_streak = 0
        self._wait_score = 0
        return StateTransition(pid=self._pid, source=expected, target=target)

    def dispatch(self) -> StateTransition:
        """Transition READY → RUNNING. Give the process the CPU."""
        return self._transition("dispatch", ProcessState.READY, ProcessState.RUNNING)

    def preempt(self) -> StateTransition:
        """Transition RUNNING → READY. The fairness quantum ran out."""
        return self._transition("preempt", ProcessState.RUNNING, ProcessState.READY)

    def block(self, *, latency: int, device: str) -> StateTransition:
        """Transition RUNNING → BLOCKED on *device* for *latency* ticks.

        Raises:
            TransitionError: If the process is not running.
            ValueError: If the latency is not positive.

        """
        if latency <= 0:
            msg = f"I/O latency must be positive, got {latency}"
            raise ValueError(msg)
        transition = self._transition("block", ProcessState.RUNNING, ProcessState.BLOCKED)
        self._io_remaining = latency
        self._device = device
        return transition

    def wake(self) -> StateTransition:
        """Transition BLOCKED → READY. The device finished."""
        transition = self._transition("wake", ProcessState.BLOCKED, ProcessState.READY)
        self._io_remaining = 0
        self._device = None
        return transition

    def deallocate(self) -> StateTransition:
        """Transition RUNNING → DEALLOCATED. The budget is spent."""
        return self._transition("deallocate", ProcessState.RUNNING, ProcessState.DEALLOCATED)

    def __repr__(self) -> str:
        """Return a debug-friendly representation."""
        return (
            f"Process(pid={self._pid}, state={self._state}, "
            f"budget={self._remaining_budget}, wait={self._wait_score})"
        )
