"""Process table — the fixed-capacity population of process records.

The table is append-only.  Admission adds a record in READY, the
record changes state as the simulation runs, and deallocated records
stay behind so the final report can look at them.

PIDs are the table position plus one, so ``get(pid)`` is a direct
lookup and no PID is ever reused.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from devlin.process.pcb import Process, ProcessState, TransitionError

if TYPE_CHECKING:
    from collections.abc import Iterator


class CapacityError(RuntimeError):
    """Raise when admission would push the table past its capacity."""


class ProcessTable:
    """Capacity-bounded, append-only collection of processes."""

    def __init__(self, *, capacity: int) -> None:
        """Create an empty table.

        Args:
            capacity: The most processes that may ever be admitted.

        Raises:
            ValueError: If capacity is not positive.

        """
        if capacity <= 0:
            msg = f"Capacity must be positive, got {capacity}"
            raise ValueError(msg)
        self._capacity = capacity
        self._processes: list[Process] = []

    @property
    def capacity(self) -> int:
        """Return the maximum number of processes."""
        return self._capacity

    @property
    def is_full(self) -> bool:
        """Return True once capacity processes have been admitted."""
        return len(self._processes) >= self._capacity

    def __len__(self) -> int:
        """Return how many processes have been admitted so far."""
        return len(self._processes)

    def __iter__(self) -> Iterator[Process]:
        """Iterate over every admitted process in PID order."""
        return iter(self._processes)

    def admit(self, *, budget: int) -> Process:
        """Append a new READY process with the next PID.

        Args:
            budget: CPU ticks the new process needs.

        Returns:
            The newly admitted process.

        Raises:
            CapacityError: If the table is already full.

        """
        if self.is_full:
            msg = f"Cannot admit: table is full ({self._capacity} processes)"
            raise CapacityError(msg)
        process = Process(pid=len(self._processes) + 1, budget=budget)
        self._processes.append(process)
        return process

    def get(self, pid: int) -> Process | None:
        """Return the process with *pid*, or None if never admitted."""
        if 1 <= pid <= len(self._processes):
            return self._processes[pid - 1]
        return None

    def in_state(self, state: ProcessState) -> Iterator[Process]:
        """Yield processes currently in *state*, lazily, in PID order."""
        return (p for p in self._processes if p.state is state)

    def ready(self) -> Iterator[Process]:
        """Yield the READY processes."""
        return self.in_state(ProcessState.READY)

    @property
    def running(self) -> Process | None:
        """Return the RUNNING process, or None if the CPU is idle.

        Raises:
            TransitionError: If more than one process is RUNNING.

        """
        running = list(self.in_state(ProcessState.RUNNING))
        if len(running) > 1:
            pids = ", ".join(str(p.pid) for p in running)
            msg = f"More than one process is running: {pids}"
            raise TransitionError(msg)
        return running[0] if running else None

    def counts(self) -> dict[ProcessState, int]:
        """Return how many processes are in each state."""
        result = dict.fromkeys(ProcessState, 0)
        for process in self._processes:
            result[process.state] += 1
        return result

    @property
    def all_deallocated(self) -> bool:
        """Return True when no admitted process is still alive."""
        return not any(p.is_alive for p in self._processes)
