"""Simulated devices and the I/O subsystem.

Nothing here talks to real hardware.  A *device class* is just a
latency profile: when the running process issues an I/O request, one
class is picked at random and its latency range decides how many ticks
the process stays BLOCKED.

Blocking does not spend CPU budget.  It only delays completion, which
keeps I/O wait distinct from CPU time in the final report.

Each tick the subsystem:

1. Counts down every process that was already BLOCKED and wakes the
   ones that reach zero (they are READY in time for the fill phase).
2. With a small probability, blocks the running process on a random
   device class.

A process blocked in step 2 is not counted down until the next tick,
so it stays BLOCKED for exactly the latency it drew.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from devlin.process.pcb import ProcessState

if TYPE_CHECKING:
    from collections.abc import Sequence

    from devlin.simulation import SimulationContext

DEFAULT_IO_PROBABILITY = 0.005


@dataclass(frozen=True)
class DeviceClass:
    """A latency profile for one kind of simulated device.

    Attributes:
        name: Label shown on dashboards (e.g. "disk").
        low: Smallest latency in ticks (inclusive).
        high: Latency upper bound in ticks (exclusive).

    """

    name: str
    low: int
    high: int

    def __post_init__(self) -> None:
        """Reject empty or non-positive latency ranges."""
        if self.low <= 0 or self.high <= self.low:
            msg = f"Invalid latency range for {self.name!r}: [{self.low}, {self.high})"
            raise ValueError(msg)


DEFAULT_DEVICE_CLASSES: tuple[DeviceClass, ...] = (
    DeviceClass(name="disk", low=200, high=300),
    DeviceClass(name="network", low=100, high=200),
    DeviceClass(name="tape", low=500, high=600),
)


class IOSubsystem:
    """Blocks the running process on devices and counts down the waits."""

    def __init__(
        self,
        *,
        probability: float = DEFAULT_IO_PROBABILITY,
        devices: Sequence[DeviceClass] = DEFAULT_DEVICE_CLASSES,
    ) -> None:
        """Create the I/O subsystem.

        Args:
            probability: Chance per tick that the running process blocks.
            devices: The device classes to choose from.

        Raises:
            ValueError: If no device classes are given.

        """
        if not devices:
            msg = "At least one device class is required"
            raise ValueError(msg)
        self.probability = probability
        self._devices = tuple(devices)

    @property
    def devices(self) -> tuple[DeviceClass, ...]:
        """Return the available device classes."""
        return self._devices

    def step(self, ctx: SimulationContext) -> None:
        """Run one tick of I/O: drain the waits, then maybe block."""
        self.advance_blocked(ctx)
        self.maybe_block(ctx)

    def advance_blocked(self, ctx: SimulationContext) -> None:
        """Count down every BLOCKED process and wake finished ones."""
        for process in list(ctx.table.in_state(ProcessState.BLOCKED)):
            process.advance_io()
            if process.io_remaining <= 0:
                ctx.record(process.wake(), source="io")

    def maybe_block(self, ctx: SimulationContext) -> DeviceClass | None:
        """Block the running process with the configured probability.

        Returns:
            The device class the process blocked on, or None.

        """
        process = ctx.table.running
        if process is None:
            return None
        if ctx.rng.random() >= self.probability:
            return None
        device = ctx.rng.choice(self._devices)
        latency = ctx.rng.randrange(device.low, device.high)
        ctx.record(process.block(latency=latency, device=device.name), source="io")
        return device
