"""Admission — new work arriving over time.

Every tick the admitter flips a biased coin.  Heads, and a free slot in
the table, means a new READY process arrives with a randomised CPU
budget.  The budget is a base draw plus an extra draw, so the spread of
process lengths can be tuned independently of their minimum.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from devlin.logging import LogLevel

if TYPE_CHECKING:
    from devlin.process.table import ProcessTable
    from devlin.simulation import SimulationContext

DEFAULT_ADMISSION_PROBABILITY = 0.10
DEFAULT_BUDGET_RANGE = (200, 400)
DEFAULT_BUDGET_EXTRA_RANGE = (0, 200)


class Admission:
    """Probabilistic admission of processes into free table slots."""

    def __init__(
        self,
        *,
        probability: float = DEFAULT_ADMISSION_PROBABILITY,
        budget_range: tuple[int, int] = DEFAULT_BUDGET_RANGE,
        budget_extra_range: tuple[int, int] = DEFAULT_BUDGET_EXTRA_RANGE,
    ) -> None:
        """Create an admitter.

        Args:
            probability: Chance per tick that a process arrives.
            budget_range: Half-open ``[low, high)`` base budget range.
            budget_extra_range: Half-open range added on top of the base.

        """
        self.probability = probability
        self._budget_range = budget_range
        self._budget_extra_range = budget_extra_range

    @property
    def budget_range(self) -> tuple[int, int]:
        """Return the base budget range."""
        return self._budget_range

    @property
    def budget_extra_range(self) -> tuple[int, int]:
        """Return the extra budget range."""
        return self._budget_extra_range

    def exhausted(self, table: ProcessTable) -> bool:
        """Return True when no further process can ever be admitted."""
        return table.is_full or self.probability <= 0

    def draw_budget(self, ctx: SimulationContext) -> int:
        """Draw a budget from the base range plus the extra range."""
        return ctx.rng.randrange(*self._budget_range) + ctx.rng.randrange(
            *self._budget_extra_range
        )

    def admit_if_eligible(self, ctx: SimulationContext) -> int | None:
        """Maybe admit one process this tick.

        The coin is only flipped while the table has room, so a full
        table does not consume random numbers.

        Returns:
            The new PID, or None if nothing was admitted.

        """
        if ctx.table.is_full:
            return None
        if ctx.rng.random() >= self.probability:
            return None
        process = ctx.table.admit(budget=self.draw_budget(ctx))
        ctx.log.log(
            LogLevel.INFO,
            f"admitted pid {process.pid} with budget {process.remaining_budget}",
            source="admission",
            tick=ctx.tick,
        )
        return process.pid
