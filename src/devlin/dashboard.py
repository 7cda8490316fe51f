"""Console dashboard and final report.

Pure formatting helpers: each takes a snapshot or report and returns a
string, so they are testable without a terminal.  The CLI decides when
to clear the screen and print them.
"""

from devlin.metrics import MetricsReport
from devlin.process.pcb import ProcessState
from devlin.simulation import TickSnapshot

_BANNER_WIDTH = 38
_BAR_WIDTH = 30
CLEAR_SCREEN = "\033[2J\033[H"


def _bar(count: int, total: int) -> str:
    """Draw a ``[###.....]`` bar for count out of total."""
    filled = round(_BAR_WIDTH * count / total) if total else 0
    return "[" + "#" * filled + "." * (_BAR_WIDTH - filled) + "]"


def format_banner(capacity: int, policy: str) -> str:
    """Format the start-of-run banner."""
    border = "=" * _BANNER_WIDTH
    return (
        f"\n  {border}\n        Devlin scheduler simulator\n  {border}\n\n"
        f"  Capacity: {capacity} processes\n  Policy:   {policy}\n"
    )


def format_tick(snapshot: TickSnapshot, *, capacity: int) -> str:
    """Format one tick's dashboard.

    Shows the per-state counts with bars, the running process and its
    streak, and every transition that happened during the tick.
    """
    lines = [f"=== Tick {snapshot.tick} ===", f"Admitted:    {snapshot.total}/{capacity}"]
    for state in ProcessState:
        count = snapshot.counts.get(state, 0)
        label = f"{state.value.capitalize()}:"
        lines.append(f"{label:<13}{count:>4} {_bar(count, capacity)}")

    if snapshot.running_pid is None:
        lines.append("CPU:         idle")
    else:
        lines.append(f"CPU:         pid {snapshot.running_pid} (streak {snapshot.run_streak})")

    if snapshot.transitions:
        lines.append("Events:")
        lines.extend(f"  {t}" for t in snapshot.transitions)
    return "\n".join(lines)


def format_report(report: MetricsReport) -> str:
    """Format the end-of-run report."""
    lines = [
        "=== Final Report ===",
        f"Ticks simulated:     {report.ticks}",
        f"Processes admitted:  {report.admitted}",
        f"Avg time running:    {report.average_running:.2f} ticks",
        f"Avg time ready:      {report.average_ready:.2f} ticks",
        f"Preemptions:         {report.preemptions}",
        f"I/O blocks:          {report.blocks}",
        "Visited states:",
    ]
    lines.extend(f"  {state.value:<12} {report.visited.get(state, 0)}" for state in ProcessState)
    if report.device_blocks:
        lines.append("Blocks per device:")
        lines.extend(f"  {name:<12} {n}" for name, n in sorted(report.device_blocks.items()))
    return "\n".join(lines)
