"""Simulation event log.

Every admission and every state change lands here, stamped with the
simulated tick it happened on.  The web dashboard serves the log and
tests compare the logs of two seeded runs, so nothing in an entry
depends on wall-clock time.

Sources in use: ``admission``, ``scheduler``, ``io`` and ``simulation``.
Deallocations and admissions are INFO, other transitions DEBUG, and a
run cut short by ``max_ticks`` leaves a WARNING.
"""

from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """Severity of an event; higher is more important."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """One scheduling event.

    Attributes:
        level: How important the event is.
        message: What happened, e.g. ``pid 3: ready -> running``.
        source: The component that reported it.
        tick: The simulated tick it happened on.

    """

    level: LogLevel
    message: str
    source: str
    tick: int = 0

    def __str__(self) -> str:
        """Format as ``[LEVEL] t=tick source: message``."""
        return f"[{self.level.name}] t={self.tick} {self.source}: {self.message}"


class Logger:
    """Tick-ordered event buffer owned by one simulation."""

    def __init__(self, *, min_level: LogLevel = LogLevel.DEBUG) -> None:
        """Create an empty log.

        Args:
            min_level: Events below this level are not kept, which keeps
                long runs from holding every dispatch in memory.

        """
        self._min_level = min_level
        self._entries: list[LogEntry] = []

    @property
    def min_level(self) -> LogLevel:
        """Return the lowest level that is kept."""
        return self._min_level

    @property
    def entries(self) -> list[LogEntry]:
        """Return a copy of every kept entry, oldest first."""
        return list(self._entries)

    def log(self, level: LogLevel, message: str, *, source: str, tick: int = 0) -> None:
        """Record an event unless it is below ``min_level``."""
        if level >= self._min_level:
            self._entries.append(LogEntry(level=level, message=message, source=source, tick=tick))

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return the entries at or above *min_level* from *source*.

        Either criterion may be left out.
        """
        return [
            entry
            for entry in self._entries
            if (min_level is None or entry.level >= min_level)
            and (source is None or entry.source == source)
        ]
