"""Tests for the simulation event log.

The logger records structured entries for scheduling events, stamped
with the simulated tick.
"""

from devlin.config import SimulationConfig
from devlin.logging import LogEntry, Logger, LogLevel
from devlin.simulation import Simulation


class TestLogLevel:
    """Verify log level ordering."""

    def test_levels_are_ordered(self) -> None:
        """DEBUG < INFO < WARNING < ERROR."""
        assert LogLevel.DEBUG < LogLevel.INFO
        assert LogLevel.INFO < LogLevel.WARNING
        assert LogLevel.WARNING < LogLevel.ERROR


class TestLogEntry:
    """Verify log entry structure."""

    def test_entry_has_fields(self) -> None:
        """A log entry should store level, message, source, and tick."""
        entry = LogEntry(level=LogLevel.INFO, message="admitted", source="admission", tick=3)
        assert entry.level is LogLevel.INFO
        assert entry.message == "admitted"
        assert entry.source == "admission"
        assert entry.tick == 3  # noqa: PLR2004

    def test_entry_str(self) -> None:
        """String form includes level, tick, source, and message."""
        entry = LogEntry(level=LogLevel.WARNING, message="stopped", source="simulation", tick=9)
        assert str(entry) == "[WARNING] t=9 simulation: stopped"


class TestLogger:
    """Verify the append-only buffer."""

    def test_starts_empty(self) -> None:
        """A new logger holds nothing."""
        assert Logger().entries == []

    def test_log_appends(self) -> None:
        """Entries keep chronological order."""
        logger = Logger()
        logger.log(LogLevel.INFO, "first", source="a", tick=0)
        logger.log(LogLevel.DEBUG, "second", source="b", tick=1)
        assert [e.message for e in logger.entries] == ["first", "second"]

    def test_entries_is_a_copy(self) -> None:
        """Callers cannot mutate the buffer through entries."""
        logger = Logger()
        logger.log(LogLevel.INFO, "x", source="a")
        logger.entries.clear()
        assert len(logger.entries) == 1

    def test_min_level_drops_noise(self) -> None:
        """Entries below min_level are not recorded."""
        logger = Logger(min_level=LogLevel.INFO)
        logger.log(LogLevel.DEBUG, "noise", source="a")
        logger.log(LogLevel.INFO, "signal", source="a")
        assert [e.message for e in logger.entries] == ["signal"]

    def test_filter_by_level(self) -> None:
        """Filtering by minimum level."""
        logger = Logger()
        logger.log(LogLevel.DEBUG, "d", source="a")
        logger.log(LogLevel.ERROR, "e", source="a")
        assert [e.message for e in logger.filter(min_level=LogLevel.WARNING)] == ["e"]

    def test_filter_by_source(self) -> None:
        """Filtering by source."""
        logger = Logger()
        logger.log(LogLevel.INFO, "s", source="scheduler")
        logger.log(LogLevel.INFO, "i", source="io")
        assert [e.message for e in logger.filter(source="io")] == ["i"]

    def test_filter_by_level_and_source(self) -> None:
        """Both criteria must match."""
        logger = Logger()
        logger.log(LogLevel.DEBUG, "dispatch", source="scheduler")
        logger.log(LogLevel.INFO, "deallocate", source="scheduler")
        logger.log(LogLevel.INFO, "admit", source="admission")
        found = logger.filter(min_level=LogLevel.INFO, source="scheduler")
        assert [e.message for e in found] == ["deallocate"]


class TestSimulationLogging:
    """Verify what a run writes to its log."""

    def test_transitions_are_logged(self) -> None:
        """Dispatches are DEBUG, deallocations are INFO."""
        config = SimulationConfig(capacity=5, admission_probability=0.0, io_probability=0.0)
        sim = Simulation(config)
        sim.table.admit(budget=2)
        sim.run()
        scheduler_entries = sim.log.filter(source="scheduler")
        assert [(e.level, e.message, e.tick) for e in scheduler_entries] == [
            (LogLevel.DEBUG, "pid 1: ready -> running", 0),
            (LogLevel.INFO, "pid 1: running -> deallocated", 2),
        ]
