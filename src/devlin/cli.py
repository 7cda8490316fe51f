"""Command-line front end.

Usage::

    devlin CAPACITY DELAY [--seed N] [--config FILE] [--quiet]

``CAPACITY`` is how many processes the run admits in total (at least
5) and ``DELAY`` is the wall-clock pause between ticks in seconds.
Bad arguments are reported and the program exits without simulating;
the exit status stays 0 either way.

This module is the thin I/O wrapper: it parses arguments, clears the
screen, prints the dashboard each tick, sleeps, and prints the final
report.  All the logic lives in ``devlin.simulation``.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from time import sleep
from typing import TYPE_CHECKING

from devlin.config import ConfigError, SimulationConfig, load_config
from devlin.dashboard import CLEAR_SCREEN, format_banner, format_report, format_tick
from devlin.simulation import Simulation

if TYPE_CHECKING:
    from collections.abc import Sequence

    from devlin.simulation import TickSnapshot


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting with status 2."""

    def error(self, message: str) -> None:  # type: ignore[override]
        """Turn a usage error into a ConfigError."""
        raise ConfigError(message)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = _ArgumentParser(
        prog="devlin",
        description="Simulate a single-CPU preemptive process scheduler.",
        epilog="Example: devlin 150 0",
    )
    parser.add_argument("capacity", type=int, help="number of processes to create (>= 5)")
    parser.add_argument("delay", type=int, help="seconds to pause between ticks (>= 0)")
    parser.add_argument("--seed", type=int, default=None, help="random seed for a repeatable run")
    parser.add_argument("--config", type=Path, default=None, help="JSON file with extra settings")
    parser.add_argument(
        "--quiet", action="store_true", help="skip the per-tick dashboard, print only the report"
    )
    return parser


def parse_config(argv: Sequence[str] | None = None) -> tuple[SimulationConfig, bool]:
    """Parse the command line into a validated config.

    Returns:
        The config and whether the dashboard should be suppressed.

    Raises:
        ConfigError: If the arguments are missing or invalid.

    """
    args = build_parser().parse_args(argv)
    if args.config is not None:
        config = load_config(
            args.config, capacity=args.capacity, delay=args.delay, seed=args.seed
        )
    else:
        config = SimulationConfig(
            capacity=args.capacity, delay=args.delay, seed=args.seed
        ).validate()
    return config, args.quiet


def main(argv: Sequence[str] | None = None) -> int:
    """Run the simulator and return the exit status (always 0)."""
    try:
        config, quiet = parse_config(argv)
    except ConfigError as e:
        print(f"devlin: {e}")  # noqa: T201
        print(build_parser().format_usage().rstrip())  # noqa: T201
        return 0

    simulation = Simulation(config)
    print(format_banner(config.capacity, simulation.scheduler.policy.name))  # noqa: T201

    def draw(snapshot: TickSnapshot) -> None:
        if not quiet:
            print(CLEAR_SCREEN + format_tick(snapshot, capacity=config.capacity))  # noqa: T201
        if config.delay:
            sleep(config.delay)

    try:
        report = simulation.run(on_tick=draw)
    except KeyboardInterrupt:
        # Ctrl+C: report what we have so far
        print("\nInterrupted.")  # noqa: T201
        report = simulation.report()

    print(format_report(report))  # noqa: T201
    return 0


def run() -> None:
    """Console entry point for ``devlin``."""
    raise SystemExit(main())
