"""Simulation configuration.

A ``SimulationConfig`` carries every knob a run needs.  Most runs only
set the two command-line values (capacity and pacing delay) and keep
the defaults for the rest; a JSON file can override anything, much as
a bootloader reads a kernel image.

Example config file::

    {
        "admission_probability": 0.2,
        "max_run_streak": 25,
        "devices": [{"name": "disk", "low": 10, "high": 20}],
        "policy": "arrival",
        "seed": 7
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from devlin.io.devices import DEFAULT_DEVICE_CLASSES, DEFAULT_IO_PROBABILITY, DeviceClass
from devlin.process.admission import (
    DEFAULT_ADMISSION_PROBABILITY,
    DEFAULT_BUDGET_EXTRA_RANGE,
    DEFAULT_BUDGET_RANGE,
)
from devlin.process.scheduler import DEFAULT_MAX_RUN_STREAK, POLICIES

if TYPE_CHECKING:
    from pathlib import Path

MIN_CAPACITY = 5


class ConfigError(ValueError):
    """Raise when a configuration value is missing or out of range.

    Examples: capacity below the minimum, a negative pacing delay,
    an unreadable config file.
    """


@dataclass(frozen=True)
class SimulationConfig:
    """Every setting of one simulation run."""

    capacity: int
    delay: int = 0
    admission_probability: float = DEFAULT_ADMISSION_PROBABILITY
    budget_range: tuple[int, int] = DEFAULT_BUDGET_RANGE
    budget_extra_range: tuple[int, int] = DEFAULT_BUDGET_EXTRA_RANGE
    max_run_streak: int = DEFAULT_MAX_RUN_STREAK
    io_probability: float = DEFAULT_IO_PROBABILITY
    devices: tuple[DeviceClass, ...] = DEFAULT_DEVICE_CLASSES
    policy: str = "longest-wait"
    seed: int | None = None
    max_ticks: int | None = None

    def validate(self) -> SimulationConfig:
        """Check every value and return self for chaining.

        Raises:
            ConfigError: On the first invalid value found.

        """
        if self.capacity < MIN_CAPACITY:
            msg = f"Capacity must be at least {MIN_CAPACITY}, got {self.capacity}"
            raise ConfigError(msg)
        if self.delay < 0:
            msg = f"Delay must not be negative, got {self.delay}"
            raise ConfigError(msg)
        for name in ("admission_probability", "io_probability"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                msg = f"{name} must be between 0 and 1, got {value}"
                raise ConfigError(msg)
        for name in ("budget_range", "budget_extra_range"):
            low, high = getattr(self, name)
            if low < 0 or high <= low:
                msg = f"{name} must be a non-empty range of non-negative ints, got [{low}, {high})"
                raise ConfigError(msg)
        if self.budget_range[0] + self.budget_extra_range[0] <= 0:
            msg = "Smallest possible budget must be positive"
            raise ConfigError(msg)
        if self.max_run_streak <= 0:
            msg = f"max_run_streak must be positive, got {self.max_run_streak}"
            raise ConfigError(msg)
        if not self.devices:
            msg = "At least one device class is required"
            raise ConfigError(msg)
        if self.policy not in POLICIES:
            known = ", ".join(sorted(POLICIES))
            msg = f"Unknown policy {self.policy!r} (known: {known})"
            raise ConfigError(msg)
        if self.max_ticks is not None and self.max_ticks <= 0:
            msg = f"max_ticks must be positive, got {self.max_ticks}"
            raise ConfigError(msg)
        return self


def _range(data: dict[str, Any], key: str, default: tuple[int, int]) -> tuple[int, int]:
    """Read a two-element ``[low, high]`` list as a tuple."""
    value = data.get(key)
    if value is None:
        return default
    low, high = value
    return int(low), int(high)


def _optional_int(data: dict[str, Any], key: str) -> int | None:
    """Read an optional integer, keeping None as None."""
    value = data.get(key)
    return None if value is None else int(value)


def _devices(data: dict[str, Any]) -> tuple[DeviceClass, ...]:
    """Read the device class list."""
    raw = data.get("devices")
    if raw is None:
        return DEFAULT_DEVICE_CLASSES
    return tuple(DeviceClass(name=d["name"], low=int(d["low"]), high=int(d["high"])) for d in raw)


def config_from_dict(data: dict[str, Any]) -> SimulationConfig:
    """Build and validate a config from a plain dict.

    Raises:
        ConfigError: If a key has the wrong shape or an invalid value.

    """
    try:
        config = SimulationConfig(
            capacity=int(data["capacity"]),
            delay=int(data.get("delay", 0)),
            admission_probability=float(
                data.get("admission_probability", DEFAULT_ADMISSION_PROBABILITY)
            ),
            budget_range=_range(data, "budget_range", DEFAULT_BUDGET_RANGE),
            budget_extra_range=_range(data, "budget_extra_range", DEFAULT_BUDGET_EXTRA_RANGE),
            max_run_streak=int(data.get("max_run_streak", DEFAULT_MAX_RUN_STREAK)),
            io_probability=float(data.get("io_probability", DEFAULT_IO_PROBABILITY)),
            devices=_devices(data),
            policy=str(data.get("policy", "longest-wait")),
            seed=_optional_int(data, "seed"),
            max_ticks=_optional_int(data, "max_ticks"),
        )
    except (KeyError, TypeError, ValueError) as e:
        msg = f"Invalid configuration: {e}"
        raise ConfigError(msg) from e
    return config.validate()


def load_config(path: Path, **overrides: Any) -> SimulationConfig:
    """Load a JSON config file, then apply keyword overrides.

    Overrides (typically the command-line capacity and delay) win over
    the file.  Overrides set to None are ignored.

    Raises:
        ConfigError: If the file cannot be read or holds invalid values.

    """
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        msg = f"Cannot load config: {e}"
        raise ConfigError(msg) from e
    if not isinstance(data, dict):
        msg = f"Config must be a JSON object, got {type(data).__name__}"
        raise ConfigError(msg)
    data.update({k: v for k, v in overrides.items() if v is not None})
    return config_from_dict(data)

