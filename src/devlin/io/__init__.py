"""I/O subsystem — simulated device classes and blocking."""

from devlin.io.devices import (
    DEFAULT_DEVICE_CLASSES,
    DEFAULT_IO_PROBABILITY,
    DeviceClass,
    IOSubsystem,
)

__all__ = [
    "DEFAULT_DEVICE_CLASSES",
    "DEFAULT_IO_PROBABILITY",
    "DeviceClass",
    "IOSubsystem",
]
