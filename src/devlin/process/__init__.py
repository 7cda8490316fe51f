"""Process subsystem — PCB, process table, admission, and scheduling.

Re-exports public symbols so callers can write::

    from devlin.process import Process, ProcessState, Scheduler
"""

from devlin.process.admission import Admission
from devlin.process.pcb import (
    Process,
    ProcessState,
    ProcessStats,
    StateTransition,
    TransitionError,
)
from devlin.process.scheduler import (
    POLICIES,
    ArrivalOrderPolicy,
    LongestWaitPolicy,
    Scheduler,
    SelectionPolicy,
)
from devlin.process.table import CapacityError, ProcessTable

__all__ = [
    "POLICIES",
    "Admission",
    "ArrivalOrderPolicy",
    "CapacityError",
    "LongestWaitPolicy",
    "Process",
    "ProcessState",
    "ProcessStats",
    "ProcessTable",
    "Scheduler",
    "SelectionPolicy",
    "StateTransition",
    "TransitionError",
]
