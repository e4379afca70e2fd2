"""
Core data structures for the scheduling simulator.
Includes the Process record, per-core state, timeline entries and the
result of one simulation run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from numbers import Integral
from typing import List, Optional
import random

from .errors import ConfigurationError


IDLE_COLOR = "#d9d9d9"
CONTEXT_SWITCH_COLOR = "#555555"


def stable_color(pid: int) -> str:
    """Derive a repeatable display color from a process id."""
    rng = random.Random(pid)
    r = rng.randint(50, 220)
    g = rng.randint(50, 220)
    b = rng.randint(50, 220)
    return f"#{r:02x}{g:02x}{b:02x}"


def _require_int(value, name: str, pid) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise ConfigurationError(f"process {pid}: {name} must be an integer, got {value!r}")
    return int(value)


@dataclass
class Process:
    """One schedulable unit plus the timing fields a driver fills in."""
    pid: int
    name: str
    arrival_time: int
    burst_time: int
    priority: int = 0
    color: Optional[str] = None
    remaining_time: int = field(init=False)
    original_priority: int = field(init=False)
    start_time: Optional[int] = field(default=None, init=False)
    completion_time: Optional[int] = field(default=None, init=False)
    turnaround_time: Optional[int] = field(default=None, init=False)
    waiting_time: Optional[int] = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.pid = _require_int(self.pid, "pid", self.pid)
        self.arrival_time = _require_int(self.arrival_time, "arrival_time", self.pid)
        self.burst_time = _require_int(self.burst_time, "burst_time", self.pid)
        self.priority = _require_int(self.priority, "priority", self.pid)
        if self.arrival_time < 0:
            raise ConfigurationError(f"process {self.pid}: arrival_time must be non-negative")
        if self.burst_time <= 0:
            raise ConfigurationError(f"process {self.pid}: burst_time must be positive")
        if not self.name:
            self.name = f"P{self.pid}"
        if self.color is None:
            self.color = stable_color(self.pid)
        self.remaining_time = self.burst_time
        self.original_priority = self.priority

    def clone(self) -> "Process":
        """Return a fresh working copy with all derived fields cleared."""
        return Process(
            pid=self.pid,
            name=self.name,
            arrival_time=self.arrival_time,
            burst_time=self.burst_time,
            priority=self.original_priority,
            color=self.color,
        )

    @property
    def is_finished(self) -> bool:
        return self.completion_time is not None

    @property
    def response_time(self) -> Optional[int]:
        if self.start_time is None:
            return None
        return self.start_time - self.arrival_time

    def finalize(self, completion_time: int) -> None:
        """Record completion and derive turnaround and waiting time."""
        self.completion_time = completion_time
        self.turnaround_time = completion_time - self.arrival_time
        self.waiting_time = self.turnaround_time - self.burst_time


def clone_processes(processes: List[Process]) -> List[Process]:
    """Copy a workload so a run never touches the caller's records."""
    seen = set()
    clones: List[Process] = []
    for p in processes:
        if p.pid in seen:
            raise ConfigurationError(f"duplicate process id {p.pid}")
        seen.add(p.pid)
        clones.append(p.clone())
    return clones


@dataclass
class CoreState:
    """Simulation cursor for one core."""
    core_id: int
    time: int = 0
    last_pid: Optional[int] = None
    current: Optional[Process] = None
    slice_end: int = 0
    switch_left: int = 0

    @property
    def is_free(self) -> bool:
        return self.current is None


class Algorithm:
    """Algorithm codes and the names shown to users."""
    FCFS = "FCFS"
    SJF = "SJF"                                   # non-preemptive
    SRTF = "SRTF"                                 # preemptive SJF
    PRIORITY = "PRIORITY"                         # non-preemptive (lower number = higher priority)
    PRIORITY_PREEMPTIVE = "PRIORITY_PREEMPTIVE"
    PRIORITY_AGING = "PRIORITY_AGING"             # non-preemptive with aging
    RR = "RR"

    NAMES = {
        FCFS: "First-Come, First-Served",
        SJF: "Shortest Job First (Non-Preemptive)",
        SRTF: "Shortest Remaining Time First (SJF Preemptive)",
        PRIORITY: "Priority (Non-Preemptive)",
        PRIORITY_PREEMPTIVE: "Priority (Preemptive)",
        PRIORITY_AGING: "Priority with Aging (Non-Preemptive)",
        RR: "Round Robin",
    }

    @classmethod
    def all(cls) -> List[str]:
        return list(cls.NAMES)

    @classmethod
    def display_name(cls, code: str) -> str:
        return cls.NAMES.get(code, code)


class SliceKind(Enum):
    """What a core does during a timeline interval."""
    EXECUTION = "execution"
    IDLE = "idle"
    CONTEXT_SWITCH = "context-switch"


@dataclass
class GanttEntry:
    core_id: int
    start: int
    end: int
    kind: SliceKind
    label: str
    color: str
    process_id: Optional[int] = None

    @property
    def duration(self) -> int:
        return self.end - self.start

    def same_lane(self, other: "GanttEntry") -> bool:
        return (self.core_id == other.core_id and self.kind is other.kind
                and self.process_id == other.process_id)


@dataclass(frozen=True)
class ExecutionLogEntry:
    """What one core did during one simulated time unit."""
    time: int
    core_id: int
    kind: SliceKind
    process_id: Optional[int] = None
    process_name: Optional[str] = None
    cycle: Optional[int] = None
    total_cycles: Optional[int] = None

    def describe(self) -> str:
        if self.kind is SliceKind.IDLE:
            return f"Core {self.core_id}: idle"
        if self.kind is SliceKind.CONTEXT_SWITCH:
            return f"Core {self.core_id}: context switch"
        return (f"Core {self.core_id}: running {self.process_name} "
                f"(cycle {self.cycle} of {self.total_cycles})")


@dataclass(frozen=True)
class SimulationResult:
    algorithm: str
    processes: List[Process]
    gantt_chart: List[GanttEntry]
    execution_log: List[ExecutionLogEntry]
    avg_waiting_time: float
    avg_turnaround_time: float
    context_switches: int
    cpu_utilization: float
    num_cores: int
    makespan: int = 0
    avg_response_time: float = 0.0
    throughput: float = 0.0

    @property
    def algorithm_name(self) -> str:
        return Algorithm.display_name(self.algorithm)

    def process(self, pid: int) -> Process:
        for p in self.processes:
            if p.pid == pid:
                return p
        raise KeyError(pid)

    def execution_order(self, core_id: Optional[int] = None) -> List[int]:
        """Process ids in the order their execution slices start."""
        return [e.process_id for e in self.gantt_chart
                if e.kind is SliceKind.EXECUTION and (core_id is None or e.core_id == core_id)]
