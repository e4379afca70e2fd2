"""
Run configuration shared by every scheduling driver.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .core import Process
from .errors import ConfigurationError
from .policies import AGING_THRESHOLD


def default_step_budget(processes: List[Process], context_switch_time: int, num_cores: int = 1) -> int:
    """Upper bound on driver loop iterations for a valid workload.

    No run lasts beyond the last arrival plus all bursts plus every switch,
    and each driver iteration advances time by at least one unit.
    """
    if not processes:
        return 1
    total_burst = sum(p.burst_time for p in processes)
    last_arrival = max(p.arrival_time for p in processes)
    dispatches = (total_burst + len(processes)) * num_cores
    return last_arrival + total_burst + dispatches * (context_switch_time + 1) + 1


@dataclass(frozen=True)
class SimulationConfig:
    num_cores: int = 1
    context_switch_time: int = 0
    time_quantum: int = 2
    # Upper bound on driver loop iterations for the tick and quantum drivers;
    # None derives it from the workload
    step_budget: Optional[int] = None
    aging_threshold: int = AGING_THRESHOLD

    def __post_init__(self) -> None:
        for name in ("num_cores", "context_switch_time", "time_quantum", "step_budget", "aging_threshold"):
            value = getattr(self, name)
            if name == "step_budget" and value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        if self.num_cores < 1:
            raise ConfigurationError("num_cores must be at least 1")
        if self.context_switch_time < 0:
            raise ConfigurationError("context_switch_time must be non-negative")
        if self.time_quantum < 1:
            raise ConfigurationError("time_quantum must be at least 1")
        if self.step_budget is not None and self.step_budget < 1:
            raise ConfigurationError("step_budget must be positive")
        if self.aging_threshold < 1:
            raise ConfigurationError("aging_threshold must be positive")

    def budget_for(self, processes: List[Process]) -> int:
        if self.step_budget is not None:
            return self.step_budget
        return default_step_budget(processes, self.context_switch_time, self.num_cores)
