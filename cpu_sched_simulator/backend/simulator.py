from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Type
import logging

from .config import SimulationConfig
from .core import Algorithm, Process, SimulationResult
from .errors import ConfigurationError
from .round_robin import RoundRobinScheduler
from .schedulers import (
    AgingPriorityScheduler, BaseScheduler, FCFSScheduler, PreemptivePriorityScheduler,
    PriorityScheduler, SJFScheduler, SRTFScheduler,
)

logger = logging.getLogger(__name__)


SCHEDULERS: Dict[str, Type[BaseScheduler]] = {
    Algorithm.FCFS: FCFSScheduler,
    Algorithm.SJF: SJFScheduler,
    Algorithm.SRTF: SRTFScheduler,
    Algorithm.PRIORITY: PriorityScheduler,
    Algorithm.PRIORITY_PREEMPTIVE: PreemptivePriorityScheduler,
    Algorithm.PRIORITY_AGING: AgingPriorityScheduler,
    Algorithm.RR: RoundRobinScheduler,
}


def get_scheduler(algorithm: str) -> Type[BaseScheduler]:
    try:
        return SCHEDULERS[algorithm]
    except KeyError:
        raise ConfigurationError(
            f"unknown algorithm {algorithm!r}; expected one of {', '.join(SCHEDULERS)}"
        ) from None


def simulate(
    processes: List[Process],
    algorithm: str = Algorithm.FCFS,
    config: Optional[SimulationConfig] = None,
) -> SimulationResult:
    """Run one algorithm over a private copy of processes."""
    scheduler_cls = get_scheduler(algorithm)
    config = config or SimulationConfig()
    logger.debug("simulating %s on %d process(es), %d core(s)",
                 algorithm, len(processes), config.num_cores)
    return scheduler_cls(processes, config).run()


def run_all(
    processes: List[Process],
    config: Optional[SimulationConfig] = None,
    algorithms: Optional[Iterable[str]] = None,
) -> Dict[str, SimulationResult]:
    """Run several algorithms against the same workload.

    Every run clones the workload, so results never share records.
    """
    selected = list(algorithms) if algorithms is not None else Algorithm.all()
    for algorithm in selected:
        get_scheduler(algorithm)
    return {algorithm: simulate(processes, algorithm, config) for algorithm in selected}
