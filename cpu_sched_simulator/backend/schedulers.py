"""
Scheduler drivers: the non-preemptive block dispatcher (FCFS, SJF,
Priority, Priority with Aging) and the preemptive tick dispatcher (SRTF,
Priority Preemptive).
"""

from abc import ABC, abstractmethod
from typing import List, Optional
import logging

from .config import SimulationConfig
from .core import Algorithm, CoreState, Process, SimulationResult, clone_processes
from .errors import BudgetExhaustedError
from .metrics import summarize
from .policies import (
    FCFS, PRIORITY, SJF, SRTF, apply_aging, preempts, reset_priority, select_next,
)
from .timeline import TimelineRecorder

logger = logging.getLogger(__name__)


class BaseScheduler(ABC):
    """Abstract base class for all drivers.

    A driver owns a private copy of the workload, one CoreState per core
    and the timeline of the run.
    """

    algorithm: str = ""

    def __init__(self, processes: List[Process], config: Optional[SimulationConfig] = None):
        self.config = config or SimulationConfig()
        self.processes = clone_processes(processes)
        self.cores = [CoreState(core_id=i) for i in range(self.config.num_cores)]
        self.timeline = TimelineRecorder()
        self.context_switches = 0

    @abstractmethod
    def _execute(self) -> None:
        """Advance simulated time until every process has completed."""

    def run(self) -> SimulationResult:
        if self.processes:
            self._execute()
        result = summarize(
            self.algorithm, self.processes, self.timeline,
            self.context_switches, self.config.num_cores,
        )
        logger.info(
            "%s finished: makespan=%d avg_wait=%.2f avg_tat=%.2f switches=%d util=%.1f%%",
            self.algorithm, result.makespan, result.avg_waiting_time,
            result.avg_turnaround_time, result.context_switches, result.cpu_utilization,
        )
        return result

    def unfinished(self) -> List[Process]:
        return [p for p in self.processes if not p.is_finished]

    def _count_switch(self, core: CoreState, process: Process) -> bool:
        """Track the core's occupant; True when it changed from another process."""
        changed = core.last_pid is not None and core.last_pid != process.pid
        if changed:
            self.context_switches += 1
            logger.debug("core %d: switch P%s -> P%s", core.core_id, core.last_pid, process.pid)
        core.last_pid = process.pid
        return changed

    def _switch_to(self, core: CoreState, process: Process, now: int) -> int:
        """Bill the switch overhead, if any, and return the time execution starts."""
        cost = self.config.context_switch_time
        if self._count_switch(core, process) and cost > 0:
            self.timeline.context_switch(core.core_id, now, now + cost)
            return now + cost
        return now

    def _complete(self, process: Process, now: int) -> None:
        process.finalize(now)
        logger.debug("%s completed at %d (wait=%d)", process.name, now, process.waiting_time)


class NonPreemptiveScheduler(BaseScheduler):
    """Runs each chosen process to completion as one block.

    The core whose clock is furthest behind makes the next decision.
    """

    mode: str = FCFS

    def choose(self, available: List[Process], now: int) -> Process:
        return select_next(available, self.mode)

    def _execute(self) -> None:
        while self.unfinished():
            core = min(self.cores, key=lambda c: (c.time, c.core_id))
            available = [p for p in self.processes
                         if p.arrival_time <= core.time and not p.is_finished]
            if not available:
                self._idle_until_next_arrival(core)
                continue

            process = self.choose(available, core.time)
            start = self._switch_to(core, process, core.time)
            end = start + process.remaining_time
            logger.debug("core %d: dispatch %s at %d", core.core_id, process.name, start)
            if process.start_time is None:
                process.start_time = start
            self.timeline.execute(core.core_id, process, start, end)
            process.remaining_time = 0
            core.time = end
            self._complete(process, end)

    def _idle_until_next_arrival(self, core: CoreState) -> None:
        upcoming = [p.arrival_time for p in self.unfinished() if p.arrival_time > core.time]
        if upcoming:
            next_arrival = min(upcoming)
            self.timeline.idle(core.core_id, core.time, next_arrival)
            core.time = next_arrival
        else:
            # Nothing left to wait for on this core; step forward so the
            # loop always makes progress.
            core.time += 1


class FCFSScheduler(NonPreemptiveScheduler):
    """First Come First Serve."""
    algorithm = Algorithm.FCFS
    mode = FCFS


class SJFScheduler(NonPreemptiveScheduler):
    """Shortest Job First (non-preemptive)."""
    algorithm = Algorithm.SJF
    mode = SJF


class PriorityScheduler(NonPreemptiveScheduler):
    algorithm = Algorithm.PRIORITY
    mode = PRIORITY


class AgingPriorityScheduler(PriorityScheduler):
    """Non-preemptive priority where waiting improves a process's priority.

    Working priorities are recomputed from the original priority at every
    decision point and restored as soon as a process is dispatched.
    """
    algorithm = Algorithm.PRIORITY_AGING

    def choose(self, available: List[Process], now: int) -> Process:
        apply_aging(available, now, self.config.aging_threshold)
        chosen = select_next(available, PRIORITY)
        if chosen.priority != chosen.original_priority:
            logger.debug("%s aged from %d to %d", chosen.name, chosen.original_priority, chosen.priority)
        reset_priority(chosen)
        return chosen


class PreemptiveScheduler(BaseScheduler):
    """Advances every core one time unit per iteration.

    Each core greedily takes the best waiting process; there is no global
    assignment across cores.
    """

    mode: str = SRTF

    def _execute(self) -> None:
        budget = self.config.budget_for(self.processes)
        now = 0
        steps = 0
        while self.unfinished():
            if steps >= budget:
                raise BudgetExhaustedError(self.algorithm, budget, len(self.unfinished()))
            steps += 1

            available = [p for p in self.processes
                         if p.arrival_time <= now and not p.is_finished]
            self._fill_free_cores(available)
            if all(core.current is None for core in self.cores):
                now = self._skip_to_next_arrival(now)
                continue
            self._preempt(available, now)
            for core in self.cores:
                self._tick(core, now)
            now += 1

    def _skip_to_next_arrival(self, now: int) -> int:
        """Every core is free and nothing has arrived: idle all cores until something does."""
        next_arrival = min(p.arrival_time for p in self.unfinished())
        for core in self.cores:
            self.timeline.idle(core.core_id, now, next_arrival)
        return next_arrival

    def _running_pids(self) -> set:
        return {c.current.pid for c in self.cores if c.current is not None}

    def _fill_free_cores(self, available: List[Process]) -> None:
        running = self._running_pids()
        for core in self.cores:
            if core.current is not None:
                continue
            waiting = [p for p in available if p.pid not in running]
            chosen = select_next(waiting, self.mode)
            if chosen is None:
                break
            core.current = chosen
            running.add(chosen.pid)

    def _preempt(self, available: List[Process], now: int) -> None:
        for core in self.cores:
            # a core that is mid-switch keeps its incoming process
            if core.current is None or core.switch_left > 0:
                continue
            running = self._running_pids()
            challenger = select_next([p for p in available if p.pid not in running], self.mode)
            if challenger is not None and preempts(challenger, core.current, self.mode):
                logger.debug("core %d: %s preempts %s at %d",
                             core.core_id, challenger.name, core.current.name, now)
                core.current = challenger

    def _tick(self, core: CoreState, now: int) -> None:
        process = core.current
        if process is None:
            if any(p.arrival_time > now for p in self.processes):
                self.timeline.idle(core.core_id, now, now + 1)
            return

        if core.switch_left > 0:
            core.switch_left -= 1
            return
        cost = self.config.context_switch_time
        if self._count_switch(core, process) and cost > 0:
            self.timeline.context_switch(core.core_id, now, now + cost)
            core.switch_left = cost - 1
            return

        if process.start_time is None:
            process.start_time = now
        self.timeline.execute(core.core_id, process, now, now + 1)
        process.remaining_time -= 1
        if process.remaining_time == 0:
            self._complete(process, now + 1)
            core.current = None


class SRTFScheduler(PreemptiveScheduler):
    """Shortest Remaining Time First (preemptive SJF)."""
    algorithm = Algorithm.SRTF
    mode = SRTF


class PreemptivePriorityScheduler(PreemptiveScheduler):
    algorithm = Algorithm.PRIORITY_PREEMPTIVE
    mode = PRIORITY
