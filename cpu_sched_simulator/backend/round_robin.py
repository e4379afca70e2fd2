"""
Round Robin driver: every core pulls from one shared FIFO ready queue and
runs a process for at most one time quantum.
"""

from collections import deque
from typing import Deque
import logging

from .core import Algorithm, CoreState, Process
from .errors import BudgetExhaustedError
from .schedulers import BaseScheduler

logger = logging.getLogger(__name__)


class RoundRobinScheduler(BaseScheduler):
    algorithm = Algorithm.RR

    def _execute(self) -> None:
        budget = self.config.budget_for(self.processes)
        pending: Deque[Process] = deque(sorted(self.processes, key=lambda p: (p.arrival_time, p.pid)))
        ready: Deque[Process] = deque()
        now = 0
        steps = 0

        while True:
            if steps >= budget:
                raise BudgetExhaustedError(self.algorithm, budget, len(self.unfinished()))
            steps += 1

            # Arrivals go in before expired slices, so a preempted process
            # queues behind anything that arrived during its slice.
            while pending and pending[0].arrival_time <= now:
                ready.append(pending.popleft())

            for core in self.cores:
                if core.current is not None and core.slice_end <= now:
                    if core.current.remaining_time > 0:
                        logger.debug("core %d: quantum expired for %s at %d",
                                     core.core_id, core.current.name, now)
                        ready.append(core.current)
                    core.current = None

            for core in self.cores:
                if core.current is None and ready:
                    self._dispatch(core, ready.popleft(), now)

            horizons = [c.slice_end for c in self.cores if c.current is not None]
            if pending:
                horizons.append(pending[0].arrival_time)
            if not horizons:
                break
            next_time = min(horizons)

            if pending:
                for core in self.cores:
                    if core.current is None:
                        self.timeline.idle(core.core_id, now, next_time)
            now = next_time

    def _dispatch(self, core: CoreState, process: Process, now: int) -> None:
        start = self._switch_to(core, process, now)
        span = min(process.remaining_time, self.config.time_quantum)
        if process.start_time is None:
            process.start_time = start
        self.timeline.execute(core.core_id, process, start, start + span)
        process.remaining_time -= span
        core.current = process
        core.slice_end = start + span
        if process.remaining_time == 0:
            self._complete(process, core.slice_end)
