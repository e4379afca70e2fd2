"""
Selection rules for each scheduling discipline.

Every function here is pure with respect to the scheduling decision: it
receives the processes that have already arrived and are not finished,
in input order, and returns the one to run next. Aging is the only rule
that writes to a process, and only to its working priority.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple

from .core import Process


AGING_THRESHOLD = 10

FCFS = 'fcfs'
SJF = 'sjf'
SRTF = 'srtf'
PRIORITY = 'priority'

SortKey = Callable[[Process], Tuple[int, ...]]

_KEYS: Dict[str, SortKey] = {
    # earliest arrival first; min() keeps input order among equals
    FCFS: lambda p: (p.arrival_time,),
    # shortest total burst first, tie-breaker by arrival_time
    SJF: lambda p: (p.burst_time, p.arrival_time),
    # shortest remaining time first, tie-breaker by arrival_time
    SRTF: lambda p: (p.remaining_time, p.arrival_time),
    # lowest priority number first, tie-breaker by arrival_time
    PRIORITY: lambda p: (p.priority, p.arrival_time),
}

# What a preemptive driver compares against the running process
_MERIT: Dict[str, Callable[[Process], int]] = {
    SRTF: lambda p: p.remaining_time,
    PRIORITY: lambda p: p.priority,
}


def sort_key(mode: str) -> SortKey:
    try:
        return _KEYS[mode]
    except KeyError:
        raise ValueError(f"unknown selection mode: {mode!r}") from None


def select_next(candidates: List[Process], mode: str = FCFS) -> Optional[Process]:
    """Return the next process according to mode, or None if there is none."""
    if not candidates:
        return None
    return min(candidates, key=sort_key(mode))


def preempts(challenger: Process, incumbent: Process, mode: str) -> bool:
    """True when challenger is strictly better than the running process.

    Equal merit keeps the incumbent on the core.
    """
    if mode not in _MERIT:
        raise ValueError(f"mode {mode!r} is not preemptive")
    merit = _MERIT[mode]
    return merit(challenger) < merit(incumbent)


def effective_priority(process: Process, now: int, threshold: int = AGING_THRESHOLD) -> int:
    """Priority after aging: one level better per full threshold waited.

    Never better than 1, and never worse than the original priority.
    """
    waited = max(0, now - process.arrival_time)
    boosted = process.original_priority - waited // threshold
    floor = min(1, process.original_priority)
    return max(floor, boosted)


def apply_aging(candidates: List[Process], now: int, threshold: int = AGING_THRESHOLD) -> None:
    """Recompute the working priority of every waiting candidate."""
    for p in candidates:
        p.priority = effective_priority(p, now, threshold)


def reset_priority(process: Process) -> None:
    """Undo aging once a process has been dispatched."""
    process.priority = process.original_priority
