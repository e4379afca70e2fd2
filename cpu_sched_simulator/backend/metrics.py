"""
Summary metrics for a finished run.
"""

from __future__ import annotations

from typing import List

from .core import GanttEntry, Process, SimulationResult, SliceKind
from .timeline import TimelineRecorder


def compute_avg(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def compute_makespan(processes: List[Process]) -> int:
    completions = [p.completion_time for p in processes if p.completion_time is not None]
    return max(completions) if completions else 0


def compute_busy_time(gantt_chart: List[GanttEntry]) -> int:
    """Total execution time across all cores; idle and switch slices excluded."""
    return sum(e.duration for e in gantt_chart if e.kind is SliceKind.EXECUTION)


def compute_cpu_utilization(gantt_chart: List[GanttEntry], makespan: int, num_cores: int) -> float:
    capacity = makespan * num_cores
    if capacity <= 0:
        return 0.0
    return compute_busy_time(gantt_chart) / capacity * 100


def compute_throughput(processes: List[Process], makespan: int) -> float:
    if makespan <= 0:
        return 0.0
    completed = len([p for p in processes if p.completion_time is not None])
    return completed / makespan


def summarize(
    algorithm: str,
    processes: List[Process],
    recorder: TimelineRecorder,
    context_switches: int,
    num_cores: int,
) -> SimulationResult:
    """Build the result of a run from the driver's final state."""
    gantt_chart = recorder.gantt_chart()
    makespan = compute_makespan(processes)
    completed = [p for p in processes if p.completion_time is not None]
    responses = [p.response_time for p in completed if p.response_time is not None]
    return SimulationResult(
        algorithm=algorithm,
        processes=processes,
        gantt_chart=gantt_chart,
        execution_log=recorder.execution_log(),
        avg_waiting_time=compute_avg([p.waiting_time for p in completed]),
        avg_turnaround_time=compute_avg([p.turnaround_time for p in completed]),
        context_switches=context_switches,
        cpu_utilization=compute_cpu_utilization(gantt_chart, makespan, num_cores),
        num_cores=num_cores,
        makespan=makespan,
        avg_response_time=compute_avg(responses),
        throughput=compute_throughput(processes, makespan),
    )
