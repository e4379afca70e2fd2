"""
Synthetic workloads and JSON/CSV export of simulation results.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List
import csv
import json

import numpy as np

from .core import Process, SimulationResult


def generate_workload(
    n: int,
    seed: int = 42,
    mean_burst: float = 5.0,
    mean_inter_arrival: float = 2.0,
    max_priority: int = 5,
) -> List[Process]:
    """Synthetic workload with exponential bursts and inter-arrival gaps.

    Times are rounded to whole units; bursts are at least 1.
    """
    rng = np.random.default_rng(seed)
    bursts = np.maximum(1, np.rint(rng.exponential(mean_burst, size=n))).astype(int)
    gaps = np.rint(rng.exponential(mean_inter_arrival, size=n)).astype(int)
    gaps[:1] = 0
    arrivals = np.cumsum(gaps)
    priorities = rng.integers(1, max_priority + 1, size=n)

    procs: List[Process] = []
    for i in range(n):
        procs.append(Process(
            pid=i + 1,
            name=f"P{i + 1}",
            arrival_time=int(arrivals[i]),
            burst_time=int(bursts[i]),
            priority=int(priorities[i]),
        ))
    return procs


def process_rows(result: SimulationResult) -> List[Dict[str, Any]]:
    rows = []
    for p in result.processes:
        rows.append({
            "pid": p.pid,
            "name": p.name,
            "arrival_time": p.arrival_time,
            "burst_time": p.burst_time,
            "priority": p.original_priority,
            "start_time": p.start_time,
            "completion_time": p.completion_time,
            "turnaround_time": p.turnaround_time,
            "waiting_time": p.waiting_time,
        })
    return rows


def timeline_rows(result: SimulationResult) -> List[Dict[str, Any]]:
    return [{
        "core": e.core_id,
        "start": e.start,
        "end": e.end,
        "kind": e.kind.value,
        "pid": e.process_id,
        "label": e.label,
    } for e in result.gantt_chart]


def log_rows(result: SimulationResult) -> List[Dict[str, Any]]:
    return [{
        "time": e.time,
        "core": e.core_id,
        "kind": e.kind.value,
        "pid": e.process_id,
        "event": e.describe(),
    } for e in result.execution_log]


def result_to_dict(result: SimulationResult) -> Dict[str, Any]:
    return {
        "algorithm": result.algorithm,
        "algorithm_name": result.algorithm_name,
        "num_cores": result.num_cores,
        "makespan": result.makespan,
        "avg_waiting_time": result.avg_waiting_time,
        "avg_turnaround_time": result.avg_turnaround_time,
        "avg_response_time": result.avg_response_time,
        "context_switches": result.context_switches,
        "cpu_utilization": result.cpu_utilization,
        "throughput": result.throughput,
        "processes": process_rows(result),
        "timeline": timeline_rows(result),
        "execution_log": log_rows(result),
    }


def export_json(result: SimulationResult, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(result_to_dict(result), f, indent=2)


def export_csv(result: SimulationResult, base_path_no_ext: str) -> List[str]:
    """Write processes, timeline and execution log as three CSV files."""
    tables = {
        "processes": process_rows(result),
        "timeline": timeline_rows(result),
        "log": log_rows(result),
    }
    fieldnames = {
        "processes": ["pid", "name", "arrival_time", "burst_time", "priority", "start_time",
                      "completion_time", "turnaround_time", "waiting_time"],
        "timeline": ["core", "start", "end", "kind", "pid", "label"],
        "log": ["time", "core", "kind", "pid", "event"],
    }
    written = []
    for suffix, rows in tables.items():
        path = f"{base_path_no_ext}_{suffix}.csv"
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames[suffix])
            writer.writeheader()
            for row in rows:
                writer.writerow(row)
        written.append(path)
    return written
