"""
Boundary with the recommendation step.

`build_advisory_input` produces exactly the scalar summary an external
advisor receives. `recommend` is a rule-based advisor that applies the
same selection rules to the simulated metrics.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

import pandas as pd

from .core import Algorithm, SimulationResult
from .errors import ConfigurationError, MissingResultError


class Criterion:
    """Optimization goals a user can ask the advisor for."""
    WAITING = "waiting time"
    TURNAROUND = "turnaround time"
    UTILIZATION = "cpu utilization"
    SWITCHES = "context switches"
    COMBINED = "a combination of all"

    ALL = (WAITING, TURNAROUND, UTILIZATION, SWITCHES, COMBINED)


ADVISORY_KEYS = {
    Algorithm.FCFS: "fcfs",
    Algorithm.SJF: "sjf",
    Algorithm.SRTF: "srtf",
    Algorithm.PRIORITY: "priority",
    Algorithm.PRIORITY_PREEMPTIVE: "priorityPreemptive",
    Algorithm.RR: "roundRobin",
    Algorithm.PRIORITY_AGING: "priorityAging",
}

METRIC_COLUMNS = ["avg_waiting_time", "avg_turnaround_time", "context_switches", "cpu_utilization"]

# column, ascending (lower is better)
_CRITERION_COLUMN = {
    Criterion.WAITING: ("avg_waiting_time", True),
    Criterion.TURNAROUND: ("avg_turnaround_time", True),
    Criterion.UTILIZATION: ("cpu_utilization", False),
    Criterion.SWITCHES: ("context_switches", True),
}

_TRADE_OFFS = {
    Algorithm.FCFS: "Simple and switch-free between arrivals, but short jobs queued behind long ones wait (convoy effect).",
    Algorithm.SJF: "Minimizes average waiting time for known bursts, but long jobs can starve and burst lengths must be known in advance.",
    Algorithm.SRTF: "Best average waiting time when bursts are known, at the cost of more context switches and possible starvation of long jobs.",
    Algorithm.PRIORITY: "Honors importance, but low-priority processes can starve behind a steady stream of high-priority work.",
    Algorithm.PRIORITY_PREEMPTIVE: "Responds immediately to important work, but increases context switches and low-priority processes can starve.",
    Algorithm.PRIORITY_AGING: "Keeps priority ordering while bounding starvation, so the order is less strict than plain priority scheduling.",
    Algorithm.RR: "Fair and responsive for interactive work, but a small quantum raises context switches and turnaround time.",
}

_STARVATION_PRONE = {Algorithm.SJF, Algorithm.SRTF, Algorithm.PRIORITY, Algorithm.PRIORITY_PREEMPTIVE}


@dataclass(frozen=True)
class Recommendation:
    suggested_algorithm: str
    reasoning: str
    trade_offs: str
    starvation_mitigation: str


def _check_criterion(criterion: str) -> str:
    normalized = criterion.strip().lower()
    if normalized not in Criterion.ALL:
        raise ConfigurationError(f"unknown performance criterion {criterion!r}")
    return normalized


def starvation_possible(algorithm: str) -> bool:
    return algorithm in _STARVATION_PRONE


def build_advisory_input(results: Mapping[str, SimulationResult], criterion: str) -> Dict[str, Any]:
    """Scalar summary per algorithm, keyed the way the advisor expects."""
    criterion = _check_criterion(criterion)
    missing = [Algorithm.display_name(a) for a in ADVISORY_KEYS if a not in results]
    if missing:
        raise MissingResultError(f"simulation results missing for: {', '.join(missing)}")

    payload: Dict[str, Any] = {}
    for algorithm, key in ADVISORY_KEYS.items():
        r = results[algorithm]
        payload[key] = {
            "waitingTime": r.avg_waiting_time,
            "turnaroundTime": r.avg_turnaround_time,
            "contextSwitches": r.context_switches,
            "cpuUtilization": r.cpu_utilization,
        }
    payload["performanceCriteria"] = criterion
    return payload


def summary_frame(results: Mapping[str, SimulationResult]) -> pd.DataFrame:
    """One row per algorithm with the summary metrics."""
    rows = []
    for algorithm, r in results.items():
        rows.append({
            "algorithm": algorithm,
            "name": r.algorithm_name,
            "avg_waiting_time": r.avg_waiting_time,
            "avg_turnaround_time": r.avg_turnaround_time,
            "context_switches": r.context_switches,
            "cpu_utilization": r.cpu_utilization,
        })
    return pd.DataFrame(rows, columns=["algorithm", "name"] + METRIC_COLUMNS).set_index("algorithm")


def combined_scores(frame: pd.DataFrame) -> pd.Series:
    """Mean rank across all metrics; lower is better."""
    ranks = pd.DataFrame({
        column: frame[column].rank(method="min", ascending=_ascending(column))
        for column in METRIC_COLUMNS
    })
    return ranks.mean(axis=1)


def _ascending(column: str) -> bool:
    return column != "cpu_utilization"


def recommend(results: Mapping[str, SimulationResult], criterion: str) -> Recommendation:
    """Pick the best simulated algorithm for criterion."""
    criterion = _check_criterion(criterion)
    if not results:
        raise MissingResultError("no simulation results to compare")

    frame = summary_frame(results)
    if criterion == Criterion.COMBINED:
        scores = combined_scores(frame)
        best = scores.idxmin()
        reasoning = (
            f"{frame.at[best, 'name']} has the best average rank ({scores[best]:.2f}) across waiting time, "
            f"turnaround time, context switches and CPU utilization among {len(frame)} algorithms."
        )
    else:
        column, ascending = _CRITERION_COLUMN[criterion]
        best = frame[column].idxmin() if ascending else frame[column].idxmax()
        extreme = "lowest" if ascending else "highest"
        reasoning = (
            f"{frame.at[best, 'name']} has the {extreme} {criterion} "
            f"({frame.at[best, column]:.2f}) among {len(frame)} algorithms."
        )

    if starvation_possible(best):
        mitigation = ("Starvation is possible. Priority with Aging bounds it by improving a waiting "
                      "process's priority for every aging interval it waits.")
    else:
        mitigation = "Starvation is not a concern for this algorithm."

    return Recommendation(
        suggested_algorithm=frame.at[best, "name"],
        reasoning=reasoning,
        trade_offs=_TRADE_OFFS.get(best, ""),
        starvation_mitigation=mitigation,
    )
