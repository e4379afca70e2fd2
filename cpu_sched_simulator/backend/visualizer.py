"""
Matplotlib charts: per-core Gantt lanes and an algorithm comparison.
"""

from __future__ import annotations

from typing import Mapping, Optional
import os

import matplotlib.pyplot as plt

from .core import SimulationResult, SliceKind


def ensure_dir(path: str) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)


def _finish(fig, out_path: Optional[str]) -> None:
    fig.tight_layout()
    if out_path:
        ensure_dir(out_path)
        fig.savefig(out_path, dpi=150)
        plt.close(fig)
    else:
        plt.show()


def plot_gantt(result: SimulationResult, out_path: Optional[str] = None):
    """Gantt chart with one lane per core."""
    fig, ax = plt.subplots(figsize=(12, 1.5 + 0.8 * result.num_cores))

    for entry in result.gantt_chart:
        hatch = "//" if entry.kind is SliceKind.CONTEXT_SWITCH else None
        alpha = 0.5 if entry.kind is SliceKind.IDLE else 0.9
        ax.barh(entry.core_id, entry.duration, left=entry.start, color=entry.color,
                edgecolor="black", hatch=hatch, alpha=alpha)
        if entry.kind is SliceKind.EXECUTION:
            ax.text(entry.start + entry.duration / 2, entry.core_id, entry.label,
                    ha="center", va="center", fontsize=8)

    ax.set_yticks(range(result.num_cores))
    ax.set_yticklabels([f"Core {i}" for i in range(result.num_cores)])
    ax.invert_yaxis()
    ax.set_xlabel("Time")
    ax.set_title(f"{result.algorithm_name}: CPU utilization {result.cpu_utilization:.1f}%")
    ax.grid(True, axis="x", linestyle=":", alpha=0.5)
    _finish(fig, out_path)
    return fig


def plot_comparison(results: Mapping[str, SimulationResult], out_path: Optional[str] = None):
    """Side-by-side average waiting and turnaround time per algorithm."""
    names = [r.algorithm_name for r in results.values()]
    waits = [r.avg_waiting_time for r in results.values()]
    tats = [r.avg_turnaround_time for r in results.values()]
    positions = range(len(names))
    width = 0.4

    fig, ax = plt.subplots(figsize=(12, 5))
    ax.bar([x - width / 2 for x in positions], waits, width, label="Avg waiting time")
    ax.bar([x + width / 2 for x in positions], tats, width, label="Avg turnaround time")
    ax.set_xticks(list(positions))
    ax.set_xticklabels(names, rotation=20, ha="right", fontsize=8)
    ax.set_ylabel("Time")
    ax.set_title("Algorithm comparison")
    ax.legend()
    ax.grid(True, axis="y", linestyle=":", alpha=0.5)
    _finish(fig, out_path)
    return fig
