from __future__ import annotations

import argparse
import logging
import os
from typing import List, Optional

from cpu_sched_simulator.backend.advisor import Criterion, recommend, summary_frame
from cpu_sched_simulator.backend.config import SimulationConfig
from cpu_sched_simulator.backend.core import Algorithm
from cpu_sched_simulator.backend.simulator import run_all
from cpu_sched_simulator.backend.utils import export_csv, export_json, generate_workload
from cpu_sched_simulator.backend.visualizer import plot_comparison, plot_gantt


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Multi-core CPU Scheduling Simulator")
    p.add_argument("--algorithm", choices=["all"] + Algorithm.all(), default="all")
    p.add_argument("--n", type=int, default=8, help="Number of synthetic processes")
    p.add_argument("--seed", type=int, default=42)
    p.add_argument("--cores", type=int, default=1)
    p.add_argument("--quantum", type=int, default=2)
    p.add_argument("--context-switch", type=int, default=0, help="Cost of one context switch in time units")
    p.add_argument("--criterion", choices=Criterion.ALL, default=Criterion.WAITING)
    p.add_argument("--plot-dir", type=str, default=None, help="Save Gantt and comparison charts here")
    p.add_argument("--export", type=str, default=None, help="Directory for JSON/CSV results")
    p.add_argument("--verbose", action="store_true")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    config = SimulationConfig(
        num_cores=args.cores,
        context_switch_time=args.context_switch,
        time_quantum=args.quantum,
    )
    procs = generate_workload(args.n, args.seed)
    algorithms = Algorithm.all() if args.algorithm == "all" else [args.algorithm]
    results = run_all(procs, config, algorithms)

    print("--- Workload ---")
    for p in procs:
        print(f"{p.name}: arrival={p.arrival_time}, burst={p.burst_time}, priority={p.priority}")

    print("\n--- Summary ---")
    print(summary_frame(results).round(2).to_string())

    advice = recommend(results, args.criterion)
    print(f"\nSuggested for {args.criterion}: {advice.suggested_algorithm}")
    print(f"  {advice.reasoning}")
    print(f"  Trade-offs: {advice.trade_offs}")
    print(f"  Starvation: {advice.starvation_mitigation}")

    if args.plot_dir:
        for algorithm, result in results.items():
            plot_gantt(result, os.path.join(args.plot_dir, f"gantt_{algorithm.lower()}.png"))
        plot_comparison(results, os.path.join(args.plot_dir, "comparison.png"))
        print(f"\nSaved plots to {args.plot_dir}")

    if args.export:
        os.makedirs(args.export, exist_ok=True)
        for algorithm, result in results.items():
            base = os.path.join(args.export, algorithm.lower())
            export_json(result, base + ".json")
            export_csv(result, base)
        print(f"Exported results to {args.export}")


if __name__ == "__main__":
    main()
