"""
Properties every algorithm must satisfy, plus the simulate/run_all entry points.
"""

from collections import defaultdict

import pytest

from cpu_sched_simulator.backend.config import SimulationConfig
from cpu_sched_simulator.backend.core import Algorithm, Process, SliceKind
from cpu_sched_simulator.backend.errors import ConfigurationError
from cpu_sched_simulator.backend.metrics import compute_busy_time
from cpu_sched_simulator.backend.simulator import run_all, simulate
from cpu_sched_simulator.backend.utils import generate_workload


ALGORITHMS = Algorithm.all()


@pytest.mark.parametrize("algorithm", ALGORITHMS)
@pytest.mark.parametrize("cores", [1, 2, 3])
@pytest.mark.parametrize("switch_cost", [0, 2])
def test_run_invariants(algorithm, cores, switch_cost):
    procs = generate_workload(12, seed=7)
    config = SimulationConfig(num_cores=cores, context_switch_time=switch_cost, time_quantum=3)
    result = simulate(procs, algorithm, config)

    for p in result.processes:
        assert p.remaining_time == 0
        assert p.turnaround_time == p.completion_time - p.arrival_time == p.waiting_time + p.burst_time
        assert p.waiting_time >= 0
        assert p.start_time >= p.arrival_time

    busy = compute_busy_time(result.gantt_chart)
    assert busy == sum(p.burst_time for p in procs)
    assert busy <= result.makespan * cores
    assert 0.0 <= result.cpu_utilization <= 100.0
    assert all(e.end > e.start for e in result.gantt_chart)

    executed = defaultdict(int)
    for e in result.gantt_chart:
        if e.kind is SliceKind.EXECUTION:
            executed[e.process_id] += e.duration
    assert executed == {p.pid: p.burst_time for p in procs}

    switch_slices = [e for e in result.gantt_chart if e.kind is SliceKind.CONTEXT_SWITCH]
    if switch_cost == 0:
        assert switch_slices == []
    else:
        assert len(switch_slices) == result.context_switches
        assert all(e.duration == switch_cost for e in switch_slices)


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_no_overlap_per_core(algorithm):
    procs = generate_workload(10, seed=3)
    result = simulate(procs, algorithm, SimulationConfig(num_cores=2, context_switch_time=1))
    lanes = defaultdict(list)
    for e in result.gantt_chart:
        lanes[e.core_id].append(e)
    for entries in lanes.values():
        entries.sort(key=lambda e: e.start)
        for prev, nxt in zip(entries, entries[1:]):
            assert prev.end <= nxt.start


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_log_has_one_entry_per_unit(algorithm, textbook_processes):
    result = simulate(textbook_processes, algorithm, SimulationConfig(context_switch_time=1))
    covered = sum(e.duration for e in result.gantt_chart)
    assert len(result.execution_log) == covered
    times = [(e.time, e.core_id) for e in result.execution_log]
    assert times == sorted(times)
    assert len(set(times)) == len(times)


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_same_input_same_result(algorithm, textbook_processes):
    config = SimulationConfig(num_cores=2, context_switch_time=1)
    first = simulate(textbook_processes, algorithm, config)
    second = simulate(textbook_processes, algorithm, config)
    assert first == second
    assert all(p.completion_time is None for p in textbook_processes)


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_empty_workload(algorithm):
    result = simulate([], algorithm, SimulationConfig(num_cores=2))
    assert result.processes == []
    assert result.gantt_chart == []
    assert result.execution_log == []
    assert result.avg_waiting_time == 0.0
    assert result.avg_turnaround_time == 0.0
    assert result.cpu_utilization == 0.0
    assert result.context_switches == 0
    assert result.num_cores == 2


def test_unknown_algorithm(textbook_processes):
    with pytest.raises(ConfigurationError):
        simulate(textbook_processes, "LOTTERY")


def test_run_all_defaults_to_every_algorithm(textbook_processes):
    results = run_all(textbook_processes)
    assert list(results) == ALGORITHMS
    assert results[Algorithm.FCFS].algorithm_name == "First-Come, First-Served"
    # no run shares process records with another
    ids = {id(p) for r in results.values() for p in r.processes}
    assert len(ids) == len(ALGORITHMS) * len(textbook_processes)


def test_run_all_subset(textbook_processes):
    results = run_all(textbook_processes, algorithms=[Algorithm.RR, Algorithm.SJF])
    assert list(results) == [Algorithm.RR, Algorithm.SJF]


def test_run_all_validates_before_running(textbook_processes):
    with pytest.raises(ConfigurationError):
        run_all(textbook_processes, algorithms=[Algorithm.FCFS, "LOTTERY"])


def test_config_defaults():
    config = SimulationConfig()
    assert (config.num_cores, config.context_switch_time, config.time_quantum) == (1, 0, 2)
    assert config.aging_threshold == 10
    assert config.step_budget is None


@pytest.mark.parametrize("kwargs", [
    {"num_cores": 0},
    {"context_switch_time": -1},
    {"time_quantum": 0},
    {"step_budget": 0},
    {"aging_threshold": 0},
    {"time_quantum": 1.5},
    {"num_cores": True},
    {"num_cores": 1.5},
    {"step_budget": -3},
])
def test_config_rejects_invalid_values(kwargs):
    with pytest.raises(ConfigurationError):
        SimulationConfig(**kwargs)


def test_budget_derived_from_workload(textbook_processes):
    small = SimulationConfig().budget_for(textbook_processes)
    late = SimulationConfig().budget_for(
        textbook_processes + [Process(pid=9, name="P9", arrival_time=500_000, burst_time=200_000)])

    assert small > 26
    assert late > 700_000
    assert SimulationConfig(step_budget=7).budget_for(textbook_processes) == 7
