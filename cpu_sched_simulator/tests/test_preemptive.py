"""
Tests for the tick-driven preemptive schedulers (SRTF, Priority Preemptive).
"""

import pytest

from cpu_sched_simulator.backend.config import SimulationConfig
from cpu_sched_simulator.backend.core import Algorithm, Process, SliceKind
from cpu_sched_simulator.backend.errors import BudgetExhaustedError
from cpu_sched_simulator.backend.simulator import simulate


def spans(result, kind=SliceKind.EXECUTION):
    return [(e.core_id, e.process_id, e.start, e.end) for e in result.gantt_chart if e.kind is kind]


class TestSRTF:

    def test_textbook_scenario(self, textbook_processes):
        result = simulate(textbook_processes, Algorithm.SRTF)

        assert spans(result) == [
            (0, 1, 0, 1),
            (0, 2, 1, 5),
            (0, 4, 5, 10),
            (0, 1, 10, 17),
            (0, 3, 17, 26),
        ]
        assert {p.pid: p.completion_time for p in result.processes} == {1: 17, 2: 5, 3: 26, 4: 10}
        assert result.avg_waiting_time == pytest.approx(6.5)
        assert result.context_switches == 4
        assert all(p.remaining_time == 0 for p in result.processes)

    def test_equal_remaining_time_does_not_preempt(self):
        procs = [
            Process(pid=1, name="P1", arrival_time=0, burst_time=6),
            Process(pid=2, name="P2", arrival_time=2, burst_time=4),
        ]
        result = simulate(procs, Algorithm.SRTF)
        # at t=2 both have 4 units left
        assert spans(result) == [(0, 1, 0, 6), (0, 2, 6, 10)]
        assert result.context_switches == 1

    def test_log_follows_preempted_process(self, textbook_processes):
        result = simulate(textbook_processes, Algorithm.SRTF)
        p1_units = [e for e in result.execution_log if e.process_id == 1]
        assert [e.cycle for e in p1_units] == list(range(1, 9))
        assert [e.time for e in p1_units[:2]] == [0, 10]

    def test_two_cores(self, textbook_processes):
        result = simulate(textbook_processes, Algorithm.SRTF, SimulationConfig(num_cores=2))

        assert {p.pid: p.completion_time for p in result.processes} == {1: 8, 2: 5, 3: 17, 4: 10}
        assert spans(result, SliceKind.IDLE) == [(1, None, 0, 1)]
        assert result.context_switches == 2
        assert result.cpu_utilization == pytest.approx(26 / 34 * 100)

    def test_budget_exhaustion(self, textbook_processes):
        with pytest.raises(BudgetExhaustedError) as info:
            simulate(textbook_processes, Algorithm.SRTF, SimulationConfig(step_budget=5))
        assert info.value.budget == 5
        assert info.value.unfinished == 3

    def test_long_burst_within_default_budget(self):
        result = simulate([Process(pid=1, name="P1", arrival_time=0, burst_time=150_000)], Algorithm.SRTF)
        assert result.processes[0].completion_time == 150_000
        assert result.cpu_utilization == pytest.approx(100.0)

    def test_late_arrival_skips_idle_time(self):
        procs = [Process(pid=1, name="P1", arrival_time=200_000, burst_time=1)]
        # one step to reach the arrival, one to run it
        result = simulate(procs, Algorithm.SRTF, SimulationConfig(num_cores=2, step_budget=2))

        assert result.processes[0].completion_time == 200_001
        assert spans(result, SliceKind.IDLE) == [(0, None, 0, 200_000), (1, None, 0, 200_000)]
        assert result.makespan == 200_001
        assert simulate(procs, Algorithm.SRTF).processes[0].waiting_time == 0

    def test_idle_gap_between_arrivals(self):
        procs = [
            Process(pid=1, name="P1", arrival_time=0, burst_time=2),
            Process(pid=2, name="P2", arrival_time=10, burst_time=3),
        ]
        result = simulate(procs, Algorithm.SRTF, SimulationConfig(context_switch_time=1))

        assert spans(result) == [(0, 1, 0, 2), (0, 2, 11, 14)]
        assert spans(result, SliceKind.IDLE) == [(0, None, 2, 10)]
        assert spans(result, SliceKind.CONTEXT_SWITCH) == [(0, None, 10, 11)]
        assert result.context_switches == 1


class TestPreemptivePriority:

    def test_textbook_scenario(self, textbook_processes):
        result = simulate(textbook_processes, Algorithm.PRIORITY_PREEMPTIVE)
        assert [s[1] for s in spans(result)] == [1, 2, 4, 1, 3]
        assert {p.pid: p.completion_time for p in result.processes} == {1: 17, 2: 5, 3: 26, 4: 10}
        assert result.context_switches == 4

    def test_context_switch_cost(self):
        procs = [
            Process(pid=1, name="P1", arrival_time=0, burst_time=3, priority=2),
            Process(pid=2, name="P2", arrival_time=1, burst_time=2, priority=1),
        ]
        result = simulate(procs, Algorithm.PRIORITY_PREEMPTIVE, SimulationConfig(context_switch_time=1))

        assert spans(result) == [(0, 1, 0, 1), (0, 2, 2, 4), (0, 1, 5, 7)]
        assert [(s[2], s[3]) for s in spans(result, SliceKind.CONTEXT_SWITCH)] == [(1, 2), (4, 5)]
        assert result.process(2).completion_time == 4
        assert result.process(2).waiting_time == 1
        assert result.process(1).completion_time == 7
        assert result.process(1).waiting_time == 4
        assert result.context_switches == 2

    def test_switch_in_progress_is_not_interrupted(self):
        procs = [
            Process(pid=1, name="P1", arrival_time=0, burst_time=2, priority=3),
            Process(pid=2, name="P2", arrival_time=1, burst_time=2, priority=2),
            Process(pid=3, name="P3", arrival_time=2, burst_time=2, priority=1),
        ]
        result = simulate(procs, Algorithm.PRIORITY_PREEMPTIVE, SimulationConfig(context_switch_time=3))

        # P3 arrives at t=2 while the core is switching to P2; the switch
        # completes, then P3 takes the core before P2 runs
        switches = [(s[2], s[3]) for s in spans(result, SliceKind.CONTEXT_SWITCH)]
        assert switches == [(1, 4), (4, 7), (9, 12), (14, 17)]
        assert result.context_switches == len(switches)
        assert [s[1] for s in spans(result)] == [1, 3, 2, 1]
        assert {p.pid: p.completion_time for p in result.processes} == {1: 18, 2: 14, 3: 9}
        assert sum(e.duration for e in result.gantt_chart if e.kind is SliceKind.EXECUTION) == 6
