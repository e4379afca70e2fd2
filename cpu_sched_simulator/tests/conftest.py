import os
import sys

import matplotlib
import pytest

matplotlib.use("Agg")


def pytest_sessionstart(session):
    # Ensure project root is on sys.path so the package can be imported without installing
    here = os.path.dirname(os.path.abspath(__file__))
    project_root = os.path.abspath(os.path.join(here, os.pardir, os.pardir))
    if project_root not in sys.path:
        sys.path.insert(0, project_root)


@pytest.fixture
def textbook_processes():
    """The classic four-process workload."""
    from cpu_sched_simulator.backend.core import Process
    return [
        Process(pid=1, name="P1", arrival_time=0, burst_time=8, priority=3),
        Process(pid=2, name="P2", arrival_time=1, burst_time=4, priority=1),
        Process(pid=3, name="P3", arrival_time=2, burst_time=9, priority=4),
        Process(pid=4, name="P4", arrival_time=3, burst_time=5, priority=2),
    ]
