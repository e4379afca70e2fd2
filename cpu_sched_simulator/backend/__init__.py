"""
Scheduling engine: process model, policies, drivers and metrics.
"""

from .config import SimulationConfig
from .core import Algorithm, GanttEntry, Process, SimulationResult, SliceKind
from .errors import BudgetExhaustedError, ConfigurationError, MissingResultError, SimulatorError
from .simulator import run_all, simulate

__all__ = [
    'Algorithm',
    'BudgetExhaustedError',
    'ConfigurationError',
    'GanttEntry',
    'MissingResultError',
    'Process',
    'SimulationConfig',
    'SimulationResult',
    'SimulatorError',
    'SliceKind',
    'run_all',
    'simulate',
]
