"""
Exceptions raised by the scheduling simulator.
"""


class SimulatorError(Exception):
    """Base class for all simulator errors."""


class ConfigurationError(SimulatorError, ValueError):
    """Invalid process list or simulation configuration."""


class BudgetExhaustedError(SimulatorError, RuntimeError):
    """A driver ran out of its step budget before every process finished."""

    def __init__(self, algorithm: str, budget: int, unfinished: int):
        super().__init__(
            f"{algorithm}: step budget of {budget} exhausted with {unfinished} unfinished process(es)"
        )
        self.algorithm = algorithm
        self.budget = budget
        self.unfinished = unfinished


class MissingResultError(SimulatorError, KeyError):
    """A summary was requested for an algorithm that was not simulated."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""
