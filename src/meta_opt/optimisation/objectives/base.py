from abc import ABC, abstractmethod
from collections.abc import Callable

import numpy as np


class BaseObjective(ABC):
    """
    Base class for all optimization objectives.

    Objectives are pure functions from a position vector to a scalar
    fitness (lower is better). They hold no per-run state, so a single
    instance can be shared by any number of runs.
    """

    name: str = "objective"

    @abstractmethod
    def evaluate(self, position: np.ndarray) -> float:
        """Evaluate the objective at a position."""
        pass

    def __call__(self, position: np.ndarray) -> float:
        return self.evaluate(position)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class CallableObjective(BaseObjective):
    """
    Wrap a plain function as an objective.

    This is the hook for custom objective functions. The wrapped function
    receives a copy of the position, so it cannot alter the candidate it
    is evaluating.
    """

    def __init__(self, fn: Callable[[np.ndarray], float], name: str | None = None):
        if not callable(fn):
            raise TypeError(f"Objective must be callable, got {type(fn)}")
        self.fn = fn
        self.name = name or getattr(fn, "__name__", "custom")

    def evaluate(self, position: np.ndarray) -> float:
        x = np.array(position, dtype=float)
        if not np.all(np.isfinite(x)):
            return float("nan")
        return float(self.fn(x))
