"""
Rastrigin benchmark objective.

    f(x) = A*d + sum(x_i^2 - A*cos(2*pi*x_i))

Highly multimodal, with a regular lattice of local minima and a single
global minimum f(0, ..., 0) = 0. Usually evaluated on [-5.12, 5.12]^d.
"""

import numpy as np

from .base import BaseObjective


class RastriginObjective(BaseObjective):
    """Rastrigin function with amplitude ``a`` (10 by default)."""

    name = "rastrigin"

    def __init__(self, a: float = 10.0):
        self.a = float(a)

    def evaluate(self, position: np.ndarray) -> float:
        x = np.asarray(position, dtype=float)
        if not np.all(np.isfinite(x)):
            return float("nan")
        return float(self.a * x.size + np.sum(x ** 2 - self.a * np.cos(2 * np.pi * x)))
