import logging

import numpy as np

from ..objectives.base import BaseObjective
from .search_space import SearchSpace

logger = logging.getLogger(__name__)


class BoundedProblem:
    """
    An objective restricted to a search space.

    Every evaluation goes through ``SearchSpace.clamp`` first, so the
    objective is only ever asked about points inside the bounds. Positions
    with non-finite components are a caller error: they evaluate to NaN and
    are not retried.

    Attributes:
        space (SearchSpace): Bounds and dimensionality.
        objective (BaseObjective): Fitness function (minimised).
    """

    def __init__(self, space: SearchSpace, objective: BaseObjective):
        self.space = space
        self.objective = objective

    @property
    def dimensions(self) -> int:
        return self.space.dimensions

    def evaluate(self, position: np.ndarray) -> float:
        x = np.asarray(position, dtype=float)
        if not np.all(np.isfinite(x)):
            logger.warning("Non-finite position %s passed to evaluate()", x)
            return float("nan")
        return float(self.objective.evaluate(self.space.clamp(x)))

    def evaluate_many(self, positions: np.ndarray) -> np.ndarray:
        """Evaluate every row of an (n, d) array."""
        return np.array([self.evaluate(row) for row in np.atleast_2d(positions)], dtype=float)

    def __repr__(self) -> str:
        return (
            f"BoundedProblem(objective={self.objective.name!r}, d={self.space.dimensions}, "
            f"bounds=[{self.space.lower_bound}, {self.space.upper_bound}])"
        )
