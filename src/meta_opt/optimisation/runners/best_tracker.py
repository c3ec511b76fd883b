import logging
from typing import Any

import numpy as np

from ...exceptions import NumericDivergenceError
from ..utils.population import Candidate, Population

logger = logging.getLogger(__name__)


class BestTracker:
    """
    Global best candidate and fitness history of one run.

    The history holds one entry per completed iteration, including
    iteration 0 (the initial population), so ``len(history) == iteration
    + 1``. Each entry is the best fitness seen so far, which makes the
    history non-increasing. The global best only changes on a strict
    improvement, so on ties the earliest candidate is kept.

    Alongside the history the tracker records per-iteration population
    statistics (best/worst/mean/std of that iteration's population and the
    improvement of the running best).
    """

    def __init__(self):
        self._best: Candidate | None = None
        self._history: list[float] = []
        self._statistics: list[dict[str, Any]] = []

    @property
    def best(self) -> Candidate | None:
        return self._best

    @property
    def best_fitness(self) -> float:
        return self._best.fitness if self._best is not None else float("inf")

    @property
    def history(self) -> tuple[float, ...]:
        return tuple(self._history)

    @property
    def statistics(self) -> list[dict[str, Any]]:
        return [entry.copy() for entry in self._statistics]

    def initialize(self, population: Population) -> Candidate:
        """Reset the tracker from the initial population."""
        self._check_finite(population, iteration=0)
        self._best = population.best()
        self._history = [self._best.fitness]
        self._statistics = [self._statistics_entry(population, 0, improvement=0.0)]
        return self._best

    def update(self, population: Population, iteration: int) -> bool:
        """
        Fold a committed population into the running best.

        Returns:
            bool: True if the global best improved.

        Raises:
            NumericDivergenceError: If any fitness in ``population`` is not
                finite. The tracker is left unchanged.
        """
        if self._best is None:
            raise RuntimeError("BestTracker.update() called before initialize()")
        self._check_finite(population, iteration)

        previous = self._best.fitness
        candidate = population.best()
        improved = candidate.fitness < previous
        if improved:
            self._best = candidate

        self._history.append(self._best.fitness)
        self._statistics.append(
            self._statistics_entry(population, iteration, improvement=previous - self._best.fitness)
        )
        return improved

    def convergence_info(self, window: int = 5, tolerance: float = 1e-6) -> dict[str, Any]:
        """
        Basic convergence analysis of the history.

        The run counts as converged when the running best improved by less
        than ``tolerance`` over the last ``window`` iterations.
        """
        if len(self._history) <= window:
            return {'converged': False, 'reason': 'Insufficient iterations'}

        recent_improvement = self._history[-window - 1] - self._history[-1]
        return {
            'converged': abs(recent_improvement) < tolerance,
            'recent_improvement': recent_improvement,
            'final_iteration': len(self._history) - 1,
            'final_fitness': self._history[-1],
        }

    @staticmethod
    def _check_finite(population: Population, iteration: int):
        if not population.is_finite():
            bad = [i for i, value in enumerate(population.fitness()) if not np.isfinite(value)]
            raise NumericDivergenceError(
                f"Non-finite fitness at iteration {iteration} for candidate(s) {bad}"
            )

    @staticmethod
    def _statistics_entry(population: Population, iteration: int, improvement: float) -> dict[str, Any]:
        return {'iteration': iteration, **population.statistics(), 'improvement': improvement}


class BestSolutionsTracker:
    """
    Tracks the best N unique solutions seen during a single run.
    Maintains a list of solution dictionaries sorted by fitness.
    """

    def __init__(self, max_solutions: int = 5):
        self.max_solutions = max_solutions
        self.best_solutions = []

    def add_population(self, population: Population, iteration: int):
        """
        Add up to max_solutions candidates from a population, ensuring
        uniqueness and keeping only the best N overall.
        """
        ranked = sorted(
            (c for c in population if np.isfinite(c.fitness)),
            key=lambda c: c.fitness,
        )[:self.max_solutions]

        for candidate in ranked:
            is_duplicate = any(
                np.array_equal(existing['position'], candidate.position)
                for existing in self.best_solutions
            )
            if not is_duplicate:
                self.best_solutions.append({
                    'position': candidate.copy_position(),
                    'fitness': candidate.fitness,
                    'iteration_found': iteration,
                })

        # Sort and trim to max_solutions
        self.best_solutions.sort(key=lambda x: x['fitness'])
        if len(self.best_solutions) > self.max_solutions:
            self.best_solutions = self.best_solutions[:self.max_solutions]

    def get_best_solutions(self) -> list[dict]:
        """Get copy of best solutions list."""
        return [sol.copy() for sol in self.best_solutions]

    def get_count(self) -> int:
        return len(self.best_solutions)
