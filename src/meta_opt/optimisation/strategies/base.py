"""
Base class for the population update strategies.

Every algorithm implements one method:

    step(population, aux, params, rng) -> StepResult(population, aux)

``population`` is the committed population of the previous iteration and
is never modified. ``aux`` is a small dictionary of algorithm state that
outlives a single step (global best for PSO/FA/BA, the control parameter
``a`` for GWO, the iteration counter for all). The strategy returns a new
population of exactly the same size plus a new aux dictionary, and keeps
no reference to either between calls.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from ..config.config_manager import AlgorithmConfig
from ..problems.bounded_problem import BoundedProblem
from ..utils.population import Candidate, Population


@dataclass(frozen=True)
class StepResult:
    """Output of one strategy step."""

    population: Population
    aux: dict[str, Any] = field(default_factory=dict)


class OptimizerStrategy(ABC):
    """
    Interchangeable update rule operating on a Population.

    Attributes:
        name: Short algorithm identifier ("PSO", "GA", ...).
        config_class: Configuration dataclass accepted by ``step``.
        problem: Bounded objective used to clamp and evaluate candidates.
    """

    name: str = "BASE"
    config_class: type[AlgorithmConfig] = AlgorithmConfig

    def __init__(self, problem: BoundedProblem):
        self.problem = problem

    def initial_aux(self, population: Population, params: AlgorithmConfig) -> dict[str, Any]:
        """Aux state that accompanies the initial population."""
        return {"iteration": 0}

    def step(self, population: Population, aux: dict[str, Any], params: AlgorithmConfig,
             rng: np.random.Generator) -> StepResult:
        """
        Produce the next population.

        Raises:
            TypeError: If ``params`` is not this strategy's configuration type.
        """
        if not isinstance(params, self.config_class):
            raise TypeError(
                f"{self.name} expects {self.config_class.__name__}, got {type(params).__name__}"
            )
        result = self._step(population, dict(aux), params, rng)
        if len(result.population) != len(population):
            raise RuntimeError(
                f"{self.name} produced {len(result.population)} candidates, expected {len(population)}"
            )
        return result

    @abstractmethod
    def _step(self, population: Population, aux: dict[str, Any], params: AlgorithmConfig,
              rng: np.random.Generator) -> StepResult:
        pass

    def clamp(self, position: np.ndarray) -> np.ndarray:
        return self.problem.space.clamp(position)

    def evaluate(self, position: np.ndarray) -> float:
        return self.problem.evaluate(position)

    @staticmethod
    def global_best_aux(population: Population) -> dict[str, Any]:
        best = population.best()
        return {
            "global_best_position": best.copy_position(),
            "global_best_fitness": best.fitness,
        }

    @staticmethod
    def update_global_best(aux: dict[str, Any], candidate: Candidate) -> bool:
        """Replace the aux global best when ``candidate`` is strictly better."""
        if candidate.fitness < aux["global_best_fitness"]:
            aux["global_best_position"] = candidate.copy_position()
            aux["global_best_fitness"] = candidate.fitness
            return True
        return False
