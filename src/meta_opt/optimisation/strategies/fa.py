import numpy as np

from ..config.config_manager import FAConfig
from ..utils.population import Candidate, Population
from .base import OptimizerStrategy, StepResult


class FAStrategy(OptimizerStrategy):
    """
    Firefly Algorithm with an all-pairs sweep.

    For every ordered pair (i, j) where j is brighter (lower fitness) than
    i, firefly i moves towards j:

        beta = beta0 * exp(-gamma * |x_i - x_j|^2)
        x_i  = clamp(x_i + beta * (x_j - x_i) + alpha * U(-1, 1))

    Brightness uses live values: the working copy of positions and fitness
    is updated in place right after each move, so later comparisons in the
    same sweep already see it. This in-place update is confined to the
    working copy; the committed population is only replaced when the sweep
    is complete. The global best in aux is updated whenever a moved firefly
    improves on it.
    """

    name = "FA"
    config_class = FAConfig

    def initial_aux(self, population, params):
        return {"iteration": 0, **self.global_best_aux(population)}

    def _step(self, population, aux, params: FAConfig, rng):
        positions = population.positions()
        brightness = population.fitness()
        size, dims = positions.shape

        for i in range(size):
            for j in range(size):
                if not brightness[j] < brightness[i]:
                    continue

                distance_sq = float(np.sum((positions[i] - positions[j]) ** 2))
                beta = params.beta0 * np.exp(-params.gamma * distance_sq)
                step = beta * (positions[j] - positions[i]) + params.alpha * rng.uniform(-1.0, 1.0, dims)

                positions[i] = self.clamp(positions[i] + step)
                brightness[i] = self.evaluate(positions[i])

                if brightness[i] < aux["global_best_fitness"]:
                    aux["global_best_position"] = positions[i].copy()
                    aux["global_best_fitness"] = float(brightness[i])

        new_candidates = [
            Candidate(position=position, fitness=value)
            for position, value in zip(positions, brightness, strict=True)
        ]
        aux["iteration"] += 1
        return StepResult(Population(new_candidates), aux)
