import numpy as np

from ..config.config_manager import GWOConfig
from ..utils.population import Candidate, Population
from .base import OptimizerStrategy, StepResult

EXPLORATION_PROBABILITY = 0.5


def control_parameter(a0: float, iteration: int, max_iterations: int) -> float:
    """Linearly decreasing ``a``: a0 at iteration 0, 0 at ``max_iterations``."""
    return max(0.0, a0 * (1.0 - iteration / max_iterations))


class GWOStrategy(OptimizerStrategy):
    """
    Grey Wolf Optimizer.

    The three best wolves of the previous population are the leaders
    alpha, beta and delta; they are fixed for the whole step. For the t-th
    step ``a = a0 * (1 - t / max_iterations)`` and, per wolf and dimension
    with r1, r2 ~ U(0, 1):

        A = 2*a*r1 - a,   C = 2*r2
        X_k = leader_k - A * |C * leader_k - x|      (k = alpha, beta, delta)
        x'  = (X_alpha + X_beta + X_delta) / 3

    With probability 0.5 the dimension instead takes an exploration step
    ``x + a * (U(0, 1) - 0.5) * (U - L)``. Positions are clamped and
    re-evaluated. The current ``a`` is published in aux.
    """

    name = "GWO"
    config_class = GWOConfig

    def initial_aux(self, population, params: GWOConfig):
        return {"iteration": 0, "a": params.a, **self.leaders_aux(population)}

    @staticmethod
    def leaders_aux(population: Population) -> dict:
        order = np.argsort(population.fitness(), kind="stable")[:3]
        return {"leader_indices": [int(i) for i in order]}

    def _step(self, population, aux, params: GWOConfig, rng):
        iteration = aux["iteration"] + 1
        a = control_parameter(params.a, iteration, params.max_iterations)

        positions = population.positions()
        leaders = positions[np.argsort(population.fitness(), kind="stable")[:3]]
        size, dims = positions.shape
        width = self.problem.space.width

        new_candidates = []
        for i in range(size):
            x = positions[i]
            r1 = rng.random(dims)
            r2 = rng.random(dims)
            A = 2.0 * a * r1 - a
            C = 2.0 * r2

            guidance = [leader - A * np.abs(C * leader - x) for leader in leaders]
            hunted = np.mean(guidance, axis=0)

            explore = rng.random(dims) < EXPLORATION_PROBABILITY
            walk = x + a * (rng.random(dims) - 0.5) * width

            new_position = self.clamp(np.where(explore, walk, hunted))
            new_candidates.append(Candidate(position=new_position, fitness=self.evaluate(new_position)))

        new_population = Population(new_candidates)
        aux.update({"iteration": iteration, "a": a, **self.leaders_aux(new_population)})
        return StepResult(new_population, aux)
