import numpy as np

from ..config.config_manager import DEConfig
from ..utils.population import Candidate, Population
from .base import OptimizerStrategy, StepResult


class DEStrategy(OptimizerStrategy):
    """
    Differential Evolution with binomial crossover.

    For every target i:

        a, b, c   three distinct indices, all different from i
        mutant    x_c + F * (x_a - x_b)
        trial     per dimension the mutant's value with probability CR,
                  plus one uniformly chosen dimension always taken from
                  the mutant
        selection trial replaces the target only if strictly better

    Donors are read from the previous population, so the order in which
    targets are processed does not matter. A target's fitness can never
    get worse from one step to the next.
    """

    name = "DE"
    config_class = DEConfig

    def _step(self, population, aux, params: DEConfig, rng):
        size = len(population)
        positions = population.positions()
        new_candidates = []

        for i, target in enumerate(population):
            others = np.delete(np.arange(size), i)
            a, b, c = rng.choice(others, size=3, replace=False)

            mutant = positions[c] + params.mutation_factor * (positions[a] - positions[b])

            dims = target.dimensions
            cross = rng.random(dims) < params.crossover_rate
            cross[rng.integers(dims)] = True
            trial = self.clamp(np.where(cross, mutant, target.position))
            trial_fitness = self.evaluate(trial)

            if trial_fitness < target.fitness:
                new_candidates.append(Candidate(position=trial, fitness=trial_fitness))
            else:
                new_candidates.append(target)

        aux["iteration"] += 1
        return StepResult(Population(new_candidates), aux)
