import numpy as np

from ..config.config_manager import GAConfig
from ..utils.population import Candidate, Population
from .base import OptimizerStrategy, StepResult

# Added to every roulette weight so a fitness of exactly 0 (the Rastrigin
# optimum) gets a large but finite weight.
ROULETTE_EPSILON = 1e-12


def roulette_weights(fitness: np.ndarray) -> np.ndarray:
    """
    Inverse-fitness selection weights, 1 / (f + eps).

    Negative values (possible with custom objectives) are shifted so the
    smallest fitness maps to zero before inverting.
    """
    f = np.asarray(fitness, dtype=float)
    shift = min(0.0, float(np.min(f)))
    return 1.0 / (f - shift + ROULETTE_EPSILON)


class GAStrategy(OptimizerStrategy):
    """
    Real-coded generational Genetic Algorithm.

    1. Selection: N parents drawn with replacement by inverse-fitness
       roulette.
    2. Crossover: parents paired in order (0-1, 2-3, ...; with odd N the
       last parent is paired with the first). With probability
       ``crossover_rate`` the pair swaps tails after a random locus,
       otherwise both parents are copied.
    3. Mutation: every gene mutates with probability ``mutation_rate`` by
       adding U(-1, 1) noise, then the child is clamped.

    The offspring replace the whole population; no elitism.
    """

    name = "GA"
    config_class = GAConfig

    def _step(self, population, aux, params: GAConfig, rng):
        size = len(population)
        positions = population.positions()

        parents = self._select_parents(positions, population.fitness(), rng)
        offspring = self._crossover(parents, params.crossover_rate, rng)[:size]

        new_candidates = []
        for child in offspring:
            child = self._mutate(child, params.mutation_rate, rng)
            new_candidates.append(Candidate(position=child, fitness=self.evaluate(child)))

        aux["iteration"] += 1
        return StepResult(Population(new_candidates), aux)

    def _select_parents(self, positions, fitness, rng):
        weights = roulette_weights(fitness)
        cumulative = np.cumsum(weights)
        picks = rng.random(len(positions)) * cumulative[-1]
        indices = np.minimum(np.searchsorted(cumulative, picks), len(positions) - 1)
        return positions[indices]

    def _crossover(self, parents, crossover_rate, rng):
        dims = parents.shape[1]
        offspring = []

        for i in range(0, len(parents), 2):
            parent1 = parents[i]
            parent2 = parents[i + 1] if i + 1 < len(parents) else parents[0]

            if rng.random() < crossover_rate:
                locus = int(rng.integers(1, dims))
                offspring.append(np.concatenate([parent1[:locus], parent2[locus:]]))
                offspring.append(np.concatenate([parent2[:locus], parent1[locus:]]))
            else:
                offspring.append(parent1.copy())
                offspring.append(parent2.copy())

        return offspring

    def _mutate(self, child, mutation_rate, rng):
        mask = rng.random(child.size) < mutation_rate
        noise = rng.uniform(-1.0, 1.0, size=child.size)
        return self.clamp(np.where(mask, child + noise, child))
