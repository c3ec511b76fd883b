import logging

import numpy as np

from ..config.config_manager import AlgorithmConfig, BAConfig, PSOConfig
from ..problems.bounded_problem import BoundedProblem
from .population import Candidate, Population

logger = logging.getLogger(__name__)


class PopulationBuilder:
    """
    Build the initial population of a run.

    Positions are drawn uniformly from the search space and evaluated, then
    each algorithm's auxiliary fields are initialised:

    - PSO: zero velocity, personal best = starting position
    - BA: zero velocity, frequency uniform in [frequency_min, frequency_max],
      configured pulse rate and loudness
    - GA, DE, FA, GWO: position and fitness only
    """

    def __init__(self, problem: BoundedProblem):
        self.problem = problem

    def build_initial_population(self, algorithm_config: AlgorithmConfig,
                                 rng: np.random.Generator) -> Population:
        """
        Create and evaluate ``algorithm_config.size`` candidates.

        Args:
            algorithm_config: Typed algorithm configuration.
            rng: Random generator of the run; sampling consumes from it.

        Returns:
            Population: Freshly evaluated initial population.
        """
        size = algorithm_config.size
        dims = self.problem.dimensions

        positions = self.problem.space.sample_many(size, rng)
        fitness = self.problem.evaluate_many(positions)

        candidates = []
        for position, value in zip(positions, fitness, strict=True):
            if isinstance(algorithm_config, PSOConfig):
                candidate = Candidate(
                    position=position,
                    fitness=value,
                    velocity=np.zeros(dims),
                    personal_best_position=position,
                    personal_best_fitness=value,
                )
            elif isinstance(algorithm_config, BAConfig):
                candidate = Candidate(
                    position=position,
                    fitness=value,
                    velocity=np.zeros(dims),
                    frequency=float(rng.uniform(algorithm_config.frequency_min,
                                                algorithm_config.frequency_max)),
                    pulse_rate=algorithm_config.pulse_rate,
                    loudness=algorithm_config.loudness,
                )
            else:
                candidate = Candidate(position=position, fitness=value)
            candidates.append(candidate)

        population = Population(candidates)
        logger.debug(
            "🔧 Initial %s population: %d candidates, best fitness %.6f",
            algorithm_config.algorithm, len(population), population.best().fitness,
        )
        return population
