"""Shared fixtures for the optimisation tests."""

import numpy as np
import pytest

from meta_opt.optimisation.objectives import RastriginObjective
from meta_opt.optimisation.problems import BoundedProblem, SearchSpace
from meta_opt.optimisation.runners import ManualScheduler, RunController
from meta_opt.optimisation.strategies import get_strategy
from meta_opt.optimisation.utils import PopulationBuilder


@pytest.fixture
def rng():
    """Seeded random generator."""
    return np.random.default_rng(42)


@pytest.fixture
def space_2d():
    return SearchSpace(dimensions=2)


@pytest.fixture
def problem_2d(space_2d):
    """2-D Rastrigin on the default [-5.12, 5.12] bounds."""
    return BoundedProblem(space_2d, RastriginObjective())


@pytest.fixture
def problem_3d():
    return BoundedProblem(SearchSpace(dimensions=3), RastriginObjective())


@pytest.fixture
def make_initial_state():
    """
    Factory building (strategy, population, aux) for an algorithm
    configuration on a given problem.
    """

    def _make(config, problem, rng):
        strategy = get_strategy(config.algorithm)(problem)
        population = PopulationBuilder(problem).build_initial_population(config, rng)
        aux = strategy.initial_aux(population, config)
        return strategy, population, aux

    return _make


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def controller(scheduler):
    """Run controller on a manual scheduler, no delay between steps."""
    return RunController(scheduler=scheduler, step_delay=0.0, progress_frequency=5)
