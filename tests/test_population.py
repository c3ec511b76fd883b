"""
Tests for the Candidate/Population data model and initial population builder.
"""

import dataclasses

import numpy as np
import pytest

from meta_opt.optimisation.config import BAConfig, DEConfig, GAConfig, GWOConfig, PSOConfig
from meta_opt.optimisation.utils import Candidate, Population, PopulationBuilder


def _population(fitness_values):
    return Population(
        Candidate(position=np.array([float(i), 0.0]), fitness=f)
        for i, f in enumerate(fitness_values)
    )


class TestCandidate:
    """Test candidate immutability and helpers."""

    def test_position_is_read_only(self):
        candidate = Candidate(position=np.array([1.0, 2.0]), fitness=3.0)

        with pytest.raises(ValueError):
            candidate.position[0] = 5.0
        with pytest.raises(dataclasses.FrozenInstanceError):
            candidate.fitness = 0.0

        print("✅ Candidate is immutable")

    def test_position_not_aliased(self):
        """The candidate keeps its own copy of the array it was built from."""
        source = np.array([1.0, 2.0])
        candidate = Candidate(position=source, fitness=0.0)
        source[0] = 99.0

        assert candidate.position[0] == 1.0

    def test_replace_returns_new_candidate(self):
        candidate = Candidate(position=np.array([1.0, 2.0]), fitness=3.0, velocity=np.zeros(2))
        moved = candidate.replace(position=np.array([0.0, 0.0]), fitness=0.0)

        assert candidate.fitness == 3.0
        assert moved.fitness == 0.0
        np.testing.assert_array_equal(moved.velocity, [0.0, 0.0])

    def test_copy_position_is_writable(self):
        candidate = Candidate(position=np.array([1.0, 2.0]), fitness=3.0)
        copy = candidate.copy_position()
        copy[0] = 10.0

        assert candidate.position[0] == 1.0

    def test_equality_by_value(self):
        a = Candidate(position=np.array([1.0, 2.0]), fitness=3.0)
        b = Candidate(position=np.array([1.0, 2.0]), fitness=3.0)
        c = Candidate(position=np.array([1.0, 2.5]), fitness=3.0)

        assert a == b
        assert a != c

    def test_to_dict_only_includes_set_fields(self):
        data = Candidate(position=np.array([1.0, 2.0]), fitness=3.0, loudness=0.5).to_dict()
        assert data == {"position": [1.0, 2.0], "fitness": 3.0, "loudness": 0.5}


class TestPopulation:
    """Test population queries."""

    def test_empty_population_rejected(self):
        with pytest.raises(ValueError):
            Population([])

    def test_sequence_behaviour(self):
        population = _population([3.0, 1.0, 2.0])

        assert len(population) == 3
        assert population[1].fitness == 1.0
        assert [c.fitness for c in population] == [3.0, 1.0, 2.0]
        assert population.dimensions == 2

    def test_best_first_on_ties(self):
        population = _population([2.0, 1.0, 1.0])

        assert population.best_index() == 1
        assert population.best() is population[1]

        print("✅ Ties resolved to the first candidate")

    def test_positions_is_copy(self):
        population = _population([1.0, 2.0])
        positions = population.positions()
        positions[0, 0] = 50.0

        assert population[0].position[0] == 0.0

    def test_is_finite(self):
        assert _population([1.0, 2.0]).is_finite()
        assert not _population([1.0, np.nan]).is_finite()
        assert not _population([np.inf, 2.0]).is_finite()

    def test_statistics(self):
        stats = _population([1.0, 2.0, 3.0]).statistics()

        assert stats["best_fitness"] == 1.0
        assert stats["worst_fitness"] == 3.0
        assert stats["mean_fitness"] == pytest.approx(2.0)
        assert stats["std_fitness"] == pytest.approx(np.std([1.0, 2.0, 3.0]))
        assert stats["population_size"] == 3


class TestPopulationBuilder:
    """Test initial population creation for each algorithm."""

    @pytest.mark.parametrize("config", [
        PSOConfig(num_particles=7, dimensions=2),
        GAConfig(population_size=9, dimensions=2),
        DEConfig(population_size=5, dimensions=2),
        GWOConfig(population_size=4, dimensions=2),
        BAConfig(population_size=6, dimensions=2),
    ])
    def test_size_bounds_and_fitness(self, config, problem_2d, rng):
        population = PopulationBuilder(problem_2d).build_initial_population(config, rng)

        assert len(population) == config.size
        for candidate in population:
            assert problem_2d.space.contains(candidate.position)
            assert candidate.fitness == pytest.approx(problem_2d.evaluate(candidate.position))

    def test_pso_auxiliary_state(self, problem_2d, rng):
        population = PopulationBuilder(problem_2d).build_initial_population(
            PSOConfig(num_particles=5, dimensions=2), rng
        )

        for particle in population:
            np.testing.assert_array_equal(particle.velocity, np.zeros(2))
            np.testing.assert_array_equal(particle.personal_best_position, particle.position)
            assert particle.personal_best_fitness == particle.fitness

        print("✅ PSO particles start with zero velocity")

    def test_ba_auxiliary_state(self, problem_2d, rng):
        config = BAConfig(population_size=20, dimensions=2, frequency_min=0.5, frequency_max=1.5,
                          pulse_rate=0.3, loudness=0.8)
        population = PopulationBuilder(problem_2d).build_initial_population(config, rng)

        for bat in population:
            assert 0.5 <= bat.frequency <= 1.5
            assert bat.pulse_rate == 0.3
            assert bat.loudness == 0.8
            np.testing.assert_array_equal(bat.velocity, np.zeros(2))

    def test_plain_candidates_for_other_algorithms(self, problem_2d, rng):
        population = PopulationBuilder(problem_2d).build_initial_population(
            GAConfig(population_size=4, dimensions=2), rng
        )
        assert all(c.velocity is None and c.loudness is None for c in population)

    def test_reproducible_with_seed(self, problem_3d):
        config = DEConfig(population_size=6, dimensions=3)
        builder = PopulationBuilder(problem_3d)

        a = builder.build_initial_population(config, np.random.default_rng(11))
        b = builder.build_initial_population(config, np.random.default_rng(11))

        assert a == b
