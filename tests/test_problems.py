"""
Tests for objectives, search spaces and bounded problems.
"""

import numpy as np
import pytest

from meta_opt.exceptions import ConfigurationError
from meta_opt.optimisation.objectives import CallableObjective, RastriginObjective, create_objective
from meta_opt.optimisation.problems import BoundedProblem, SearchSpace


class TestRastriginObjective:
    """Test the Rastrigin benchmark function."""

    @pytest.mark.parametrize("dims", [1, 2, 3, 10])
    def test_global_minimum_at_origin(self, dims):
        """f(0, ..., 0) = 0 in any dimension."""
        assert RastriginObjective().evaluate(np.zeros(dims)) == pytest.approx(0.0, abs=1e-12)

    def test_integer_lattice_points(self):
        """At integer points cos(2*pi*x) = 1, so f reduces to sum(x^2)."""
        f = RastriginObjective()
        assert f(np.array([1.0, 1.0])) == pytest.approx(2.0)
        assert f(np.array([2.0, -1.0, 0.0])) == pytest.approx(5.0)

        print("✅ Rastrigin lattice values correct")

    def test_non_negative_on_bounds(self, rng):
        f = RastriginObjective()
        points = rng.uniform(-5.12, 5.12, size=(200, 3))
        assert all(f(p) >= 0.0 for p in points)

    def test_amplitude_parameter(self):
        x = np.array([0.5, 0.5])
        assert RastriginObjective(a=0.0)(x) == pytest.approx(0.5)
        assert RastriginObjective(a=10.0)(x) == pytest.approx(40.5)

    def test_non_finite_input_returns_nan(self):
        assert np.isnan(RastriginObjective()(np.array([np.nan, 0.0])))
        assert np.isnan(RastriginObjective()(np.array([np.inf, 0.0])))

    def test_does_not_modify_input(self):
        x = np.array([1.5, -2.5])
        RastriginObjective()(x)
        np.testing.assert_array_equal(x, [1.5, -2.5])


class TestCallableObjective:
    """Test wrapping user functions as objectives."""

    def test_wraps_function(self):
        sphere = CallableObjective(lambda x: float(np.sum(x ** 2)), name="sphere")
        assert sphere(np.array([1.0, 2.0])) == pytest.approx(5.0)
        assert sphere.name == "sphere"

    def test_function_receives_copy(self):
        """The wrapped function cannot alter the caller's position."""

        def mutating(x):
            x[:] = 100.0
            return 0.0

        position = np.array([1.0, 2.0])
        CallableObjective(mutating)(position)
        np.testing.assert_array_equal(position, [1.0, 2.0])

    def test_rejects_non_callable(self):
        with pytest.raises(TypeError):
            CallableObjective(42)


class TestCreateObjective:
    def test_default_is_rastrigin(self):
        assert isinstance(create_objective(None), RastriginObjective)
        assert isinstance(create_objective({"type": "Rastrigin", "a": 5}), RastriginObjective)
        assert create_objective({"type": "rastrigin", "a": 5}).a == 5.0

    def test_unknown_objective(self):
        with pytest.raises(ConfigurationError, match="Unknown objective"):
            create_objective({"type": "ackley"})

    def test_invalid_parameters(self):
        with pytest.raises(ConfigurationError):
            create_objective({"type": "rastrigin", "b": 1})


class TestSearchSpace:
    """Test search space construction, sampling and clamping."""

    def test_defaults(self):
        space = SearchSpace(dimensions=3)
        assert space.lower_bound == -5.12
        assert space.upper_bound == 5.12
        assert space.width == pytest.approx(10.24)

    @pytest.mark.parametrize("kwargs", [
        {"dimensions": 1},
        {"dimensions": 4},
        {"dimensions": 2, "lower_bound": 1.0, "upper_bound": 1.0},
        {"dimensions": 2, "lower_bound": 2.0, "upper_bound": -2.0},
        {"dimensions": 2, "lower_bound": -np.inf},
    ])
    def test_invalid_space(self, kwargs):
        with pytest.raises(ConfigurationError):
            SearchSpace(**kwargs)

    def test_sampling_within_bounds(self, rng):
        space = SearchSpace(dimensions=2, lower_bound=-1.0, upper_bound=2.0)
        points = space.sample_many(500, rng)

        assert points.shape == (500, 2)
        assert np.all(points >= -1.0) and np.all(points <= 2.0)
        assert space.sample(rng).shape == (2,)

        print("✅ Sampling stays within bounds")

    def test_sampling_is_reproducible(self):
        space = SearchSpace(dimensions=3)
        a = space.sample_many(10, np.random.default_rng(3))
        b = space.sample_many(10, np.random.default_rng(3))
        np.testing.assert_array_equal(a, b)

    def test_clamp_projects_and_is_idempotent(self):
        space = SearchSpace(dimensions=3)
        clamped = space.clamp(np.array([-10.0, 0.5, 7.0]))

        np.testing.assert_array_equal(clamped, [-5.12, 0.5, 5.12])
        np.testing.assert_array_equal(space.clamp(clamped), clamped)

    def test_contains(self):
        space = SearchSpace(dimensions=2)
        assert space.contains(np.array([5.12, -5.12]))
        assert not space.contains(np.array([5.13, 0.0]))

    def test_immutable(self):
        space = SearchSpace(dimensions=2)
        with pytest.raises(AttributeError):
            space.dimensions = 3


class TestBoundedProblem:
    """Test evaluation through the search space."""

    def test_evaluates_clamped_position(self, problem_2d):
        """Out-of-bounds points are evaluated at their projection."""
        expected = RastriginObjective()(np.array([5.12, -5.12]))
        assert problem_2d.evaluate(np.array([10.0, -10.0])) == pytest.approx(expected)

    def test_non_finite_position(self, problem_2d):
        assert np.isnan(problem_2d.evaluate(np.array([np.nan, 1.0])))

    def test_evaluate_many(self, problem_3d):
        values = problem_3d.evaluate_many(np.zeros((4, 3)))
        assert values.shape == (4,)
        np.testing.assert_allclose(values, 0.0, atol=1e-12)

    def test_dimensions(self, problem_2d, problem_3d):
        assert problem_2d.dimensions == 2
        assert problem_3d.dimensions == 3
