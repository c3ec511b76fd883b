"""
Tests for global best tracking and best-N solution tracking.
"""

import numpy as np
import pytest

from meta_opt.exceptions import NumericDivergenceError
from meta_opt.optimisation.runners import BestSolutionsTracker, BestTracker
from meta_opt.optimisation.utils import Candidate, Population


def _population(*entries):
    """Population from (x, fitness) pairs on the line y = 0."""
    return Population(Candidate(position=np.array([x, 0.0]), fitness=f) for x, f in entries)


class TestBestTracker:
    """Test global best updates and the fitness history."""

    def test_initialize(self):
        tracker = BestTracker()
        best = tracker.initialize(_population((0.0, 3.0), (1.0, 1.0), (2.0, 2.0)))

        assert best.fitness == 1.0
        assert tracker.best is best
        assert tracker.history == (1.0,)
        assert tracker.statistics[0]["iteration"] == 0

    def test_best_only_replaced_on_strict_improvement(self):
        tracker = BestTracker()
        tracker.initialize(_population((0.0, 2.0), (1.0, 5.0)))
        first_best = tracker.best

        assert tracker.update(_population((3.0, 2.0), (4.0, 6.0)), 1) is False
        assert tracker.best is first_best

        assert tracker.update(_population((5.0, 1.5), (6.0, 9.0)), 2) is True
        assert tracker.best_fitness == 1.5
        assert tracker.best.position[0] == 5.0

        print("✅ Ties keep the earliest global best")

    def test_history_is_non_increasing(self):
        tracker = BestTracker()
        tracker.initialize(_population((0.0, 4.0)))
        for i, f in enumerate([5.0, 3.0, 3.5, 1.0, 2.0], start=1):
            tracker.update(_population((float(i), f)), i)

        assert tracker.history == (4.0, 4.0, 3.0, 3.0, 1.0, 1.0)
        assert all(b <= a for a, b in zip(tracker.history, tracker.history[1:]))

    def test_statistics_entries(self):
        tracker = BestTracker()
        tracker.initialize(_population((0.0, 4.0), (1.0, 6.0)))
        tracker.update(_population((0.0, 1.0), (1.0, 3.0)), 1)

        entry = tracker.statistics[1]
        assert entry["iteration"] == 1
        assert entry["best_fitness"] == 1.0
        assert entry["worst_fitness"] == 3.0
        assert entry["mean_fitness"] == pytest.approx(2.0)
        assert entry["improvement"] == pytest.approx(3.0)

    def test_non_finite_population_rejected(self):
        tracker = BestTracker()
        tracker.initialize(_population((0.0, 4.0)))

        with pytest.raises(NumericDivergenceError):
            tracker.update(_population((1.0, np.nan), (2.0, 0.5)), 1)

        assert tracker.history == (4.0,)
        assert tracker.best_fitness == 4.0

    def test_non_finite_initial_population(self):
        with pytest.raises(NumericDivergenceError):
            BestTracker().initialize(_population((0.0, np.inf)))

    def test_update_before_initialize(self):
        with pytest.raises(RuntimeError):
            BestTracker().update(_population((0.0, 1.0)), 1)

    def test_convergence_info(self):
        tracker = BestTracker()
        tracker.initialize(_population((0.0, 10.0)))
        assert tracker.convergence_info() == {'converged': False, 'reason': 'Insufficient iterations'}

        for i in range(1, 4):
            tracker.update(_population((0.0, 10.0 - i)), i)
        for i in range(4, 10):
            tracker.update(_population((0.0, 7.0)), i)

        info = tracker.convergence_info()
        assert info['converged'] is True
        assert info['final_iteration'] == 9
        assert info['final_fitness'] == 7.0


class TestBestSolutionsTracker:
    """Test tracking of the best N distinct solutions."""

    def test_keeps_best_n_sorted(self):
        tracker = BestSolutionsTracker(max_solutions=3)
        tracker.add_population(_population((0.0, 5.0), (1.0, 4.0), (2.0, 9.0)), 0)
        tracker.add_population(_population((3.0, 1.0), (4.0, 7.0)), 1)

        fitness = [s['fitness'] for s in tracker.get_best_solutions()]
        assert fitness == [1.0, 4.0, 5.0]
        assert tracker.get_best_solutions()[0]['iteration_found'] == 1

        print(f"✅ Tracked {tracker.get_count()} best solutions")

    def test_duplicates_ignored(self):
        tracker = BestSolutionsTracker(max_solutions=5)
        tracker.add_population(_population((0.0, 1.0)), 0)
        tracker.add_population(_population((0.0, 1.0), (1.0, 2.0)), 1)

        assert tracker.get_count() == 2
        assert tracker.get_best_solutions()[0]['iteration_found'] == 0

    def test_non_finite_skipped(self):
        tracker = BestSolutionsTracker()
        tracker.add_population(_population((0.0, np.nan), (1.0, 2.0)), 0)
        assert tracker.get_count() == 1

    def test_returned_positions_are_copies(self):
        tracker = BestSolutionsTracker()
        tracker.add_population(_population((0.0, 1.0)), 0)

        solutions = tracker.get_best_solutions()
        solutions[0]['fitness'] = -1.0
        assert tracker.get_best_solutions()[0]['fitness'] == 1.0
