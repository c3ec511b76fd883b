"""
Headless batch runner for metaheuristic optimisation.

This module drives complete runs without a presentation layer. A run is
executed by a ``RunController`` on a ``ManualScheduler``, so the same
step-by-step code path is used as in interactive sessions, but the
scheduler queue is drained synchronously.

It handles:

- Configuration management via ``OptimizationConfigManager``
- Objective and search space creation
- Single and multi-run optimisation with reproducible seeds
- Result processing and statistical analysis

Usage:
```python
from meta_opt.optimisation.config import OptimizationConfigManager
from meta_opt.optimisation.runners import BatchRunner

config_manager = OptimizationConfigManager('configs/pso.yaml')
runner = BatchRunner(config_manager)

result = runner.optimize(seed=42)
print(f"Best fitness: {result.best_fitness}")
print(f"Best position: {result.best_position}")

multi = runner.optimize_multi_run(num_runs=10, base_seed=0)
print(multi.statistical_summary['fitness_mean'])
```
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from ..config.config_manager import OptimizationConfigManager
from ..objectives import create_objective
from ..problems import SearchSpace
from .run_controller import RunController, RunStatus
from .scheduler import ManualScheduler

logger = logging.getLogger(__name__)


@dataclass
class OptimizationResult:
    """
    Complete result of a single optimisation run.

    Attributes:
        algorithm: Algorithm identifier ("PSO", "GA", ...).
        best_position: Best decision vector found, shape (dimensions,).
        best_fitness: Objective value at ``best_position``.
        history: Best-so-far fitness per iteration, starting with the
            initial population (iteration 0). Non-increasing.
        optimization_history: Per-iteration population statistics
            (best/worst/mean/std fitness and improvement of the running best).
        best_solutions: Best distinct solutions seen during the run, each a
            dict with 'position', 'fitness' and 'iteration_found'.
        iterations_completed: Number of committed iterations.
        optimization_time: Wall-clock time of the run in seconds.
        seed: Seed of the run's random generator (None if unseeded).
        convergence_info: Result of the stagnation analysis.
        performance_stats: Timing metrics.
        algorithm_config: Algorithm parameters used for the run.
        status: Final run status ('stopped' on normal completion).
        error: Message of the error that stopped the run, if any.
    """

    algorithm: str
    best_position: np.ndarray
    best_fitness: float
    history: list[float]
    optimization_history: list[dict[str, Any]]
    best_solutions: list[dict[str, Any]]
    iterations_completed: int
    optimization_time: float
    seed: int | None
    convergence_info: dict[str, Any]
    performance_stats: dict[str, Any]
    algorithm_config: dict[str, Any]
    status: str = RunStatus.STOPPED.value
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class MultiRunResult:
    """
    Results from multiple independent optimisation runs.

    Attributes:
        best_result: Complete result of the run with the lowest best fitness.
        run_summaries: Lightweight per-run summaries of the successful runs.
        best_solutions_per_run: Best distinct solutions of each successful run.
        statistical_summary: Aggregate statistics across successful runs.
        failed_runs: ``{'run_id', 'seed', 'error'}`` for each failed run.
        total_time: Wall-clock time of all runs in seconds.
        num_runs_completed: Number of successful runs.
    """

    best_result: OptimizationResult
    run_summaries: list[dict[str, Any]]
    best_solutions_per_run: list[list[dict[str, Any]]]
    statistical_summary: dict[str, Any]
    failed_runs: list[dict[str, Any]] = field(default_factory=list)
    total_time: float = 0.0
    num_runs_completed: int = 0


class BatchRunner:
    """
    Runs configured optimisations to completion and summarises them.

    Args:
        config_manager: Loaded and validated configuration.
    """

    def __init__(self, config_manager: OptimizationConfigManager):
        self.config_manager = config_manager
        self.algorithm_config = config_manager.get_algorithm_config()
        self.run_config = config_manager.get_run_config()
        self.monitoring_config = config_manager.get_monitoring_config()
        self.multi_run_config = config_manager.get_multi_run_config()

        bounds = config_manager.get_search_space_config()
        self.search_space = SearchSpace(
            dimensions=self.algorithm_config.dimensions,
            lower_bound=bounds.lower_bound,
            upper_bound=bounds.upper_bound,
        )
        self.objective = create_objective(config_manager.get_objective_config())

        logger.info(
            "Batch runner ready: %s on %s in [%s, %s]^%d",
            self.algorithm_config.algorithm, self.objective.name,
            self.search_space.lower_bound, self.search_space.upper_bound,
            self.search_space.dimensions,
        )

    def create_controller(self) -> RunController:
        """Controller configured from the configuration, on a fresh ManualScheduler."""
        controller = RunController(
            scheduler=ManualScheduler(),
            objective=self.objective,
            step_delay=self.run_config.step_delay,
            progress_frequency=self.monitoring_config.progress_frequency,
            track_best_n=self.run_config.track_best_n,
        )
        return controller.configure(self.algorithm_config, self.search_space)

    def optimize(self, seed: int | None = None) -> OptimizationResult:
        """
        Run one optimisation to completion.

        Args:
            seed: Seed of the run. Defaults to the configured ``run.seed``.

        Returns:
            OptimizationResult: Best solution, history and analysis. If the
            run failed, ``error`` is set and the best solution is the last
            valid one.
        """
        if seed is None:
            seed = self.run_config.seed

        print(f"\n🚀 STARTING {self.algorithm_config.algorithm} OPTIMIZATION")
        self._print_optimization_summary(seed)

        controller = self.create_controller()
        start_time = time.time()
        controller.run_to_completion(seed)
        optimization_time = time.time() - start_time

        result = self._process_single_result(controller, seed, optimization_time)

        if result.succeeded:
            print("\n✅ OPTIMIZATION COMPLETED")
        else:
            print(f"\n❌ OPTIMIZATION STOPPED: {result.error}")
        print(f"   Best fitness: {result.best_fitness:.6f}")
        print(f"   Iterations: {result.iterations_completed}")
        print(f"   Time: {optimization_time:.3f}s")
        print(f"   Best solutions tracked: {len(result.best_solutions)}")

        return result

    def optimize_multi_run(self, num_runs: int | None = None,
                           base_seed: int | None = None) -> MultiRunResult:
        """
        Run several independent optimisations and compare them.

        Run ``i`` (0-based) uses seed ``base_seed + i``. When ``base_seed`` is
        None the configured ``run.seed`` is used, and if that is None too
        every run draws fresh entropy. Failed runs are reported and skipped.

        Args:
            num_runs: Number of runs. Defaults to ``multi_run.num_runs``.
            base_seed: Seed of the first run.

        Returns:
            MultiRunResult: Best result, per-run summaries and statistics.

        Raises:
            ValueError: If ``num_runs`` is not positive.
            RuntimeError: If every run failed.
        """
        runs_to_perform = num_runs if num_runs is not None else self.multi_run_config.num_runs
        if runs_to_perform < 1:
            raise ValueError("num_runs must be positive")
        if base_seed is None:
            base_seed = self.run_config.seed

        print(f"🔄 STARTING MULTI-RUN {self.algorithm_config.algorithm} OPTIMIZATION ({runs_to_perform} runs)")

        start_time = time.time()
        run_summaries = []
        best_solutions_per_run = []
        failed_runs = []
        overall_best_result = None

        for run_idx in range(runs_to_perform):
            seed = base_seed + run_idx if base_seed is not None else None
            print(f"\n{'='*60}")
            print(f"🏃 RUN {run_idx + 1}/{runs_to_perform}")
            print(f"{'='*60}")
            print(f"   🎲 Run {run_idx + 1}: Using seed {seed}")

            try:
                result = self.optimize(seed)
            except Exception as e:
                logger.exception("Run %d failed", run_idx + 1)
                print(f"❌ Run {run_idx + 1} failed: {str(e)}")
                failed_runs.append({'run_id': run_idx + 1, 'seed': seed, 'error': str(e)})
                continue

            if not result.succeeded:
                print(f"❌ Run {run_idx + 1} failed: {result.error}")
                failed_runs.append({'run_id': run_idx + 1, 'seed': seed, 'error': result.error})
                continue

            run_summaries.append({
                'run_id': run_idx + 1,
                'seed': seed,
                'fitness': result.best_fitness,
                'iterations': result.iterations_completed,
                'time': result.optimization_time,
                'converged': result.convergence_info.get('converged', False),
                'best_solutions_count': len(result.best_solutions),
            })
            best_solutions_per_run.append(result.best_solutions)

            if overall_best_result is None or result.best_fitness < overall_best_result.best_fitness:
                overall_best_result = result

            print(f"✅ Run {run_idx + 1} completed: fitness = {result.best_fitness:.6f}")

        total_time = time.time() - start_time

        if not run_summaries:
            raise RuntimeError("All optimization runs failed")

        statistical_summary = self._generate_statistical_summary(run_summaries, runs_to_perform)

        print("\n🎯 MULTI-RUN OPTIMIZATION COMPLETED")
        print(f"   Successful runs: {len(run_summaries)}/{runs_to_perform}")
        print(f"   Total time: {total_time:.1f}s")
        print(f"   Best fitness: {overall_best_result.best_fitness:.6f}")
        print(f"   Mean fitness: {statistical_summary['fitness_mean']:.6f}")
        print(f"   Std fitness: {statistical_summary['fitness_std']:.6f}")

        return MultiRunResult(
            best_result=overall_best_result,
            run_summaries=run_summaries,
            best_solutions_per_run=best_solutions_per_run,
            statistical_summary=statistical_summary,
            failed_runs=failed_runs,
            total_time=total_time,
            num_runs_completed=len(run_summaries),
        )

    def _print_optimization_summary(self, seed: int | None):
        alg = self.algorithm_config
        print("\n📋 OPTIMIZATION CONFIGURATION:")
        print(f"   Algorithm: {alg.algorithm}")
        print(f"   Population size: {alg.size}")
        print(f"   Max iterations: {alg.iterations}")
        print(f"   Objective: {self.objective.name}")
        print(f"   Search space: [{self.search_space.lower_bound}, {self.search_space.upper_bound}]"
              f"^{self.search_space.dimensions}")
        print(f"   Seed: {seed if seed is not None else 'random'}")

    def _process_single_result(self, controller: RunController, seed: int | None,
                               optimization_time: float) -> OptimizationResult:
        """Convert the final controller state into an OptimizationResult."""
        snapshot = controller.snapshot()
        tracker = controller.tracker
        best = snapshot.global_best

        return OptimizationResult(
            algorithm=self.algorithm_config.algorithm,
            best_position=best.copy_position() if best is not None else np.full(self.search_space.dimensions, np.nan),
            best_fitness=snapshot.best_fitness,
            history=list(snapshot.history),
            optimization_history=tracker.statistics,
            best_solutions=controller.best_solutions.get_best_solutions(),
            iterations_completed=snapshot.iteration,
            optimization_time=optimization_time,
            seed=seed,
            convergence_info=tracker.convergence_info(),
            performance_stats=self._generate_performance_stats(optimization_time, snapshot.iteration),
            algorithm_config=self.algorithm_config.to_dict(),
            status=snapshot.status.value,
            error=str(snapshot.error) if snapshot.error is not None else None,
        )

    @staticmethod
    def _generate_performance_stats(total_time: float, num_iterations: int) -> dict[str, Any]:
        return {
            'total_time': total_time,
            'num_iterations': num_iterations,
            'avg_time_per_iteration': total_time / max(1, num_iterations),
            'iterations_per_second': num_iterations / max(0.001, total_time),
        }

    @staticmethod
    def _generate_statistical_summary(run_summaries: list[dict], runs_attempted: int) -> dict[str, Any]:
        """Generate statistical summary from lightweight run summaries."""
        if not run_summaries:
            return {}

        fitness = [summary['fitness'] for summary in run_summaries]
        times = [summary['time'] for summary in run_summaries]
        iterations = [summary['iterations'] for summary in run_summaries]
        converged_count = sum(1 for summary in run_summaries if summary['converged'])

        return {
            'num_runs': len(run_summaries),
            'fitness_mean': float(np.mean(fitness)),
            'fitness_std': float(np.std(fitness)),
            'fitness_min': float(np.min(fitness)),
            'fitness_max': float(np.max(fitness)),
            'fitness_median': float(np.median(fitness)),
            'time_mean': float(np.mean(times)),
            'time_std': float(np.std(times)),
            'time_total': float(np.sum(times)),
            'iterations_mean': float(np.mean(iterations)),
            'iterations_std': float(np.std(iterations)),
            'success_rate': len(run_summaries) / runs_attempted,
            'convergence_rate': converged_count / len(run_summaries),
        }
