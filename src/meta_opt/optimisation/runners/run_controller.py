"""
Run lifecycle of one optimisation.

``RunController`` owns the committed state of a run (population, aux
state, global best, history, iteration counter) and a small state machine:

    IDLE --start--> RUNNING --(max iterations | stop | failed step)--> STOPPED
    STOPPED --start--> RUNNING           (re-initialises the run)

Iterations are never looped over directly. After each committed step the
controller asks its ``Scheduler`` to call it again after ``step_delay``
seconds, so the caller keeps control between iterations. ``stop()`` cancels
the pending call.

Each step is computed on the previous population and committed in one
assignment, so observers only ever see complete iterations. Observers
receive immutable ``RunSnapshot`` objects through ``add_listener``.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np

from ...exceptions import ConfigurationError, NumericDivergenceError, OptimizerStateError
from ..config.config_manager import AlgorithmConfig, SearchSpaceConfig, create_algorithm_config
from ..objectives import BaseObjective, RastriginObjective
from ..problems import BoundedProblem, SearchSpace
from ..strategies import OptimizerStrategy, get_strategy
from ..utils.population import Candidate, Population
from ..utils.population_builder import PopulationBuilder
from .best_tracker import BestSolutionsTracker, BestTracker
from .scheduler import CancellationToken, ManualScheduler, Scheduler

logger = logging.getLogger(__name__)


class RunStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(frozen=True)
class RunSnapshot:
    """Read-only view of a run after a committed iteration or status change."""

    algorithm: str | None
    iteration: int
    max_iterations: int
    status: RunStatus
    population: Population | None
    global_best: Candidate | None
    history: tuple[float, ...] = ()
    aux: dict[str, Any] = field(default_factory=dict)
    error: Exception | None = None

    @property
    def best_fitness(self) -> float:
        return self.global_best.fitness if self.global_best is not None else float("inf")


class RunController:
    """
    Drives one optimisation run iteration by iteration.

    Args:
        scheduler: Defers the next step. Defaults to a ``ManualScheduler``.
        objective: Function to minimise. Defaults to Rastrigin.
        step_delay: Seconds between scheduled steps.
        progress_frequency: Log progress every N iterations.
        track_best_n: Number of distinct best solutions remembered.

    Example:
        ```python
        controller = RunController()
        controller.configure(PSOConfig(num_particles=5, dimensions=2, max_iterations=10))
        snapshot = controller.run_to_completion(seed=42)
        print(snapshot.best_fitness, snapshot.history)
        ```
    """

    def __init__(self, scheduler: Scheduler | None = None, objective: BaseObjective | None = None,
                 step_delay: float = 0.1, progress_frequency: int = 10, track_best_n: int = 5):
        self.scheduler = scheduler if scheduler is not None else ManualScheduler()
        self.objective = objective if objective is not None else RastriginObjective()
        self.step_delay = step_delay
        self.progress_frequency = progress_frequency
        self.track_best_n = track_best_n

        self.config: AlgorithmConfig | None = None
        self.problem: BoundedProblem | None = None
        self.strategy: OptimizerStrategy | None = None

        self.status = RunStatus.IDLE
        self.iteration = 0
        self.population: Population | None = None
        self.aux: dict[str, Any] = {}
        self.error: Exception | None = None
        self.seed: int | None = None

        self.tracker = BestTracker()
        self.best_solutions = BestSolutionsTracker(track_best_n)

        self._rng: np.random.Generator | None = None
        self._token: CancellationToken | None = None
        self._stop_requested = False
        self._listeners: list[Callable[[RunSnapshot], Any]] = []

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def configure(self, algorithm_config: AlgorithmConfig | dict,
                  search_space: SearchSpace | SearchSpaceConfig | None = None,
                  objective: BaseObjective | None = None) -> "RunController":
        """
        Select the algorithm, its parameters and the problem for the next run.

        Args:
            algorithm_config: Typed algorithm configuration, or a dictionary
                with a ``type`` key accepted by ``create_algorithm_config``.
            search_space: Search space or bounds. Defaults to [-5.12, 5.12]^d
                with d taken from the algorithm configuration.
            objective: Replaces the controller's objective.

        Raises:
            OptimizerStateError: If a run is in progress.
            ConfigurationError: If the configuration is invalid.
        """
        if self.status is RunStatus.RUNNING:
            raise OptimizerStateError("Cannot reconfigure while a run is in progress; stop it first")

        if isinstance(algorithm_config, dict):
            algorithm_config = create_algorithm_config(algorithm_config)
        if not isinstance(algorithm_config, AlgorithmConfig):
            raise ConfigurationError(
                f"Expected an algorithm configuration, got {type(algorithm_config).__name__}"
            )

        space = self._resolve_search_space(search_space, algorithm_config.dimensions)
        if objective is not None:
            self.objective = objective

        self.config = algorithm_config
        self.problem = BoundedProblem(space, self.objective)
        self.strategy = get_strategy(algorithm_config.algorithm)(self.problem)
        self._reset_state()
        self.status = RunStatus.IDLE

        logger.info(
            "🔧 Configured %s: size=%d, iterations=%d, dimensions=%d, bounds=[%s, %s]",
            algorithm_config.algorithm, algorithm_config.size, algorithm_config.iterations,
            space.dimensions, space.lower_bound, space.upper_bound,
        )
        return self

    @staticmethod
    def _resolve_search_space(search_space, dimensions: int) -> SearchSpace:
        if search_space is None:
            return SearchSpace(dimensions=dimensions)
        if isinstance(search_space, SearchSpaceConfig):
            return SearchSpace(dimensions, search_space.lower_bound, search_space.upper_bound)
        if search_space.dimensions != dimensions:
            raise ConfigurationError(
                f"Search space has {search_space.dimensions} dimensions, "
                f"algorithm is configured for {dimensions}"
            )
        return search_space

    def _reset_state(self):
        self.iteration = 0
        self.population = None
        self.aux = {}
        self.error = None
        self.tracker = BestTracker()
        self.best_solutions = BestSolutionsTracker(self.track_best_n)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self.status is RunStatus.RUNNING

    @property
    def max_iterations(self) -> int:
        return self.config.iterations if self.config is not None else 0

    def start(self, seed: int | None = None) -> bool:
        """
        Initialise a fresh run and schedule its first step.

        Does nothing if a run is already in progress. Starting a stopped run
        discards its state and begins again from a new population.

        Returns:
            bool: True if a run was started.

        Raises:
            OptimizerStateError: If ``configure`` has not been called.
            NumericDivergenceError: If the initial population has a
                non-finite fitness.
            Exception: Whatever the objective raised while evaluating the
                initial population. The run is stopped in either case.
        """
        if self.status is RunStatus.RUNNING:
            logger.debug("start() ignored: run already in progress")
            return False
        if self.config is None:
            raise OptimizerStateError("configure() must be called before start()")

        self._reset_state()
        self.seed = seed
        self._rng = np.random.default_rng(seed)
        self._stop_requested = False

        try:
            population = PopulationBuilder(self.problem).build_initial_population(self.config, self._rng)
            self.tracker.initialize(population)
        except Exception as e:
            self._fail(e)
            raise

        self.population = population
        self.aux = self.strategy.initial_aux(population, self.config)
        self.best_solutions.add_population(population, 0)
        self.status = RunStatus.RUNNING

        logger.info(
            "🚀 Started %s run (seed=%s): initial best fitness %.6f",
            self.config.algorithm, seed, self.tracker.best_fitness,
        )
        self._notify()
        if self.is_running:
            self._schedule_next()
        return True

    def step(self) -> bool:
        """
        Perform and commit exactly one iteration.

        Returns:
            bool: True if an iteration was committed, False if no run is in
            progress.

        Raises:
            NumericDivergenceError: If the new population has a non-finite
                fitness. The previous iteration stays committed and the run
                is stopped.
            Exception: Whatever the objective raised during the step. The
                run is stopped the same way.
        """
        if self.status is not RunStatus.RUNNING or self._stop_requested:
            return False

        # A direct call replaces the pending scheduled step
        if self._token is not None:
            self.scheduler.cancel(self._token)
            self._token = None

        next_iteration = self.iteration + 1
        try:
            result = self.strategy.step(self.population, self.aux, self.config, self._rng)
            improved = self.tracker.update(result.population, next_iteration)
        except Exception as e:
            self._fail(e)
            raise

        self.population, self.aux, self.iteration = result.population, result.aux, next_iteration
        self.best_solutions.add_population(result.population, next_iteration)

        if improved:
            logger.debug("Iteration %d: new global best %.6f", next_iteration, self.tracker.best_fitness)
        if next_iteration % self.progress_frequency == 0:
            logger.info(
                "🔄 %s iteration %d/%d: best fitness %.6f",
                self.config.algorithm, next_iteration, self.max_iterations, self.tracker.best_fitness,
            )

        if next_iteration >= self.max_iterations:
            self.status = RunStatus.STOPPED
            logger.info(
                "✅ %s run completed after %d iterations: best fitness %.6f",
                self.config.algorithm, next_iteration, self.tracker.best_fitness,
            )

        self._notify()
        if self.is_running:
            self._schedule_next()
        return True

    def stop(self) -> bool:
        """
        Stop the run in progress. The last committed iteration is kept.

        Returns:
            bool: True if a running run was stopped.
        """
        if self.status is not RunStatus.RUNNING:
            return False

        self._stop_requested = True
        if self._token is not None:
            self.scheduler.cancel(self._token)
            self._token = None
        self.status = RunStatus.STOPPED

        logger.info("⏹️ Stopped %s run at iteration %d", self.config.algorithm, self.iteration)
        self._notify()
        return True

    def run_to_completion(self, seed: int | None = None) -> RunSnapshot:
        """
        Start a run if none is in progress and drive it until it stops.

        Only available with a ``ManualScheduler``. A failed step or initial
        population (divergence or an objective error) stops the run and is
        reported through ``snapshot().error`` instead of being raised.
        """
        if not isinstance(self.scheduler, ManualScheduler):
            raise OptimizerStateError("run_to_completion() requires a ManualScheduler")

        if self.status is not RunStatus.RUNNING:
            try:
                self.start(seed)
            except Exception as e:
                if e is not self.error:
                    raise
                logger.warning("Run could not start: %s", e)
        while self.status is RunStatus.RUNNING and self.scheduler.run_next():
            pass
        return self.snapshot()

    def _schedule_next(self):
        self._token = self.scheduler.schedule(self._scheduled_step, self.step_delay)

    def _scheduled_step(self):
        # Nothing above a scheduled callback can handle its errors
        self._token = None
        try:
            self.step()
        except Exception as e:
            if self.is_running:
                self._fail(e)
            logger.warning("Scheduled step aborted; run stopped at iteration %d", self.iteration)

    def _fail(self, error: Exception):
        self.error = error
        self._stop_requested = True
        if self._token is not None:
            self.scheduler.cancel(self._token)
            self._token = None
        self.status = RunStatus.STOPPED
        if isinstance(error, NumericDivergenceError):
            logger.error("❌ Numeric divergence: %s", error)
        else:
            logger.error("❌ Step failed with %s: %s", type(error).__name__, error)
        self._notify()

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def add_listener(self, listener: Callable[[RunSnapshot], Any]):
        """Call ``listener(snapshot)`` after every committed iteration and status change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[RunSnapshot], Any]):
        self._listeners.remove(listener)

    def snapshot(self) -> RunSnapshot:
        return RunSnapshot(
            algorithm=self.config.algorithm if self.config is not None else None,
            iteration=self.iteration,
            max_iterations=self.max_iterations,
            status=self.status,
            population=self.population,
            global_best=self.tracker.best,
            history=self.tracker.history,
            aux={k: v.copy() if isinstance(v, (np.ndarray, list)) else v for k, v in self.aux.items()},
            error=self.error,
        )

    def _notify(self):
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
