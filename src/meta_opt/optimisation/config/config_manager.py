"""
Configuration data classes and management for metaheuristic optimization.

This module defines one typed configuration class per algorithm and
provides validation and loading capabilities. Every configuration is
validated once, when it is created, so a run can never start from an
invalid parameter set.

The configuration system supports:
- Per-algorithm parameters (PSO, GA, DE, FA, BA, GWO)
- Search space bounds and objective selection
- Run options (seed, step delay, best-N tracking)
- Progress monitoring and logging options
- Multi-run statistical analysis

Example YAML Configuration:
```yaml
problem:
  objective:
    type: "rastrigin"
    a: 10
  search_space:
    lower_bound: -5.12
    upper_bound: 5.12

optimization:
  algorithm:
    type: "PSO"
    num_particles: 30
    dimensions: 2
    max_iterations: 100
    w: 0.5
    c1: 1.5
    c2: 1.5
  run:
    seed: 42
    step_delay: 0.1
  monitoring:
    progress_frequency: 10
  multi_run:
    enabled: true
    num_runs: 10
```

Usage:
```python
config_manager = OptimizationConfigManager('config.yaml')
algorithm_config = config_manager.get_algorithm_config()
runner = BatchRunner(config_manager)
```
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from ...exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SUPPORTED_DIMENSIONS = (2, 3)
DEFAULT_LOWER_BOUND = -5.12
DEFAULT_UPPER_BOUND = 5.12


def _check_rate(name: str, value: float):
    if not 0.0 <= value <= 1.0:
        raise ConfigurationError(f"{name} must be in range [0.0, 1.0], got {value}")


def _check_non_negative(name: str, value: float):
    if value < 0:
        raise ConfigurationError(f"{name} cannot be negative, got {value}")


class AlgorithmConfig(ABC):
    """
    Shared behaviour of the per-algorithm configuration classes.

    Each algorithm keeps the parameter names used by its own literature
    (``num_particles`` for PSO, ``max_generations`` for GA, ...). The
    read-only views ``size`` and ``iterations`` give the run controller a
    uniform way to read population size and iteration budget.
    """

    algorithm: str = "BASE"
    min_population: int = 1

    @property
    @abstractmethod
    def size(self) -> int:
        pass

    @property
    @abstractmethod
    def iterations(self) -> int:
        pass

    def _validate_common(self):
        if self.dimensions not in SUPPORTED_DIMENSIONS:
            raise ConfigurationError(
                f"Dimensions must be one of {list(SUPPORTED_DIMENSIONS)}, got {self.dimensions}"
            )
        if self.size < 1:
            raise ConfigurationError(f"Population size must be positive, got {self.size}")
        if self.size < self.min_population:
            raise ConfigurationError(
                f"{self.algorithm} requires population size >= {self.min_population}, got {self.size}"
            )
        if self.iterations < 1:
            raise ConfigurationError(f"Max iterations must be positive, got {self.iterations}")

    def to_dict(self) -> dict[str, Any]:
        """Return the parameters together with the algorithm type."""
        return {"type": self.algorithm, **asdict(self)}


@dataclass
class PSOConfig(AlgorithmConfig):
    """
    Particle Swarm Optimization configuration.

    Attributes:
        num_particles: Number of particles in the swarm.
        dimensions: Dimensionality of the search space (2 or 3).
        max_iterations: Number of velocity/position updates.
        w: Inertia weight, momentum carried over from the previous velocity.
        c1: Cognitive coefficient, attraction to the particle's personal best.
        c2: Social coefficient, attraction to the swarm's global best.
    """

    num_particles: int = 30
    dimensions: int = 3
    max_iterations: int = 100
    w: float = 0.5
    c1: float = 1.5
    c2: float = 1.5

    algorithm = "PSO"

    @property
    def size(self) -> int:
        return self.num_particles

    @property
    def iterations(self) -> int:
        return self.max_iterations

    def __post_init__(self):
        """Validate PSO configuration parameters."""
        self._validate_common()
        _check_non_negative("Inertia weight", self.w)
        _check_non_negative("Cognitive coefficient", self.c1)
        _check_non_negative("Social coefficient", self.c2)


@dataclass
class GAConfig(AlgorithmConfig):
    """
    Genetic Algorithm configuration.

    Attributes:
        population_size: Number of individuals per generation.
        crossover_rate: Probability that a parent pair is recombined.
        mutation_rate: Per-gene mutation probability.
        max_generations: Number of generations to evolve.
        dimensions: Dimensionality of the search space (2 or 3).
    """

    population_size: int = 50
    crossover_rate: float = 0.7
    mutation_rate: float = 0.01
    max_generations: int = 100
    dimensions: int = 3

    algorithm = "GA"

    @property
    def size(self) -> int:
        return self.population_size

    @property
    def iterations(self) -> int:
        return self.max_generations

    def __post_init__(self):
        """Validate GA configuration parameters."""
        self._validate_common()
        _check_rate("Crossover rate", self.crossover_rate)
        _check_rate("Mutation rate", self.mutation_rate)


@dataclass
class DEConfig(AlgorithmConfig):
    """
    Differential Evolution configuration.

    Attributes:
        population_size: Number of target vectors (at least 4, so that three
            distinct donors exist for every target).
        dimensions: Dimensionality of the search space (2 or 3).
        max_iterations: Number of generations.
        mutation_factor: Differential weight F scaling (x_a - x_b).
        crossover_rate: Binomial crossover probability CR.
    """

    population_size: int = 30
    dimensions: int = 3
    max_iterations: int = 100
    mutation_factor: float = 0.8
    crossover_rate: float = 0.9

    algorithm = "DE"
    min_population = 4

    @property
    def size(self) -> int:
        return self.population_size

    @property
    def iterations(self) -> int:
        return self.max_iterations

    def __post_init__(self):
        """Validate DE configuration parameters."""
        self._validate_common()
        if not 0.0 < self.mutation_factor <= 2.0:
            raise ConfigurationError(
                f"Mutation factor must be in range (0.0, 2.0], got {self.mutation_factor}"
            )
        _check_rate("Crossover rate", self.crossover_rate)


@dataclass
class FAConfig(AlgorithmConfig):
    """
    Firefly Algorithm configuration.

    Attributes:
        num_fireflies: Number of fireflies.
        dimensions: Dimensionality of the search space (2 or 3).
        max_iterations: Number of all-pairs sweeps.
        alpha: Scale of the uniform random term added to every move.
        beta0: Attractiveness at distance zero.
        gamma: Light absorption coefficient.
    """

    num_fireflies: int = 30
    dimensions: int = 3
    max_iterations: int = 100
    alpha: float = 0.5
    beta0: float = 1.0
    gamma: float = 1.0

    algorithm = "FA"

    @property
    def size(self) -> int:
        return self.num_fireflies

    @property
    def iterations(self) -> int:
        return self.max_iterations

    def __post_init__(self):
        """Validate FA configuration parameters."""
        self._validate_common()
        _check_non_negative("Alpha", self.alpha)
        _check_non_negative("Beta0", self.beta0)
        _check_non_negative("Gamma", self.gamma)


@dataclass
class BAConfig(AlgorithmConfig):
    """
    Bat Algorithm configuration.

    Attributes:
        population_size: Number of bats.
        dimensions: Dimensionality of the search space (2 or 3).
        max_iterations: Number of iterations.
        frequency_min: Lower bound of the per-iteration frequency draw.
        frequency_max: Upper bound of the per-iteration frequency draw.
        pulse_rate: Initial pulse emission rate r.
        loudness: Initial loudness A.
        loudness_decay: Multiplier applied to loudness every iteration.
        pulse_rate_increase: Multiplier applied to (1 - r) every iteration,
            which moves the pulse rate geometrically towards 1.
    """

    population_size: int = 30
    dimensions: int = 3
    max_iterations: int = 100
    frequency_min: float = 0.0
    frequency_max: float = 2.0
    pulse_rate: float = 0.5
    loudness: float = 0.5
    loudness_decay: float = 0.9
    pulse_rate_increase: float = 0.9

    algorithm = "BA"

    @property
    def size(self) -> int:
        return self.population_size

    @property
    def iterations(self) -> int:
        return self.max_iterations

    def __post_init__(self):
        """Validate BA configuration parameters."""
        self._validate_common()
        if self.frequency_min > self.frequency_max:
            raise ConfigurationError(
                f"frequency_min ({self.frequency_min}) must not exceed frequency_max ({self.frequency_max})"
            )
        _check_rate("Pulse rate", self.pulse_rate)
        _check_rate("Loudness", self.loudness)
        for name in ("loudness_decay", "pulse_rate_increase"):
            value = getattr(self, name)
            if not 0.0 < value <= 1.0:
                raise ConfigurationError(f"{name} must be in range (0.0, 1.0], got {value}")


@dataclass
class GWOConfig(AlgorithmConfig):
    """
    Grey Wolf Optimizer configuration.

    Attributes:
        population_size: Number of wolves (at least 3: alpha, beta and delta).
        dimensions: Dimensionality of the search space (2 or 3).
        max_iterations: Number of iterations; ``a`` reaches 0 on the last one.
        a: Starting value of the linearly decreasing control parameter.
    """

    population_size: int = 30
    dimensions: int = 3
    max_iterations: int = 100
    a: float = 2.0

    algorithm = "GWO"
    min_population = 3

    @property
    def size(self) -> int:
        return self.population_size

    @property
    def iterations(self) -> int:
        return self.max_iterations

    def __post_init__(self):
        """Validate GWO configuration parameters."""
        self._validate_common()
        if self.a <= 0:
            raise ConfigurationError(f"Control parameter 'a' must be positive, got {self.a}")


ALGORITHM_CONFIGS: dict[str, type[AlgorithmConfig]] = {
    "PSO": PSOConfig,
    "GA": GAConfig,
    "DE": DEConfig,
    "FA": FAConfig,
    "BA": BAConfig,
    "GWO": GWOConfig,
}


def create_algorithm_config(algorithm_dict: dict[str, Any]) -> AlgorithmConfig:
    """
    Build the typed configuration variant for an algorithm dictionary.

    The ``type`` key selects the variant; every other key must be a field of
    that variant. Unknown keys are rejected instead of silently ignored.

    Raises:
        ConfigurationError: If the type is unknown, a key is not a parameter
            of the algorithm, or a value fails validation.
    """
    params = dict(algorithm_dict)
    algorithm_type = str(params.pop("type", "PSO")).upper()

    if algorithm_type not in ALGORITHM_CONFIGS:
        raise ConfigurationError(
            f"Unknown algorithm '{algorithm_type}'. Supported: {list(ALGORITHM_CONFIGS)}"
        )

    config_cls = ALGORITHM_CONFIGS[algorithm_type]
    valid_fields = {f.name for f in fields(config_cls)}
    unknown = set(params) - valid_fields
    if unknown:
        raise ConfigurationError(
            f"Unknown parameter(s) {sorted(unknown)} for {algorithm_type}. "
            f"Valid parameters: {sorted(valid_fields)}"
        )

    try:
        return config_cls(**params)
    except TypeError as e:
        raise ConfigurationError(f"Invalid {algorithm_type} configuration: {e}") from e


@dataclass
class SearchSpaceConfig:
    """Bounds shared by every dimension of the search space."""

    lower_bound: float = DEFAULT_LOWER_BOUND
    upper_bound: float = DEFAULT_UPPER_BOUND

    def __post_init__(self):
        if self.lower_bound >= self.upper_bound:
            raise ConfigurationError(
                f"Lower bound ({self.lower_bound}) must be below upper bound ({self.upper_bound})"
            )


@dataclass
class RunConfig:
    """
    Options of a single run.

    Attributes:
        seed: Seed for the run's random generator. None draws fresh entropy,
            which makes the run non-reproducible.
        step_delay: Seconds between scheduled iterations. The presentation
            layer gets control back between iterations.
        track_best_n: Number of best distinct solutions remembered per run.
    """

    seed: int | None = None
    step_delay: float = 0.1
    track_best_n: int = 5

    def __post_init__(self):
        if self.step_delay < 0:
            raise ConfigurationError("Step delay cannot be negative")
        if self.track_best_n < 1:
            raise ConfigurationError("track_best_n must be positive")


@dataclass
class MonitoringConfig:
    """
    Progress monitoring and logging configuration.

    Attributes:
        progress_frequency: Log progress every N iterations.
        log_level: Logging verbosity ('DEBUG', 'INFO', 'WARNING', 'ERROR').
    """

    progress_frequency: int = 10
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate monitoring configuration."""
        if self.progress_frequency < 1:
            raise ConfigurationError("Progress frequency must be positive")

        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
        if self.log_level not in valid_log_levels:
            raise ConfigurationError(f"Log level must be one of {valid_log_levels}")


@dataclass
class MultiRunConfig:
    """
    Multi-run statistical analysis configuration.

    Runs the same configuration several times with different seeds to
    measure how reliable an algorithm is on the objective.

    Attributes:
        enabled: Whether to perform multi-run analysis.
        num_runs: Number of independent runs (2-100 when enabled).
    """

    enabled: bool = False
    num_runs: int = 5

    def __post_init__(self):
        """Validate multi-run configuration."""
        if self.enabled:
            if self.num_runs < 2:
                raise ConfigurationError(
                    "Number of runs must be at least 2 for multi-run analysis"
                )

            if self.num_runs > 100:
                raise ConfigurationError(
                    "Number of runs should not exceed 100 (time/resource limits)"
                )


class OptimizationConfigManager:
    """
    Configuration manager for metaheuristic optimization.

    Handles loading, validation and structured access to an optimization
    configuration given as a YAML file or a dictionary.

    Configuration Structure:
        ```yaml
        problem:
          objective: {...}      # Objective function configuration
          search_space: {...}   # Bounds

        optimization:
          algorithm: {...}      # Algorithm type and parameters
          run: {...}            # Seed, step delay, best-N tracking
          monitoring: {...}     # Progress reporting
          multi_run: {...}      # Statistical analysis
        ```

    Usage Pattern:
        ```python
        config_manager = OptimizationConfigManager('optimization_config.yaml')
        algorithm_config = config_manager.get_algorithm_config()
        run_config = config_manager.get_run_config()
        ```
    """

    def __init__(self, config_path: str | None = None, config_dict: dict | None = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to YAML configuration file
            config_dict: Configuration dictionary (alternative to file)

        Raises:
            FileNotFoundError: If config_path doesn't exist
            ValueError: If both or neither config sources are provided
            yaml.YAMLError: If YAML file is malformed
            ConfigurationError: If configuration validation fails
        """
        if config_path and config_dict:
            raise ValueError("Provide either config_path or config_dict, not both")

        if not config_path and not config_dict:
            raise ValueError(
                "Configuration is required. Provide either:\n"
                "  - config_path: Path to YAML configuration file\n"
                "  - config_dict: Configuration dictionary\n"
                "Example: OptimizationConfigManager('my_config.yaml')"
            )

        if config_path:
            self.config = self._load_yaml_config(config_path)
            logger.info("📋 Using loaded configuration file")
        else:
            self.config = config_dict
            logger.info("📋 Using provided configuration dictionary")

        # Validate and setup structured configs
        self._validate_config()
        self._setup_structured_configs()

    @classmethod
    def from_defaults(cls, algorithm: str = "PSO", **overrides) -> "OptimizationConfigManager":
        """Create a manager holding the default configuration of an algorithm."""
        return cls(config_dict=default_config(algorithm, **overrides))

    def _load_yaml_config(self, config_path: str) -> dict[str, Any]:
        """Load configuration from YAML file with error handling."""
        config_file = Path(config_path)

        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file) as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in {config_path}: {e}")

        if not isinstance(config, dict):
            raise ConfigurationError(f"Configuration must be a dictionary, got {type(config)}")

        logger.info(f"📂 Loaded configuration from {config_path}")
        return config

    def _validate_config(self):
        """Validate configuration structure and required fields."""
        if "optimization" not in self.config:
            raise ConfigurationError("Missing required configuration section: 'optimization'")

        opt_config = self.config["optimization"]
        if "algorithm" not in opt_config:
            raise ConfigurationError("Missing required optimization section: 'algorithm'")

        problem_config = self.config.get("problem", {})
        if not isinstance(problem_config, dict):
            raise ConfigurationError("'problem' section must be a dictionary")

    def _setup_structured_configs(self):
        """Setup structured configuration objects with validation."""
        opt_config = self.config["optimization"]
        problem_config = self.config.get("problem", {})

        self.algorithm_config = create_algorithm_config(opt_config["algorithm"])

        space_config = problem_config.get("search_space", {})
        self.search_space_config = SearchSpaceConfig(
            lower_bound=space_config.get("lower_bound", DEFAULT_LOWER_BOUND),
            upper_bound=space_config.get("upper_bound", DEFAULT_UPPER_BOUND),
        )

        self.objective_config = problem_config.get("objective", {"type": "rastrigin"})

        run_config = opt_config.get("run", {})
        self.run_config = RunConfig(
            seed=run_config.get("seed"),
            step_delay=run_config.get("step_delay", 0.1),
            track_best_n=run_config.get("track_best_n", 5),
        )

        mon_config = opt_config.get("monitoring", {})
        self.monitoring_config = MonitoringConfig(
            progress_frequency=mon_config.get("progress_frequency", 10),
            log_level=mon_config.get("log_level", "INFO"),
        )

        multi_config = opt_config.get("multi_run", {})
        self.multi_run_config = MultiRunConfig(
            enabled=multi_config.get("enabled", False),
            num_runs=multi_config.get("num_runs", 5),
        )

    def get_algorithm_config(self) -> AlgorithmConfig:
        """Get the typed algorithm configuration."""
        return self.algorithm_config

    def get_search_space_config(self) -> SearchSpaceConfig:
        """Get search space bounds."""
        return self.search_space_config

    def get_objective_config(self) -> dict[str, Any]:
        """Get objective function configuration."""
        return self.objective_config

    def get_run_config(self) -> RunConfig:
        """Get single-run options."""
        return self.run_config

    def get_monitoring_config(self) -> MonitoringConfig:
        """Get monitoring and logging configuration."""
        return self.monitoring_config

    def get_multi_run_config(self) -> MultiRunConfig:
        """Get multi-run analysis configuration."""
        return self.multi_run_config

    def get_full_config(self) -> dict[str, Any]:
        """Get complete configuration dictionary."""
        return self.config.copy()

    def print_summary(self):
        """Print configuration summary for verification."""
        alg = self.algorithm_config
        print("\n📋 OPTIMIZATION CONFIGURATION SUMMARY:")

        print("   🎯 Problem Configuration:")
        print(f"      Objective: {self.objective_config.get('type', 'rastrigin')}")
        print(
            f"      Bounds: [{self.search_space_config.lower_bound}, "
            f"{self.search_space_config.upper_bound}]^{alg.dimensions}"
        )

        print("   🔄 Algorithm Configuration:")
        print(f"      Type: {alg.algorithm}")
        print(f"      Population size: {alg.size}")
        print(f"      Max iterations: {alg.iterations}")
        for name, value in asdict(alg).items():
            print(f"      {name}: {value}")

        print("   🎲 Run Configuration:")
        print(f"      Seed: {self.run_config.seed if self.run_config.seed is not None else 'random'}")
        print(f"      Step delay: {self.run_config.step_delay}s")

        print("   📊 Monitoring Configuration:")
        print(f"      Progress frequency: {self.monitoring_config.progress_frequency}")
        print(f"      Log level: {self.monitoring_config.log_level}")

        print("   🔢 Multi-run Configuration:")
        print(f"      Enabled: {self.multi_run_config.enabled}")
        if self.multi_run_config.enabled:
            print(f"      Statistical runs: {self.multi_run_config.num_runs}")


def default_config(algorithm: str = "PSO", **overrides) -> dict[str, Any]:
    """
    Default configuration dictionary for an algorithm.

    Keyword overrides are applied to the algorithm parameters, e.g.
    ``default_config("GWO", population_size=6, max_iterations=50)``.
    """
    algorithm_type = algorithm.upper()
    if algorithm_type not in ALGORITHM_CONFIGS:
        raise ConfigurationError(
            f"Unknown algorithm '{algorithm}'. Supported: {list(ALGORITHM_CONFIGS)}"
        )
    algorithm_section = ALGORITHM_CONFIGS[algorithm_type](**overrides).to_dict()

    return {
        "problem": {
            "objective": {"type": "rastrigin", "a": 10.0},
            "search_space": {
                "lower_bound": DEFAULT_LOWER_BOUND,
                "upper_bound": DEFAULT_UPPER_BOUND,
            },
        },
        "optimization": {
            "algorithm": algorithm_section,
            "run": {"seed": None, "step_delay": 0.1, "track_best_n": 5},
            "monitoring": {"progress_frequency": 10, "log_level": "INFO"},
            "multi_run": {"enabled": False, "num_runs": 5},
        },
    }
