from dataclasses import dataclass

import numpy as np

from ...exceptions import ConfigurationError
from ..config.config_manager import (
    DEFAULT_LOWER_BOUND,
    DEFAULT_UPPER_BOUND,
    SUPPORTED_DIMENSIONS,
)


@dataclass(frozen=True)
class SearchSpace:
    """
    Box-shaped search space [L, U]^d.

    The same scalar bounds apply to every dimension. A search space is
    created when a run is configured and does not change while the run
    is active.

    Attributes:
        dimensions: Length of the decision vector (2 or 3).
        lower_bound: Lower bound L shared by all dimensions.
        upper_bound: Upper bound U shared by all dimensions, L < U.
    """

    dimensions: int
    lower_bound: float = DEFAULT_LOWER_BOUND
    upper_bound: float = DEFAULT_UPPER_BOUND

    def __post_init__(self):
        if self.dimensions not in SUPPORTED_DIMENSIONS:
            raise ConfigurationError(
                f"Dimensions must be one of {list(SUPPORTED_DIMENSIONS)}, got {self.dimensions}"
            )
        if not (np.isfinite(self.lower_bound) and np.isfinite(self.upper_bound)):
            raise ConfigurationError("Search space bounds must be finite")
        if self.lower_bound >= self.upper_bound:
            raise ConfigurationError(
                f"Lower bound ({self.lower_bound}) must be below upper bound ({self.upper_bound})"
            )

    @property
    def width(self) -> float:
        return self.upper_bound - self.lower_bound

    def sample(self, rng: np.random.Generator) -> np.ndarray:
        """Draw one position uniformly at random in [L, U]^d."""
        return rng.uniform(self.lower_bound, self.upper_bound, size=self.dimensions)

    def sample_many(self, n: int, rng: np.random.Generator) -> np.ndarray:
        """Draw ``n`` positions, one per row."""
        return rng.uniform(self.lower_bound, self.upper_bound, size=(n, self.dimensions))

    def clamp(self, position: np.ndarray) -> np.ndarray:
        """Project every component into [L, U]. Idempotent."""
        return np.clip(np.asarray(position, dtype=float), self.lower_bound, self.upper_bound)

    def contains(self, position: np.ndarray) -> bool:
        x = np.asarray(position, dtype=float)
        return bool(np.all((x >= self.lower_bound) & (x <= self.upper_bound)))
