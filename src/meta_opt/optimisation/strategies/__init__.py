"""
Population update strategies.

One strategy per algorithm; ``get_strategy`` maps an algorithm name to its
class.
"""

from ...exceptions import ConfigurationError
from .ba import BAStrategy
from .base import OptimizerStrategy, StepResult
from .de import DEStrategy
from .fa import FAStrategy
from .ga import GAStrategy
from .gwo import GWOStrategy
from .pso import PSOStrategy

STRATEGIES: dict[str, type[OptimizerStrategy]] = {
    "PSO": PSOStrategy,
    "GA": GAStrategy,
    "DE": DEStrategy,
    "FA": FAStrategy,
    "BA": BAStrategy,
    "GWO": GWOStrategy,
}


def get_strategy(name: str) -> type[OptimizerStrategy]:
    """Look up a strategy class by algorithm name (case-insensitive)."""
    key = name.upper()
    if key not in STRATEGIES:
        raise ConfigurationError(f"Unknown algorithm '{name}'. Supported: {list(STRATEGIES)}")
    return STRATEGIES[key]


__all__ = [
    "OptimizerStrategy",
    "StepResult",
    "PSOStrategy",
    "GAStrategy",
    "DEStrategy",
    "FAStrategy",
    "BAStrategy",
    "GWOStrategy",
    "STRATEGIES",
    "get_strategy",
]
