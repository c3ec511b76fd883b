from typing import Any

from ...exceptions import ConfigurationError
from .base import BaseObjective, CallableObjective
from .rastrigin import RastriginObjective

OBJECTIVES = {
    "rastrigin": RastriginObjective,
}


def create_objective(objective_config: dict[str, Any] | None = None) -> BaseObjective:
    """Create an objective from a ``{"type": ..., **params}`` dictionary."""
    params = dict(objective_config or {})
    objective_type = str(params.pop("type", "rastrigin")).lower()

    if objective_type not in OBJECTIVES:
        raise ConfigurationError(
            f"Unknown objective '{objective_type}'. Supported: {list(OBJECTIVES)}"
        )
    try:
        return OBJECTIVES[objective_type](**params)
    except TypeError as e:
        raise ConfigurationError(f"Invalid {objective_type} objective configuration: {e}") from e


__all__ = ["BaseObjective",
           "CallableObjective",
           "RastriginObjective",
           "create_objective"]
