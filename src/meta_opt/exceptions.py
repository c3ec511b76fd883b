"""Exception types raised by the optimisation engine."""


class ConfigurationError(ValueError):
    """Raised when a configuration is rejected before a run is created."""


class NumericDivergenceError(RuntimeError):
    """Raised when a step produces a non-finite fitness value."""


class OptimizerStateError(RuntimeError):
    """Raised when a command is issued in a state that does not allow it."""
