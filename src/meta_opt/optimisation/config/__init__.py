"""
Configuration management for metaheuristic optimization.

This module provides typed, validated configuration for the six supported
algorithms together with run, monitoring and multi-run options.
"""

from .config_manager import (
    ALGORITHM_CONFIGS,
    AlgorithmConfig,
    BAConfig,
    DEConfig,
    FAConfig,
    GAConfig,
    GWOConfig,
    MonitoringConfig,
    MultiRunConfig,
    OptimizationConfigManager,
    PSOConfig,
    RunConfig,
    SearchSpaceConfig,
    create_algorithm_config,
    default_config,
)

__all__ = [
    "ALGORITHM_CONFIGS",
    "AlgorithmConfig",
    "PSOConfig",
    "GAConfig",
    "DEConfig",
    "FAConfig",
    "BAConfig",
    "GWOConfig",
    "SearchSpaceConfig",
    "RunConfig",
    "MonitoringConfig",
    "MultiRunConfig",
    "OptimizationConfigManager",
    "create_algorithm_config",
    "default_config",
]
