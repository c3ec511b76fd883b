"""
Optimisation runners.

``RunController`` drives a single run step by step through a ``Scheduler``;
``BatchRunner`` combines it with the configuration system to execute
complete single and multi-run optimisations.
"""

from .batch_runner import BatchRunner, MultiRunResult, OptimizationResult
from .best_tracker import BestSolutionsTracker, BestTracker
from .run_controller import RunController, RunSnapshot, RunStatus
from .scheduler import AsyncioScheduler, CancellationToken, ManualScheduler, Scheduler

__all__ = [
    'BatchRunner',
    'OptimizationResult',
    'MultiRunResult',
    'BestTracker',
    'BestSolutionsTracker',
    'RunController',
    'RunSnapshot',
    'RunStatus',
    'Scheduler',
    'ManualScheduler',
    'AsyncioScheduler',
    'CancellationToken',
]
