"""Optimisation utilities"""

from .population import Candidate, Population
from .population_builder import PopulationBuilder

__all__ = [
    "Candidate",
    "Population",
    "PopulationBuilder"
]
