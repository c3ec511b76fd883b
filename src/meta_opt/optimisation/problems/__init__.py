from .bounded_problem import BoundedProblem
from .search_space import SearchSpace

__all__ = ["BoundedProblem", "SearchSpace"]
