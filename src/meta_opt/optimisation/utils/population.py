"""
Candidate and population data model.

A ``Candidate`` is one solution: a position, its fitness and whatever
auxiliary state its algorithm needs (velocity and personal best for PSO;
velocity, frequency, pulse rate and loudness for BA). A ``Population`` is
the ordered, fixed-size collection of candidates for one iteration.

Both are immutable. Strategies build new candidates with
``Candidate.replace`` and return a new ``Population`` from every step, so
a snapshot handed to an observer can never change under it.
"""

import dataclasses
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np


def _frozen_array(values) -> np.ndarray:
    arr = np.array(values, dtype=float)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class Candidate:
    """
    One solution of the population.

    Attributes:
        position: Decision vector, read-only, always inside the bounds.
        fitness: Objective value at ``position`` (lower is better).
        velocity: PSO and BA velocity, None for the other algorithms.
        personal_best_position: PSO personal best position.
        personal_best_fitness: PSO personal best fitness.
        frequency: BA frequency drawn for the latest move.
        pulse_rate: BA pulse emission rate.
        loudness: BA loudness.
    """

    position: np.ndarray
    fitness: float
    velocity: np.ndarray | None = None
    personal_best_position: np.ndarray | None = None
    personal_best_fitness: float | None = None
    frequency: float | None = None
    pulse_rate: float | None = None
    loudness: float | None = None

    def __post_init__(self):
        object.__setattr__(self, "position", _frozen_array(self.position))
        object.__setattr__(self, "fitness", float(self.fitness))
        for name in ("velocity", "personal_best_position"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, _frozen_array(value))

    @property
    def dimensions(self) -> int:
        return int(self.position.size)

    def replace(self, **changes) -> "Candidate":
        """Return a copy of the candidate with some fields changed."""
        return dataclasses.replace(self, **changes)

    def copy_position(self) -> np.ndarray:
        """Writable copy of the position."""
        return np.array(self.position, dtype=float)

    def to_dict(self) -> dict[str, Any]:
        data = {"position": self.position.tolist(), "fitness": self.fitness}
        if self.velocity is not None:
            data["velocity"] = self.velocity.tolist()
        if self.personal_best_position is not None:
            data["personal_best_position"] = self.personal_best_position.tolist()
            data["personal_best_fitness"] = self.personal_best_fitness
        for name in ("frequency", "pulse_rate", "loudness"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data

    def __eq__(self, other) -> bool:
        if not isinstance(other, Candidate):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        pos = ", ".join(f"{v:.4f}" for v in self.position)
        return f"Candidate(position=[{pos}], fitness={self.fitness:.6f})"


class Population(Sequence):
    """
    Immutable ordered sequence of candidates.

    The population size is fixed for the run; every strategy step returns
    a new population of the same size.
    """

    def __init__(self, candidates):
        self._candidates = tuple(candidates)
        if not self._candidates:
            raise ValueError("Population cannot be empty")

    def __len__(self) -> int:
        return len(self._candidates)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self._candidates)

    def __getitem__(self, index):
        return self._candidates[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Population):
            return NotImplemented
        return self._candidates == other._candidates

    def __repr__(self) -> str:
        return f"Population(size={len(self)}, best_fitness={self.best().fitness:.6f})"

    @property
    def candidates(self) -> tuple[Candidate, ...]:
        return self._candidates

    @property
    def dimensions(self) -> int:
        return self._candidates[0].dimensions

    def positions(self) -> np.ndarray:
        """(N, d) array of positions (a writable copy)."""
        return np.array([c.position for c in self._candidates], dtype=float)

    def fitness(self) -> np.ndarray:
        return np.array([c.fitness for c in self._candidates], dtype=float)

    def best_index(self) -> int:
        """Index of the lowest fitness, the first one on ties."""
        return int(np.argmin(self.fitness()))

    def best(self) -> Candidate:
        return self._candidates[self.best_index()]

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.fitness())))

    def statistics(self) -> dict[str, float]:
        """Best, worst, mean and standard deviation of the population fitness."""
        f = self.fitness()
        return {
            "best_fitness": float(np.min(f)),
            "worst_fitness": float(np.max(f)),
            "mean_fitness": float(np.mean(f)),
            "std_fitness": float(np.std(f)),
            "population_size": len(f),
        }
