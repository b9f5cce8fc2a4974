"""Base classes for route sequencing algorithms."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Sequence

import numpy as np


class Deadline:
    """Cooperative deadline checked by algorithms at iteration boundaries."""

    def __init__(self, expires_at: float | None = None, clock: Callable[[], float] = time.monotonic) -> None:
        self.expires_at = expires_at
        self._clock = clock

    @classmethod
    def after(cls, seconds: float | None, clock: Callable[[], float] = time.monotonic) -> "Deadline":
        if seconds is None:
            return cls(None, clock)
        return cls(clock() + seconds, clock)

    @classmethod
    def never(cls) -> "Deadline":
        return cls(None)

    @property
    def expired(self) -> bool:
        return self.expires_at is not None and self._clock() >= self.expires_at

    def remaining(self) -> float | None:
        if self.expires_at is None:
            return None
        return max(0.0, self.expires_at - self._clock())


@dataclass(slots=True)
class AlgorithmOutcome:
    sequence: list[int]
    partial: bool = False
    stats: dict = field(default_factory=dict)


class RoutingAlgorithm(ABC):
    """Contract for sequencing algorithms: distance matrix in, visiting order out."""

    name: str = ""

    @abstractmethod
    def solve(
        self,
        matrix: np.ndarray,
        *,
        rng: np.random.Generator,
        deadline: Deadline,
    ) -> AlgorithmOutcome:
        raise NotImplementedError


def is_permutation(sequence: Sequence[int], n: int) -> bool:
    return len(sequence) == n and sorted(int(index) for index in sequence) == list(range(n))
