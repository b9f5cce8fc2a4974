"""Simulated annealing over swap neighbourhoods."""

from __future__ import annotations

import logging
import math

import numpy as np

from ..metrics import tour_distance
from ..options import SolverOptions
from .base import AlgorithmOutcome, Deadline, RoutingAlgorithm

logger = logging.getLogger(__name__)


class SimulatedAnnealing(RoutingAlgorithm):
    name = "simulated_annealing"

    def __init__(
        self,
        *,
        initial_temperature: float = 1000.0,
        cooling_rate: float = 0.995,
        min_temperature: float = 1.0,
    ) -> None:
        self.initial_temperature = initial_temperature
        self.cooling_rate = cooling_rate
        self.min_temperature = min_temperature

    @classmethod
    def from_options(cls, options: SolverOptions) -> "SimulatedAnnealing":
        return cls(
            initial_temperature=options.initial_temperature,
            cooling_rate=options.cooling_rate,
            min_temperature=options.min_temperature,
        )

    def solve(self, matrix: np.ndarray, *, rng: np.random.Generator, deadline: Deadline) -> AlgorithmOutcome:
        n = len(matrix)
        current = list(range(n))
        if n <= 1:
            return AlgorithmOutcome(sequence=current)

        current_distance = tour_distance(current, matrix)
        best, best_distance = list(current), current_distance
        temperature = self.initial_temperature
        steps = 0
        accepted = 0
        partial = False

        while temperature >= self.min_temperature:
            if deadline.expired:
                partial = True
                logger.warning(f"Simulated annealing hit its deadline after {steps} steps (T={temperature:.3f})")
                break
            candidate = list(current)
            i, j = (int(position) for position in rng.integers(n, size=2))
            candidate[i], candidate[j] = candidate[j], candidate[i]
            candidate_distance = tour_distance(candidate, matrix)
            delta = candidate_distance - current_distance

            if delta < 0 or rng.random() < math.exp(-delta / temperature):
                current, current_distance = candidate, candidate_distance
                accepted += 1
                if current_distance < best_distance:
                    best, best_distance = list(current), current_distance

            temperature *= self.cooling_rate
            steps += 1

        return AlgorithmOutcome(
            sequence=best,
            partial=partial,
            stats={
                "steps": steps,
                "accepted_moves": accepted,
                "final_temperature": temperature,
            },
        )
