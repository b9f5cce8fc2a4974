"""Nearest-neighbor construction and 2-opt local search."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..metrics import tour_distance
from .base import AlgorithmOutcome, Deadline, RoutingAlgorithm

# Guards against accepting reversals that only differ by floating point noise.
_MIN_GAIN = 1e-12


def nearest_neighbor_tour(matrix: np.ndarray) -> list[int]:
    """Greedy tour from index 0, always moving to the closest unvisited stop."""
    n = len(matrix)
    if n == 0:
        return []

    tour = [0]
    unvisited = list(range(1, n))
    current = 0
    while unvisited:
        # min() keeps the first of equally distant candidates, i.e. the lowest index.
        nearest = min(unvisited, key=lambda candidate: matrix[current, candidate])
        tour.append(nearest)
        unvisited.remove(nearest)
        current = nearest
    return tour


def _reverse_segment(tour: list[int], i: int, j: int) -> list[int]:
    return tour[:i] + tour[i : j + 1][::-1] + tour[j + 1 :]


def _two_opt(
    sequence: Sequence[int],
    matrix: np.ndarray,
    deadline: Deadline | None,
) -> tuple[list[int], int, bool]:
    best = [int(index) for index in sequence]
    best_distance = tour_distance(best, matrix)
    n = len(best)
    passes = 0

    improved = True
    while improved:
        improved = False
        passes += 1
        for i in range(1, n - 1):
            if deadline is not None and deadline.expired:
                return best, passes, True
            for j in range(i + 1, n):
                candidate = _reverse_segment(best, i, j)
                candidate_distance = tour_distance(candidate, matrix)
                if candidate_distance < best_distance - _MIN_GAIN:
                    best, best_distance = candidate, candidate_distance
                    improved = True
    return best, passes, False


def two_opt(sequence: Sequence[int], matrix: np.ndarray, deadline: Deadline | None = None) -> list[int]:
    """Improve a closed tour by segment reversals until a full pass finds nothing.

    Position 0 stays fixed. The result is never longer than the input tour.
    """
    tour, _, _ = _two_opt(sequence, matrix, deadline)
    return tour


class NearestNeighbor(RoutingAlgorithm):
    """Greedy construction only."""

    name = "nearest_neighbor"

    def solve(self, matrix: np.ndarray, *, rng: np.random.Generator, deadline: Deadline) -> AlgorithmOutcome:
        return AlgorithmOutcome(sequence=nearest_neighbor_tour(matrix))


class NearestNeighborTwoOpt(RoutingAlgorithm):
    """Nearest-neighbor construction refined by 2-opt.

    Registered as ``dijkstra`` for compatibility with existing callers; it does
    not perform any shortest-path graph search.
    """

    name = "dijkstra"

    def solve(self, matrix: np.ndarray, *, rng: np.random.Generator, deadline: Deadline) -> AlgorithmOutcome:
        initial = nearest_neighbor_tour(matrix)
        tour, passes, partial = _two_opt(initial, matrix, deadline)
        return AlgorithmOutcome(
            sequence=tour,
            partial=partial,
            stats={
                "construction_distance_km": tour_distance(initial, matrix),
                "two_opt_passes": passes,
            },
        )
