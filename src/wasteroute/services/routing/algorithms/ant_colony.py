"""Ant colony optimization for closed collection tours."""

from __future__ import annotations

import logging

import numpy as np

from ..metrics import tour_distance
from ..options import SolverOptions
from .base import AlgorithmOutcome, Deadline, RoutingAlgorithm

logger = logging.getLogger(__name__)


class AntColonyOptimization(RoutingAlgorithm):
    """Pheromone-guided tour construction.

    Every ant starts at index 0 and picks the next stop by roulette wheel over
    the unvisited stops, weighted by ``pheromone^alpha * (1/distance)^beta``.
    After each iteration pheromones evaporate and every ant deposits
    ``Q / tour_length`` on the edges it used, including the closing edge.
    The best tour seen over all iterations is returned.
    """

    name = "ant_colony"

    def __init__(
        self,
        *,
        ant_count: int | None = None,
        iterations: int | None = None,
        alpha: float = 1.0,
        beta: float = 2.0,
        evaporation_rate: float = 0.1,
        deposit: float = 1.0,
    ) -> None:
        self.ant_count = ant_count
        self.iterations = iterations
        self.alpha = alpha
        self.beta = beta
        self.evaporation_rate = evaporation_rate
        self.deposit = deposit

    @classmethod
    def from_options(cls, options: SolverOptions) -> "AntColonyOptimization":
        return cls(
            ant_count=options.ant_count,
            iterations=options.ant_iterations,
            alpha=options.alpha,
            beta=options.beta,
            evaporation_rate=options.evaporation_rate,
            deposit=options.pheromone_deposit,
        )

    def _select_next(
        self,
        current: int,
        unvisited: np.ndarray,
        matrix: np.ndarray,
        pheromones: np.ndarray,
        rng: np.random.Generator,
    ) -> int:
        distances = matrix[current, unvisited]
        zero = np.flatnonzero(distances == 0)
        if zero.size:
            # Co-located stop: visiting it costs nothing.
            return int(unvisited[zero[0]])

        weights = pheromones[current, unvisited] ** self.alpha * (1.0 / distances) ** self.beta
        total = float(weights.sum())
        if not np.isfinite(total) or total <= 0:
            return int(unvisited[int(rng.integers(unvisited.size))])

        threshold = rng.random() * total
        position = int(np.searchsorted(np.cumsum(weights), threshold, side="left"))
        return int(unvisited[min(position, unvisited.size - 1)])

    def construct_tour(
        self,
        matrix: np.ndarray,
        pheromones: np.ndarray,
        rng: np.random.Generator,
    ) -> list[int]:
        n = len(matrix)
        tour = [0]
        unvisited = np.arange(1, n)
        while unvisited.size:
            chosen = self._select_next(tour[-1], unvisited, matrix, pheromones, rng)
            tour.append(chosen)
            unvisited = unvisited[unvisited != chosen]
        return tour

    def update_pheromones(
        self,
        pheromones: np.ndarray,
        tours: list[list[int]],
        lengths: list[float],
    ) -> np.ndarray:
        updated = pheromones * (1.0 - self.evaporation_rate)
        for tour, length in zip(tours, lengths):
            if length <= 0:
                continue
            amount = self.deposit / length
            origin = np.asarray(tour, dtype=np.intp)
            target = np.roll(origin, -1)
            np.add.at(updated, (origin, target), amount)
            np.add.at(updated, (target, origin), amount)
        return updated

    def solve(self, matrix: np.ndarray, *, rng: np.random.Generator, deadline: Deadline) -> AlgorithmOutcome:
        n = len(matrix)
        if n <= 1:
            return AlgorithmOutcome(sequence=list(range(n)))

        ant_count = self.ant_count or min(50, 2 * n)
        iterations = self.iterations if self.iterations is not None else min(200, 5 * n)

        pheromones = np.ones((n, n), dtype=float)
        best_tour: list[int] = list(range(n))
        best_distance = tour_distance(best_tour, matrix)
        found = False
        iteration_best: list[float] = []
        partial = False

        for iteration in range(iterations):
            if deadline.expired:
                partial = True
                logger.warning(f"Ant colony hit its deadline after {iteration}/{iterations} iterations")
                break
            tours: list[list[int]] = []
            lengths: list[float] = []
            for _ in range(ant_count):
                tour = self.construct_tour(matrix, pheromones, rng)
                length = tour_distance(tour, matrix)
                tours.append(tour)
                lengths.append(length)
                if not found or length < best_distance:
                    best_tour, best_distance = list(tour), length
                    found = True
            iteration_best.append(min(lengths))
            pheromones = self.update_pheromones(pheromones, tours, lengths)

        return AlgorithmOutcome(
            sequence=best_tour,
            partial=partial,
            stats={
                "ant_count": ant_count,
                "iterations": iterations,
                "iterations_run": len(iteration_best),
                "iteration_best_distances": iteration_best,
            },
        )
