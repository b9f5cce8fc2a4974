"""Genetic algorithm over visiting-order permutations."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from ..metrics import tour_distance
from ..options import SolverOptions
from .base import AlgorithmOutcome, Deadline, RoutingAlgorithm

logger = logging.getLogger(__name__)

Chromosome = list[int]


def _fitness(individual: Sequence[int], matrix: np.ndarray) -> float:
    distance = tour_distance(individual, matrix)
    # A zero-length tour cannot be beaten.
    return 1.0 / distance if distance > 0 else float("inf")


def order_crossover_child(segment_parent: Sequence[int], donor: Sequence[int], start: int, end: int) -> Chromosome:
    """Copy ``segment_parent[start..end]`` in place and fill the rest in donor order."""
    n = len(segment_parent)
    child: Chromosome = [-1] * n
    child[start : end + 1] = segment_parent[start : end + 1]
    used = set(child[start : end + 1])
    remaining = (gene for gene in donor if gene not in used)
    for position in range(n):
        if child[position] == -1:
            child[position] = next(remaining)
    return child


class GeneticAlgorithm(RoutingAlgorithm):
    """Population search with tournament selection, order crossover and elitism."""

    name = "genetic"

    def __init__(
        self,
        *,
        population_size: int | None = None,
        generations: int | None = None,
        mutation_rate: float = 0.1,
        elite_fraction: float = 0.2,
        tournament_size: int = 3,
    ) -> None:
        self.population_size = population_size
        self.generations = generations
        self.mutation_rate = mutation_rate
        self.elite_fraction = elite_fraction
        self.tournament_size = tournament_size

    @classmethod
    def from_options(cls, options: SolverOptions) -> "GeneticAlgorithm":
        return cls(
            population_size=options.population_size,
            generations=options.generations,
            mutation_rate=options.mutation_rate,
            elite_fraction=options.elite_fraction,
            tournament_size=options.tournament_size,
        )

    def _tournament_selection(
        self,
        population: list[Chromosome],
        fitness: Sequence[float],
        count: int,
        rng: np.random.Generator,
    ) -> list[Chromosome]:
        selected: list[Chromosome] = []
        for _ in range(count):
            contenders = rng.integers(0, len(population), size=self.tournament_size)
            winner = max((int(index) for index in contenders), key=lambda index: fitness[index])
            selected.append(list(population[winner]))
        return selected

    def _crossover(self, parents: list[Chromosome], rng: np.random.Generator) -> list[Chromosome]:
        offspring: list[Chromosome] = []
        for i in range(0, len(parents), 2):
            if i + 1 >= len(parents):
                offspring.append(list(parents[i]))
                continue
            parent_a, parent_b = parents[i], parents[i + 1]
            n = len(parent_a)
            start = int(rng.integers(n))
            end = start + int(rng.integers(n - start))
            offspring.append(order_crossover_child(parent_a, parent_b, start, end))
            offspring.append(order_crossover_child(parent_b, parent_a, start, end))
        return offspring

    def _mutate(self, population: list[Chromosome], rng: np.random.Generator) -> list[Chromosome]:
        mutated: list[Chromosome] = []
        for individual in population:
            if rng.random() < self.mutation_rate:
                individual = list(individual)
                i, j = (int(position) for position in rng.integers(len(individual), size=2))
                individual[i], individual[j] = individual[j], individual[i]
            mutated.append(individual)
        return mutated

    @staticmethod
    def _apply_elitism(
        previous: list[Chromosome],
        offspring: list[Chromosome],
        fitness: Sequence[float],
        elite_size: int,
    ) -> list[Chromosome]:
        ranked = np.argsort(-np.asarray(fitness, dtype=float), kind="stable")
        elite = [list(previous[int(index)]) for index in ranked[:elite_size]]
        return elite + offspring[: len(offspring) - elite_size]

    def solve(self, matrix: np.ndarray, *, rng: np.random.Generator, deadline: Deadline) -> AlgorithmOutcome:
        n = len(matrix)
        if n <= 1:
            return AlgorithmOutcome(sequence=list(range(n)))

        population_size = self.population_size or min(100, max(20, 4 * n))
        generations = self.generations if self.generations is not None else min(500, 10 * n)
        elite_size = int(population_size * self.elite_fraction)

        population: list[Chromosome] = [rng.permutation(n).tolist() for _ in range(population_size)]
        generations_run = 0
        partial = False
        for _ in range(generations):
            if deadline.expired:
                partial = True
                logger.warning(
                    f"Genetic search hit its deadline after {generations_run}/{generations} generations"
                )
                break
            fitness = [_fitness(individual, matrix) for individual in population]
            selected = self._tournament_selection(population, fitness, population_size, rng)
            offspring = self._mutate(self._crossover(selected, rng), rng)
            population = self._apply_elitism(population, offspring, fitness, elite_size)
            generations_run += 1

        distances = [tour_distance(individual, matrix) for individual in population]
        best_index = int(np.argmin(distances))
        return AlgorithmOutcome(
            sequence=list(population[best_index]),
            partial=partial,
            stats={
                "population_size": population_size,
                "generations": generations,
                "generations_run": generations_run,
                "elite_size": elite_size,
            },
        )
