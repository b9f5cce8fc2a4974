"""Factory for sequencing algorithms based on caller selection."""

from __future__ import annotations

import logging

from ..options import SolverOptions
from .ant_colony import AntColonyOptimization
from .base import RoutingAlgorithm
from .genetic import GeneticAlgorithm
from .nearest_neighbor import NearestNeighbor, NearestNeighborTwoOpt
from .simulated_annealing import SimulatedAnnealing

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "dijkstra"
ALGORITHMS = ("dijkstra", "nearest_neighbor", "genetic", "ant_colony", "simulated_annealing")

_ALIASES = {
    "nearest_neighbor_2opt": "dijkstra",
    "two_opt": "dijkstra",
    "ga": "genetic",
    "aco": "ant_colony",
    "sa": "simulated_annealing",
}


def resolve_algorithm_name(name: str | None) -> tuple[str, bool]:
    """Return the canonical algorithm name and whether the default was substituted."""
    if not name:
        return DEFAULT_ALGORITHM, False
    normalized = name.strip().lower().replace("-", "_").replace(" ", "_")
    normalized = _ALIASES.get(normalized, normalized)
    if normalized in ALGORITHMS:
        return normalized, False
    logger.warning(f"Unknown optimization algorithm '{name}', falling back to '{DEFAULT_ALGORITHM}'")
    return DEFAULT_ALGORITHM, True


def get_algorithm(name: str, options: SolverOptions | None = None) -> RoutingAlgorithm:
    options = options or SolverOptions()
    match name:
        case "dijkstra":
            return NearestNeighborTwoOpt()
        case "nearest_neighbor":
            return NearestNeighbor()
        case "genetic":
            return GeneticAlgorithm.from_options(options)
        case "ant_colony":
            return AntColonyOptimization.from_options(options)
        case "simulated_annealing":
            return SimulatedAnnealing.from_options(options)
        case _:
            raise ValueError(f"Unknown optimization algorithm '{name}'.")
