"""Route sequencing algorithms."""

from .ant_colony import AntColonyOptimization
from .base import AlgorithmOutcome, Deadline, RoutingAlgorithm, is_permutation
from .dispatcher import ALGORITHMS, DEFAULT_ALGORITHM, get_algorithm, resolve_algorithm_name
from .genetic import GeneticAlgorithm
from .nearest_neighbor import NearestNeighbor, NearestNeighborTwoOpt, nearest_neighbor_tour, two_opt
from .simulated_annealing import SimulatedAnnealing

__all__ = [
    "ALGORITHMS",
    "DEFAULT_ALGORITHM",
    "AlgorithmOutcome",
    "AntColonyOptimization",
    "Deadline",
    "GeneticAlgorithm",
    "NearestNeighbor",
    "NearestNeighborTwoOpt",
    "RoutingAlgorithm",
    "SimulatedAnnealing",
    "get_algorithm",
    "is_permutation",
    "nearest_neighbor_tour",
    "resolve_algorithm_name",
    "two_opt",
]
