"""Distance, time and fuel metrics for a closed collection tour."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .models import RouteMetrics
from .options import SolverOptions


def tour_distance(sequence: Sequence[int], matrix: np.ndarray) -> float:
    """Total closed-tour distance, including the edge back to ``sequence[0]``."""
    if len(sequence) <= 1:
        return 0.0
    order = np.asarray(sequence, dtype=np.intp)
    return float(matrix[order, np.roll(order, -1)].sum())


def evaluate_route(sequence: Sequence[int], matrix: np.ndarray, options: SolverOptions) -> RouteMetrics:
    if len(sequence) <= 1:
        return RouteMetrics(total_distance_km=0.0, total_time_min=0.0, fuel_cost=0.0)

    total_distance = tour_distance(sequence, matrix)
    travel_time = (total_distance / options.average_speed_kmh) * 60.0
    total_time = travel_time + len(sequence) * options.service_time_per_stop_min
    fuel_cost = total_distance * options.fuel_consumption_l_per_km * options.fuel_price_per_l
    return RouteMetrics(
        total_distance_km=total_distance,
        total_time_min=total_time,
        fuel_cost=fuel_cost,
    )


def improvement_percentage(original_distance: float, optimized_distance: float) -> float:
    if original_distance == 0:
        return 0.0
    return (original_distance - optimized_distance) / original_distance * 100.0
