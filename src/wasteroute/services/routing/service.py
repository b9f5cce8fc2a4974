"""Route optimization orchestration service."""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping, Sequence

import numpy as np

from ...config import settings
from ...errors import AlgorithmError, InvalidInputError
from ...models.domain import Priority, Stop
from ...schemas.optimization import OptimizationOptions, OptimizationResponse, RouteOptimizationRequest
from ..geospatial import route_geometry
from ..outputs.optimization_formatter import optimization_result_to_response
from .algorithms import Deadline, get_algorithm, is_permutation, resolve_algorithm_name
from .distance_matrix import build_distance_matrix, validate_stops
from .metrics import evaluate_route, improvement_percentage
from .models import OptimizationResult, RouteMetrics, StopAssignment
from .options import SolverOptions, build_solver_options

logger = logging.getLogger(__name__)

OptionsInput = OptimizationOptions | Mapping[str, Any] | SolverOptions | None

_ZERO_METRICS = RouteMetrics(total_distance_km=0.0, total_time_min=0.0, fuel_cost=0.0)


def _build_assignments(stops: Sequence[Stop], sequence: Sequence[int], options: SolverOptions) -> list[StopAssignment]:
    assignments: list[StopAssignment] = []
    for order, index in enumerate(sequence, start=1):
        stop = stops[index]
        estimated = stop.service_time_min if stop.service_time_min is not None else options.service_time_per_stop_min
        assignments.append(
            StopAssignment(
                stop_id=stop.stop_id,
                sequence_order=order,
                estimated_time_min=estimated,
                priority=stop.priority,
                longitude=stop.longitude,
                latitude=stop.latitude,
            )
        )
    return assignments


def _base_metadata(stops: Sequence[Stop], options: SolverOptions) -> dict:
    return {
        "stop_count": len(stops),
        "urgent_stops": sum(1 for stop in stops if stop.priority is Priority.URGENT),
        "distance_model": options.distance_model.value,
    }


def _empty_result(
    stops: Sequence[Stop],
    algorithm: str,
    requested: str,
    fallback: bool,
    options: SolverOptions,
) -> OptimizationResult:
    sequence = list(range(len(stops)))
    metadata = _base_metadata(stops, options)
    metadata["status"] = "trivial"
    return OptimizationResult(
        algorithm=algorithm,
        requested_algorithm=requested,
        algorithm_fallback=fallback,
        sequence=sequence,
        stops=_build_assignments(stops, sequence, options),
        original_metrics=_ZERO_METRICS,
        optimized_metrics=_ZERO_METRICS,
        improvement_percentage=0.0,
        route_geometry=None,
        partial=False,
        operational_cost_factor=options.operational_cost_factor,
        metadata=metadata,
    )


def optimize_stops(
    stops: Sequence[Stop],
    algorithm: str | None = None,
    options: OptionsInput = None,
    *,
    deadline: Deadline | None = None,
    rng: np.random.Generator | None = None,
) -> OptimizationResult:
    """Reorder ``stops`` with the named algorithm and compare against the input order.

    Unknown algorithm names fall back to ``dijkstra`` (nearest neighbor + 2-opt);
    the substitution is reported through ``algorithm_fallback``.

    Raises:
        InvalidInputError: for unusable coordinates or options.
        AlgorithmError: if an algorithm returns something other than a permutation.
    """
    solver_options = build_solver_options(options)
    stops = list(stops)
    validate_stops(stops)

    requested = algorithm or settings.default_algorithm
    algorithm_name, fallback = resolve_algorithm_name(requested)

    if len(stops) <= 1:
        return _empty_result(stops, algorithm_name, requested, fallback, solver_options)

    started = time.perf_counter()
    matrix = build_distance_matrix(
        stops,
        solver_options.distance_model,
        planar_km_per_degree=solver_options.planar_km_per_degree,
    )
    if rng is None:
        rng = np.random.default_rng(solver_options.seed)
    if deadline is None:
        deadline = Deadline.after(solver_options.timeout_seconds)

    solver = get_algorithm(algorithm_name, solver_options)
    outcome = solver.solve(matrix, rng=rng, deadline=deadline)
    sequence = [int(index) for index in outcome.sequence]
    if not is_permutation(sequence, len(stops)):
        raise AlgorithmError(
            f"Algorithm '{algorithm_name}' returned an invalid sequence for {len(stops)} stops: {sequence}"
        )

    original_sequence = list(range(len(stops)))
    original_metrics = evaluate_route(original_sequence, matrix, solver_options)
    optimized_metrics = evaluate_route(sequence, matrix, solver_options)
    improvement = improvement_percentage(original_metrics.total_distance_km, optimized_metrics.total_distance_km)
    elapsed = time.perf_counter() - started

    geometry = None
    if solver_options.include_geometry:
        geometry = route_geometry([stops[index].coordinates for index in sequence])

    metadata = _base_metadata(stops, solver_options)
    metadata.update(outcome.stats)
    metadata["status"] = "partial" if outcome.partial else "complete"
    metadata["elapsed_seconds"] = elapsed

    if outcome.partial:
        logger.warning(
            f"Optimization with '{algorithm_name}' stopped at its deadline; returning best sequence found so far"
        )
    logger.info(
        f"Optimized {len(stops)} stops with '{algorithm_name}': "
        f"{original_metrics.total_distance_km:.2f}km -> {optimized_metrics.total_distance_km:.2f}km "
        f"({improvement:.1f}% improvement) in {elapsed:.3f}s"
    )

    return OptimizationResult(
        algorithm=algorithm_name,
        requested_algorithm=requested,
        algorithm_fallback=fallback,
        sequence=sequence,
        stops=_build_assignments(stops, sequence, solver_options),
        original_metrics=original_metrics,
        optimized_metrics=optimized_metrics,
        improvement_percentage=improvement,
        route_geometry=geometry,
        partial=outcome.partial,
        operational_cost_factor=solver_options.operational_cost_factor,
        metadata=metadata,
    )


def optimize_route(
    payload: RouteOptimizationRequest,
    algorithm: str | None = None,
    options: OptionsInput = None,
) -> OptimizationResponse:
    """Schema-level entry point used by the route-management layer."""
    stops = [stop.to_stop() for stop in payload.stops]
    try:
        result = optimize_stops(stops, algorithm, options)
    except InvalidInputError as exc:
        logger.error(f"Route {payload.route_id} rejected: {exc}")
        raise
    return optimization_result_to_response(result, route_id=payload.route_id)
