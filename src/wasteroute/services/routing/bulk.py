"""Concurrent optimization of many routes with per-route failure isolation."""

from __future__ import annotations

import logging
import math
import os
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError, as_completed
from typing import Any, Mapping, Sequence

from pydantic import ValidationError

from ...config import settings
from ...errors import InvalidInputError, TimeoutExceeded
from ...schemas.optimization import BulkOptimizationResponse, RouteOptimizationRequest
from ..outputs.optimization_formatter import bulk_result_to_response
from .algorithms import Deadline, resolve_algorithm_name
from .models import BulkOptimizationResult, OptimizationResult, RouteFailure, RouteOutcome
from .options import build_solver_options
from .service import OptionsInput, optimize_stops

logger = logging.getLogger(__name__)

# Extra time allowed for cooperative deadlines to unwind before a task counts as stuck.
STUCK_TASK_GRACE_SECONDS = 5.0

RouteRequestInput = RouteOptimizationRequest | Mapping[str, Any]


def _route_id(request: RouteRequestInput, position: int) -> str:
    if isinstance(request, RouteOptimizationRequest):
        return request.route_id
    if isinstance(request, Mapping) and request.get("route_id"):
        return str(request["route_id"])
    return f"route_{position + 1}"


def _coerce_request(request: RouteRequestInput) -> RouteOptimizationRequest:
    if isinstance(request, RouteOptimizationRequest):
        return request
    try:
        return RouteOptimizationRequest.model_validate(request)
    except ValidationError as exc:
        raise InvalidInputError(f"Malformed route request: {exc}") from exc


def _default_concurrency() -> int:
    return settings.bulk_max_concurrency or os.cpu_count() or 1


def optimize_many(
    route_requests: Sequence[RouteRequestInput],
    algorithm: str | None = None,
    options: OptionsInput = None,
    max_concurrency: int | None = None,
    route_timeout_seconds: float | None = None,
) -> BulkOptimizationResult:
    """Optimize every route on a bounded worker pool.

    A failing route is recorded in ``failed`` and never affects its siblings.
    Results keep the input order regardless of completion order. Each route
    gets its own deadline, started when its task starts running.

    Raises:
        InvalidInputError: if the shared options or concurrency are invalid.
    """
    solver_options = build_solver_options(options)
    if max_concurrency is not None and max_concurrency < 1:
        raise InvalidInputError("max_concurrency must be >= 1")
    workers = max_concurrency or _default_concurrency()
    timeout = route_timeout_seconds if route_timeout_seconds is not None else solver_options.timeout_seconds
    if timeout is not None and timeout <= 0:
        raise InvalidInputError("route_timeout_seconds must be > 0")

    requested = algorithm or settings.default_algorithm
    algorithm_name, _ = resolve_algorithm_name(requested)

    def run(request: RouteRequestInput) -> OptimizationResult:
        payload = _coerce_request(request)
        stops = [stop.to_stop() for stop in payload.stops]
        return optimize_stops(stops, requested, solver_options, deadline=Deadline.after(timeout))

    total = len(route_requests)
    outcomes: list[RouteOutcome | RouteFailure | None] = [None] * total
    if total == 0:
        return BulkOptimizationResult(algorithm=algorithm_name, succeeded=[], failed=[])

    batch_timeout = None
    if timeout is not None:
        waves = math.ceil(total / workers)
        batch_timeout = timeout * waves + STUCK_TASK_GRACE_SECONDS

    logger.info(f"Optimizing {total} routes with '{algorithm_name}' on {workers} workers")
    timed_out = False
    executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="route-optimizer")
    try:
        future_to_position = {
            executor.submit(run, request): position for position, request in enumerate(route_requests)
        }
        try:
            for future in as_completed(future_to_position, timeout=batch_timeout):
                position = future_to_position[future]
                route_id = _route_id(route_requests[position], position)
                try:
                    outcomes[position] = RouteOutcome(route_id=route_id, result=future.result())
                except Exception as exc:
                    logger.error(f"Route {route_id} failed to optimize: {exc}")
                    outcomes[position] = RouteFailure(route_id=route_id, error=type(exc).__name__, reason=str(exc))
        except FuturesTimeoutError:
            timed_out = True
            for future, position in future_to_position.items():
                if outcomes[position] is not None:
                    continue
                future.cancel()
                route_id = _route_id(route_requests[position], position)
                error = TimeoutExceeded(f"Route {route_id} did not finish within {timeout}s")
                logger.error(str(error))
                outcomes[position] = RouteFailure(route_id=route_id, error=type(error).__name__, reason=str(error))
    finally:
        executor.shutdown(wait=not timed_out, cancel_futures=True)

    succeeded = [outcome for outcome in outcomes if isinstance(outcome, RouteOutcome)]
    failed = [outcome for outcome in outcomes if isinstance(outcome, RouteFailure)]
    result = BulkOptimizationResult(algorithm=algorithm_name, succeeded=succeeded, failed=failed)
    logger.info(
        f"Bulk optimization finished: {len(succeeded)} succeeded, {len(failed)} failed, "
        f"total cost savings {result.total_cost_savings:.2f}"
    )
    return result


def bulk_optimize(
    route_requests: Sequence[RouteRequestInput],
    algorithm: str | None = None,
    options: OptionsInput = None,
    max_concurrency: int | None = None,
    route_timeout_seconds: float | None = None,
) -> BulkOptimizationResponse:
    """Schema-level bulk entry point returning the response model."""
    result = optimize_many(
        route_requests,
        algorithm,
        options,
        max_concurrency,
        route_timeout_seconds=route_timeout_seconds,
    )
    return bulk_result_to_response(result)
