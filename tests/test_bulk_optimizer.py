import threading

import pytest

from wasteroute.errors import InvalidInputError
from wasteroute.schemas.optimization import RouteOptimizationRequest, StopPayload
from wasteroute.services.routing import bulk
from wasteroute.services.routing.algorithms import Deadline
from wasteroute.services.routing.bulk import bulk_optimize, optimize_many

OPTIONS = {"distance_model": "planar", "planar_km_per_degree": 1.0, "seed": 11}


def _route(route_id: str, xs) -> RouteOptimizationRequest:
    return RouteOptimizationRequest(
        route_id=route_id,
        stops=[StopPayload(id=f"{route_id}-{i}", coordinates=[float(x), 0.0]) for i, x in enumerate(xs)],
    )


def _invalid_route(route_id: str) -> RouteOptimizationRequest:
    return RouteOptimizationRequest(
        route_id=route_id,
        stops=[
            StopPayload(id="ok", coordinates=[0.0, 0.0]),
            StopPayload(id="broken", coordinates=[float("nan"), 0.0]),
        ],
    )


@pytest.mark.parametrize("bad_position", [0, 1, 2])
def test_failing_route_does_not_affect_siblings(bad_position):
    good = [_route("A", [0, 30, 10, 20]), _route("B", [0, 5, 2, 7, 1])]
    requests = list(good)
    requests.insert(bad_position, _invalid_route("BAD"))

    result = optimize_many(requests, "genetic", OPTIONS, max_concurrency=2)
    isolated = optimize_many(good, "genetic", OPTIONS, max_concurrency=1)

    assert [outcome.route_id for outcome in result.succeeded] == ["A", "B"]
    assert [failure.route_id for failure in result.failed] == ["BAD"]
    assert result.failed[0].error == "InvalidInputError"
    for mixed, alone in zip(result.succeeded, isolated.succeeded):
        assert mixed.result.sequence == alone.result.sequence
        assert mixed.result.optimized_metrics == alone.result.optimized_metrics


def test_results_keep_input_order():
    requests = [_route(f"R{i}", [0, 3 * i + 1, i + 2, 2 * i + 5]) for i in range(8)]

    result = optimize_many(requests, "dijkstra", OPTIONS, max_concurrency=4)

    assert [outcome.route_id for outcome in result.succeeded] == [f"R{i}" for i in range(8)]
    assert result.failed == []
    assert result.algorithm == "dijkstra"


def test_aggregates_sum_successful_routes():
    requests = [_route("A", [0, 30, 10, 40, 20]), _route("B", [0, 20, 10]), _invalid_route("C")]

    result = optimize_many(requests, "dijkstra", OPTIONS)

    assert result.total_cost_savings == pytest.approx(sum(o.result.cost_savings for o in result.succeeded))
    assert result.total_time_saved_min == pytest.approx(sum(o.result.time_saved_min for o in result.succeeded))
    assert result.total_distance_saved_km == pytest.approx(40.0)


def test_mapping_requests_and_malformed_entries_are_isolated():
    requests = [
        {"route_id": "M1", "stops": [{"id": "a", "coordinates": [0, 0]}, {"id": "b", "coordinates": [1, 0]}]},
        {"route_id": "M2", "stops": [{"id": "a", "coordinates": [0]}]},
        {"stops": "not-a-list"},
    ]

    result = optimize_many(requests, "nearest_neighbor", OPTIONS)

    assert [outcome.route_id for outcome in result.succeeded] == ["M1"]
    assert [failure.route_id for failure in result.failed] == ["M2", "route_3"]
    assert all(failure.error == "InvalidInputError" for failure in result.failed)


def test_empty_batch():
    result = optimize_many([], "genetic", OPTIONS)
    assert result.succeeded == []
    assert result.failed == []
    assert result.total_cost_savings == 0


@pytest.mark.parametrize("kwargs", [{"max_concurrency": 0}, {"route_timeout_seconds": 0}])
def test_invalid_batch_settings_raise(kwargs):
    with pytest.raises(InvalidInputError):
        optimize_many([_route("A", [0, 1, 2])], "dijkstra", OPTIONS, **kwargs)


def test_invalid_shared_options_raise_before_running():
    with pytest.raises(InvalidInputError):
        optimize_many([_route("A", [0, 1, 2])], "dijkstra", {"mutation_rate": 2})


def test_bulk_optimize_returns_response_model():
    requests = [_route("A", [0, 30, 10, 40, 20]), _invalid_route("B")]

    response = bulk_optimize(requests, "ant_colony", OPTIONS, max_concurrency=2, route_timeout_seconds=30)

    assert response.algorithm == "ant_colony"
    assert [item.route_id for item in response.succeeded] == ["A"]
    assert response.succeeded[0].new_distance_km == pytest.approx(80.0)
    assert response.failed[0].route_id == "B"
    assert response.total_distance_saved_km == pytest.approx(40.0)


def test_route_that_never_returns_is_recorded_as_timeout(monkeypatch):
    release = threading.Event()
    optimize = bulk.optimize_stops

    def hanging_optimize(stops, *args, **kwargs):
        if stops and stops[0].stop_id.startswith("STUCK"):
            release.wait(30)
        return optimize(stops, *args, **kwargs)

    monkeypatch.setattr(bulk, "optimize_stops", hanging_optimize)
    monkeypatch.setattr(bulk, "STUCK_TASK_GRACE_SECONDS", 0.5)
    requests = [_route("A", [0, 30, 10, 20]), _route("STUCK", [0, 1, 2]), _route("B", [0, 20, 10])]

    try:
        result = optimize_many(requests, "dijkstra", OPTIONS, max_concurrency=3, route_timeout_seconds=1.0)
    finally:
        release.set()

    assert [outcome.route_id for outcome in result.succeeded] == ["A", "B"]
    assert [(failure.route_id, failure.error) for failure in result.failed] == [("STUCK", "TimeoutExceeded")]


def test_route_deadline_in_batch_returns_partial_success(monkeypatch):
    seen_timeouts = []

    class ExpiredDeadline:
        @staticmethod
        def after(seconds):
            seen_timeouts.append(seconds)
            return Deadline(expires_at=0.0, clock=lambda: 1.0)

    monkeypatch.setattr(bulk, "Deadline", ExpiredDeadline)
    requests = [_route("A", [0, 30, 10, 40, 20, 50]), _route("B", [0, 5, 2, 7, 1])]

    result = optimize_many(requests, "genetic", OPTIONS, max_concurrency=2, route_timeout_seconds=0.5)

    assert result.failed == []
    assert [outcome.route_id for outcome in result.succeeded] == ["A", "B"]
    assert all(outcome.result.partial for outcome in result.succeeded)
    assert all(outcome.result.metadata["status"] == "partial" for outcome in result.succeeded)
    assert seen_timeouts == [0.5, 0.5]
