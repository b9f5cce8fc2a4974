from datetime import datetime, timedelta, timezone

import pytest

from wasteroute.models.domain import Priority, Stop
from wasteroute.services.outputs.optimization_formatter import recommendation_report_to_response
from wasteroute.services.routing.models import RouteSnapshot
from wasteroute.services.routing.recommendations import (
    SAVINGS_PER_RECOMMENDATION,
    get_optimization_recommendations,
)

NOW = datetime(2024, 5, 20, 12, 0, tzinfo=timezone.utc)


def _stop(sid: str, priority: Priority = Priority.MEDIUM) -> Stop:
    return Stop(stop_id=sid, longitude=79.86, latitude=6.92, priority=priority)


def test_never_optimized_route_gets_all_recommendations():
    snapshot = RouteSnapshot(
        route_id="R-1",
        name="Colombo North",
        stops=[_stop("A", Priority.URGENT), _stop("B", Priority.URGENT), _stop("C")],
        completion_rate=0.5,
    )

    report = get_optimization_recommendations(snapshot, now=NOW)

    assert [item.type for item in report.recommendations] == [
        "optimization_needed",
        "urgent_collections",
        "efficiency_improvement",
    ]
    assert report.recommendations[1].title == "2 Urgent Collections"
    assert report.recommendations[2].description == "Current completion rate: 50.0%"
    assert report.total_potential_savings == pytest.approx(3 * SAVINGS_PER_RECOMMENDATION)
    assert report.summary == {"urgent": 2, "medium": 1}
    assert report.route_name == "Colombo North"


def test_recently_optimized_healthy_route_needs_nothing():
    snapshot = RouteSnapshot(
        route_id="R-2",
        stops=[_stop("A"), _stop("B", Priority.LOW)],
        is_optimized=True,
        optimized_at=NOW - timedelta(days=2),
        completion_rate=0.95,
    )

    report = get_optimization_recommendations(snapshot, now=NOW)

    assert report.recommendations == []
    assert report.total_potential_savings == 0
    assert report.last_optimized == NOW - timedelta(days=2)


@pytest.mark.parametrize(
    ("age", "expected"),
    [(timedelta(days=6), False), (timedelta(days=7), False), (timedelta(days=7, hours=1), True)],
)
def test_stale_optimization_triggers_reoptimization(age, expected):
    snapshot = RouteSnapshot(
        route_id="R-3",
        stops=[_stop("A")],
        is_optimized=True,
        optimized_at=NOW - age,
        completion_rate=1.0,
    )

    report = get_optimization_recommendations(snapshot, now=NOW)

    assert ("optimization_needed" in [item.type for item in report.recommendations]) is expected


def test_naive_timestamps_are_treated_as_utc():
    snapshot = RouteSnapshot(
        route_id="R-4",
        stops=[],
        is_optimized=True,
        optimized_at=datetime(2024, 5, 19, 12, 0),
        completion_rate=1.0,
    )

    report = get_optimization_recommendations(snapshot, now=NOW)

    assert report.recommendations == []


def test_report_serializes_to_response_model():
    snapshot = RouteSnapshot(route_id="R-5", stops=[_stop("A", Priority.URGENT)], completion_rate=1.0)

    response = recommendation_report_to_response(get_optimization_recommendations(snapshot, now=NOW))

    assert response.route_id == "R-5"
    assert [item.action for item in response.recommendations] == ["optimize_route", "prioritize_urgent"]
    assert response.recommendations[1].priority == Priority.URGENT
    assert response.total_potential_savings == pytest.approx(30.0)
