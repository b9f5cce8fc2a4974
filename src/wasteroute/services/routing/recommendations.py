"""Optimization recommendations for stored collection routes."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from ...config import settings
from ...models.domain import Priority
from .models import Recommendation, RecommendationReport, RouteSnapshot

SAVINGS_PER_RECOMMENDATION = 15.0


def _needs_reoptimization(snapshot: RouteSnapshot, now: datetime) -> bool:
    if not snapshot.is_optimized or snapshot.optimized_at is None:
        return True
    optimized_at = snapshot.optimized_at
    if optimized_at.tzinfo is None:
        optimized_at = optimized_at.replace(tzinfo=timezone.utc)
    return now - optimized_at > timedelta(days=settings.reoptimize_after_days)


def get_optimization_recommendations(snapshot: RouteSnapshot, now: datetime | None = None) -> RecommendationReport:
    """Suggest follow-up actions for a route: re-optimization, urgent bins, low completion."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    recommendations: list[Recommendation] = []

    if _needs_reoptimization(snapshot, now):
        recommendations.append(
            Recommendation(
                type="optimization_needed",
                priority=Priority.HIGH,
                title="Route Optimization Required",
                description="This route has not been optimized recently",
                action="optimize_route",
                estimated_savings="15-30% cost reduction",
            )
        )

    urgent = sum(1 for stop in snapshot.stops if stop.priority is Priority.URGENT)
    if urgent:
        recommendations.append(
            Recommendation(
                type="urgent_collections",
                priority=Priority.URGENT,
                title=f"{urgent} Urgent Collections",
                description="Some waste bins require immediate attention",
                action="prioritize_urgent",
                estimated_savings="Avoid penalties",
            )
        )

    if snapshot.completion_rate < settings.min_completion_rate:
        recommendations.append(
            Recommendation(
                type="efficiency_improvement",
                priority=Priority.MEDIUM,
                title="Low Completion Rate",
                description=f"Current completion rate: {snapshot.completion_rate * 100:.1f}%",
                action="analyze_bottlenecks",
                estimated_savings="10-20% time reduction",
            )
        )

    summary: dict[str, int] = {}
    for stop in snapshot.stops:
        summary[stop.priority.value] = summary.get(stop.priority.value, 0) + 1

    return RecommendationReport(
        route_id=snapshot.route_id,
        route_name=snapshot.name,
        last_optimized=snapshot.optimized_at,
        recommendations=recommendations,
        total_potential_savings=SAVINGS_PER_RECOMMENDATION * len(recommendations),
        summary=summary,
    )
