"""Serializers for optimization outputs."""

from __future__ import annotations

from ...schemas.optimization import (
    BulkOptimizationResponse,
    OptimizationResponse,
    RecommendationModel,
    RecommendationReportModel,
    RouteFailureModel,
    RouteGeometryModel,
    RouteMetricsModel,
    StopAssignmentModel,
)
from ..routing.models import BulkOptimizationResult, OptimizationResult, RecommendationReport, RouteMetrics


def _metrics_model(metrics: RouteMetrics) -> RouteMetricsModel:
    return RouteMetricsModel(
        total_distance_km=metrics.total_distance_km,
        total_time_min=metrics.total_time_min,
        fuel_cost=metrics.fuel_cost,
    )


def optimization_result_to_response(result: OptimizationResult, route_id: str | None = None) -> OptimizationResponse:
    return OptimizationResponse(
        route_id=route_id,
        algorithm=result.algorithm,
        requested_algorithm=result.requested_algorithm,
        algorithm_fallback=result.algorithm_fallback,
        partial=result.partial,
        sequence=list(result.sequence),
        stops=[
            StopAssignmentModel(
                stop_id=stop.stop_id,
                sequence_order=stop.sequence_order,
                estimated_time_min=stop.estimated_time_min,
                priority=stop.priority,
                coordinates=[stop.longitude, stop.latitude],
            )
            for stop in result.stops
        ],
        original_metrics=_metrics_model(result.original_metrics),
        optimized_metrics=_metrics_model(result.optimized_metrics),
        previous_distance_km=result.original_metrics.total_distance_km,
        new_distance_km=result.optimized_metrics.total_distance_km,
        improvement_percentage=result.improvement_percentage,
        time_saved_min=result.time_saved_min,
        fuel_saved=result.fuel_saved,
        cost_savings=result.cost_savings,
        route_geometry=RouteGeometryModel(**result.route_geometry) if result.route_geometry else None,
        metadata=result.metadata,
    )


def bulk_result_to_response(result: BulkOptimizationResult) -> BulkOptimizationResponse:
    return BulkOptimizationResponse(
        algorithm=result.algorithm,
        succeeded=[
            optimization_result_to_response(outcome.result, route_id=outcome.route_id)
            for outcome in result.succeeded
        ],
        failed=[
            RouteFailureModel(route_id=failure.route_id, error=failure.error, reason=failure.reason)
            for failure in result.failed
        ],
        total_cost_savings=result.total_cost_savings,
        total_time_saved_min=result.total_time_saved_min,
        total_distance_saved_km=result.total_distance_saved_km,
    )


def recommendation_report_to_response(report: RecommendationReport) -> RecommendationReportModel:
    return RecommendationReportModel(
        route_id=report.route_id,
        route_name=report.route_name,
        last_optimized=report.last_optimized,
        recommendations=[
            RecommendationModel(
                type=item.type,
                priority=item.priority,
                title=item.title,
                description=item.description,
                action=item.action,
                estimated_savings=item.estimated_savings,
            )
            for item in report.recommendations
        ],
        total_potential_savings=report.total_potential_savings,
        summary=report.summary,
    )
