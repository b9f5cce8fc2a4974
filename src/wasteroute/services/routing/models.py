"""Routing optimization domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from ...models.domain import Priority, Stop


@dataclass(slots=True, frozen=True)
class RouteMetrics:
    total_distance_km: float
    total_time_min: float
    fuel_cost: float


@dataclass(slots=True)
class StopAssignment:
    stop_id: str
    sequence_order: int
    estimated_time_min: float
    priority: Priority
    longitude: float
    latitude: float


@dataclass(slots=True)
class OptimizationResult:
    algorithm: str
    requested_algorithm: str
    algorithm_fallback: bool
    sequence: List[int]
    stops: List[StopAssignment]
    original_metrics: RouteMetrics
    optimized_metrics: RouteMetrics
    improvement_percentage: float
    route_geometry: Optional[dict] = None
    partial: bool = False
    operational_cost_factor: float = 1.0
    metadata: dict = field(default_factory=dict)

    @property
    def time_saved_min(self) -> float:
        return self.original_metrics.total_time_min - self.optimized_metrics.total_time_min

    @property
    def fuel_saved(self) -> float:
        return self.original_metrics.fuel_cost - self.optimized_metrics.fuel_cost

    @property
    def distance_saved_km(self) -> float:
        return self.original_metrics.total_distance_km - self.optimized_metrics.total_distance_km

    @property
    def cost_savings(self) -> float:
        return self.fuel_saved * self.operational_cost_factor


@dataclass(slots=True)
class RouteFailure:
    route_id: str
    error: str
    reason: str


@dataclass(slots=True)
class RouteOutcome:
    route_id: str
    result: OptimizationResult


@dataclass(slots=True)
class BulkOptimizationResult:
    algorithm: str
    succeeded: List[RouteOutcome]
    failed: List[RouteFailure]

    @property
    def total_cost_savings(self) -> float:
        return sum(outcome.result.cost_savings for outcome in self.succeeded)

    @property
    def total_time_saved_min(self) -> float:
        return sum(outcome.result.time_saved_min for outcome in self.succeeded)

    @property
    def total_distance_saved_km(self) -> float:
        return sum(outcome.result.distance_saved_km for outcome in self.succeeded)


@dataclass(slots=True)
class RouteSnapshot:
    """What the route-management layer knows about a stored route."""

    route_id: str
    stops: List[Stop]
    name: Optional[str] = None
    is_optimized: bool = False
    optimized_at: Optional[datetime] = None
    completion_rate: float = 0.0


@dataclass(slots=True)
class Recommendation:
    type: str
    priority: Priority
    title: str
    description: str
    action: str
    estimated_savings: str


@dataclass(slots=True)
class RecommendationReport:
    route_id: str
    route_name: Optional[str]
    last_optimized: Optional[datetime]
    recommendations: List[Recommendation]
    total_potential_savings: float
    summary: Dict[str, int] = field(default_factory=dict)
