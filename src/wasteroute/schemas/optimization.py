"""Route optimization request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ..models.domain import Priority, Stop


class StopPayload(BaseModel):
    """A stop as supplied by the route-management collaborator."""

    id: str
    coordinates: List[float] = Field(..., description="[longitude, latitude]")
    priority: Priority = Priority.MEDIUM
    estimated_time: Optional[float] = Field(default=None, ge=0, description="Service time in minutes.")

    @field_validator("coordinates")
    @classmethod
    def _check_pair(cls, value: List[float]) -> List[float]:
        if len(value) != 2:
            raise ValueError("coordinates must be a [longitude, latitude] pair")
        return value

    def to_stop(self) -> Stop:
        longitude, latitude = self.coordinates
        return Stop(
            stop_id=self.id,
            longitude=longitude,
            latitude=latitude,
            priority=self.priority,
            service_time_min=self.estimated_time,
        )


class OptimizationOptions(BaseModel):
    """Per-request overrides. Omitted fields fall back to configured defaults."""

    distance_model: Optional[Literal["planar", "great_circle", "euclidean", "haversine"]] = None
    planar_km_per_degree: Optional[float] = Field(None, gt=0)
    average_speed_kmh: Optional[float] = Field(None, gt=0)
    service_time_per_stop_min: Optional[float] = Field(None, ge=0)
    fuel_consumption_l_per_km: Optional[float] = Field(None, ge=0)
    fuel_price_per_l: Optional[float] = Field(None, ge=0)
    operational_cost_factor: Optional[float] = Field(None, ge=0)

    population_size: Optional[int] = Field(None, ge=2)
    generations: Optional[int] = Field(None, ge=0)
    mutation_rate: Optional[float] = Field(None, ge=0, le=1)
    elite_fraction: Optional[float] = Field(None, ge=0, lt=1)
    tournament_size: Optional[int] = Field(None, ge=1)

    ant_count: Optional[int] = Field(None, ge=1)
    ant_iterations: Optional[int] = Field(None, ge=0)
    alpha: Optional[float] = Field(None, ge=0)
    beta: Optional[float] = Field(None, ge=0)
    evaporation_rate: Optional[float] = Field(None, ge=0, le=1)
    pheromone_deposit: Optional[float] = Field(None, gt=0)

    initial_temperature: Optional[float] = Field(None, gt=0)
    cooling_rate: Optional[float] = Field(None, gt=0, lt=1)
    min_temperature: Optional[float] = Field(None, gt=0)

    seed: Optional[int] = Field(None, ge=0, description="Seed for the randomized algorithms.")
    timeout_seconds: Optional[float] = Field(None, gt=0)
    include_geometry: Optional[bool] = None

    @field_validator("distance_model", mode="before")
    @classmethod
    def _normalize_distance_model(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower().replace("-", "_")
        return value


class RouteOptimizationRequest(BaseModel):
    route_id: str
    stops: List[StopPayload] = Field(default_factory=list)


class RouteMetricsModel(BaseModel):
    total_distance_km: float
    total_time_min: float
    fuel_cost: float


class StopAssignmentModel(BaseModel):
    stop_id: str
    sequence_order: int
    estimated_time_min: float
    priority: Priority
    coordinates: List[float]


class RouteGeometryModel(BaseModel):
    type: Literal["LineString"] = "LineString"
    coordinates: List[List[float]]


class OptimizationResponse(BaseModel):
    route_id: Optional[str] = None
    algorithm: str
    requested_algorithm: str
    algorithm_fallback: bool
    partial: bool
    sequence: List[int]
    stops: List[StopAssignmentModel]
    original_metrics: RouteMetricsModel
    optimized_metrics: RouteMetricsModel
    previous_distance_km: float
    new_distance_km: float
    improvement_percentage: float
    time_saved_min: float
    fuel_saved: float
    cost_savings: float
    route_geometry: Optional[RouteGeometryModel] = None
    metadata: dict


class RouteFailureModel(BaseModel):
    route_id: str
    error: str
    reason: str


class BulkOptimizationResponse(BaseModel):
    algorithm: str
    succeeded: List[OptimizationResponse]
    failed: List[RouteFailureModel]
    total_cost_savings: float
    total_time_saved_min: float
    total_distance_saved_km: float


class RecommendationModel(BaseModel):
    type: str
    priority: Priority
    title: str
    description: str
    action: str
    estimated_savings: str


class RecommendationReportModel(BaseModel):
    route_id: str
    route_name: Optional[str] = None
    last_optimized: Optional[datetime] = None
    recommendations: List[RecommendationModel]
    total_potential_savings: float
    summary: Dict[str, int] = Field(default_factory=dict)
