"""Application configuration and settings management."""

from typing import Any, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="WASTEROUTE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Waste Route Optimizer"
    default_algorithm: str = Field(
        default="dijkstra",
        description="Algorithm used when a caller does not name one (nearest neighbor + 2-opt).",
    )
    distance_model: Literal["planar", "great_circle"] = Field(
        default="planar",
        description="Distance model for building the stop distance matrix.",
    )
    planar_km_per_degree: float = Field(
        default=111.0,
        gt=0.0,
        description="Multiplier converting planar degree distances to approximate kilometres.",
    )
    average_speed_kmh: float = Field(default=30.0, gt=0.0)
    service_time_per_stop_min: float = Field(default=5.0, ge=0.0)
    fuel_consumption_l_per_km: float = Field(default=0.3, ge=0.0)
    fuel_price_per_l: float = Field(default=150.0, ge=0.0)
    operational_cost_factor: float = Field(
        default=1.2,
        ge=0.0,
        description="Multiplier applied to fuel savings to include operational costs.",
    )
    bulk_max_concurrency: Optional[int] = Field(
        default=None,
        ge=1,
        description="Worker threads for bulk optimization. Defaults to the CPU count.",
    )
    route_timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0.0,
        description="Per-route optimization deadline. None disables the deadline.",
    )
    reoptimize_after_days: int = Field(default=7, ge=1)
    min_completion_rate: float = Field(default=0.9, ge=0.0, le=1.0)

    @field_validator("distance_model", mode="before")
    @classmethod
    def _normalize_distance_model(cls, value: Any) -> Any:
        if isinstance(value, str):
            normalized = value.strip().lower().replace("-", "_")
            return {"euclidean": "planar", "haversine": "great_circle"}.get(normalized, normalized)
        return value

    @field_validator("bulk_max_concurrency", "route_timeout_seconds", mode="before")
    @classmethod
    def _empty_as_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


settings = Settings()
