"""Solver options resolved from request overrides and configured defaults."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from ...config import settings
from ...errors import InvalidInputError
from ...models.domain import DistanceModel
from ...schemas.optimization import OptimizationOptions


@dataclass(slots=True)
class SolverOptions:
    distance_model: DistanceModel = DistanceModel(settings.distance_model)
    planar_km_per_degree: float = settings.planar_km_per_degree
    average_speed_kmh: float = settings.average_speed_kmh
    service_time_per_stop_min: float = settings.service_time_per_stop_min
    fuel_consumption_l_per_km: float = settings.fuel_consumption_l_per_km
    fuel_price_per_l: float = settings.fuel_price_per_l
    operational_cost_factor: float = settings.operational_cost_factor

    # Genetic algorithm; None means "derive from stop count".
    population_size: Optional[int] = None
    generations: Optional[int] = None
    mutation_rate: float = 0.1
    elite_fraction: float = 0.2
    tournament_size: int = 3

    # Ant colony
    ant_count: Optional[int] = None
    ant_iterations: Optional[int] = None
    alpha: float = 1.0
    beta: float = 2.0
    evaporation_rate: float = 0.1
    pheromone_deposit: float = 1.0

    # Simulated annealing
    initial_temperature: float = 1000.0
    cooling_rate: float = 0.995
    min_temperature: float = 1.0

    seed: Optional[int] = None
    timeout_seconds: Optional[float] = settings.route_timeout_seconds
    include_geometry: bool = True


_DISTANCE_ALIASES = {"euclidean": "planar", "haversine": "great_circle"}


def _validate_overrides(values: Mapping[str, Any]) -> OptimizationOptions:
    try:
        return OptimizationOptions.model_validate(dict(values))
    except (ValidationError, TypeError, ValueError) as exc:
        raise InvalidInputError(f"Invalid optimization options: {exc}") from exc


def build_solver_options(overrides: OptimizationOptions | Mapping[str, Any] | SolverOptions | None = None) -> SolverOptions:
    """Merge request overrides over the configured defaults.

    Raises:
        InvalidInputError: if the overrides fail validation.
    """
    if isinstance(overrides, SolverOptions):
        current = asdict(overrides)
        current["distance_model"] = getattr(current["distance_model"], "value", current["distance_model"])
        overrides = _validate_overrides(current)
    elif overrides is None:
        overrides = OptimizationOptions()
    elif not isinstance(overrides, OptimizationOptions):
        overrides = _validate_overrides(overrides)

    base = SolverOptions()
    values: dict[str, Any] = {}
    for field in fields(SolverOptions):
        override = getattr(overrides, field.name, None)
        values[field.name] = override if override is not None else getattr(base, field.name)

    model = values["distance_model"]
    if isinstance(model, str):
        values["distance_model"] = DistanceModel(_DISTANCE_ALIASES.get(model, model))

    if values["min_temperature"] > values["initial_temperature"]:
        raise InvalidInputError("min_temperature must not exceed initial_temperature")
    return SolverOptions(**values)
