"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Sequence

from shapely.geometry import LineString, mapping

from ..models.domain import DistanceModel

EARTH_RADIUS_KM = 6371.0
PLANAR_KM_PER_DEGREE = 111.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def planar_km(lat1: float, lon1: float, lat2: float, lon2: float, km_per_degree: float = PLANAR_KM_PER_DEGREE) -> float:
    """Euclidean distance in degrees scaled to an approximate kilometre figure."""

    return math.hypot(lon2 - lon1, lat2 - lat1) * km_per_degree


def distance_km(
    a: tuple[float, float],
    b: tuple[float, float],
    model: DistanceModel | str = DistanceModel.PLANAR,
    *,
    planar_km_per_degree: float = PLANAR_KM_PER_DEGREE,
) -> float:
    """Distance between two (longitude, latitude) pairs under the given model."""

    lon1, lat1 = a
    lon2, lat2 = b
    if DistanceModel(model) is DistanceModel.GREAT_CIRCLE:
        return haversine_km(lat1, lon1, lat2, lon2)
    return planar_km(lat1, lon1, lat2, lon2, planar_km_per_degree)


def route_geometry(coordinates: Sequence[tuple[float, float]]) -> dict | None:
    """Return a GeoJSON LineString for (longitude, latitude) points in visiting order."""

    if len(coordinates) < 2:
        return None
    line = LineString([(lon, lat) for lon, lat in coordinates])
    geometry = mapping(line)
    return {
        "type": geometry["type"],
        "coordinates": [[float(lon), float(lat)] for lon, lat in geometry["coordinates"]],
    }
