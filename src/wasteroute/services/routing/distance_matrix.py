"""Pairwise distance matrix for a stop set."""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np

from ...errors import InvalidInputError
from ...models.domain import DistanceModel, Stop
from ..geospatial import EARTH_RADIUS_KM, PLANAR_KM_PER_DEGREE

logger = logging.getLogger(__name__)


def validate_stops(stops: Sequence[Stop]) -> None:
    """Fail fast on stops whose coordinates cannot be used for routing."""
    for position, stop in enumerate(stops):
        try:
            lon, lat = float(stop.longitude), float(stop.latitude)
        except (TypeError, ValueError) as exc:
            raise InvalidInputError(f"Stop {stop.stop_id!r} at position {position} has missing coordinates.") from exc
        if not (math.isfinite(lon) and math.isfinite(lat)):
            raise InvalidInputError(
                f"Stop {stop.stop_id!r} at position {position} has non-finite coordinates ({lon}, {lat})."
            )


def build_distance_matrix(
    stops: Sequence[Stop],
    model: DistanceModel | str = DistanceModel.PLANAR,
    *,
    planar_km_per_degree: float = PLANAR_KM_PER_DEGREE,
) -> np.ndarray:
    """Compute the symmetric N x N distance table (km) indexed by stop position.

    The returned array is read-only.
    """
    validate_stops(stops)
    model = DistanceModel(model)
    n = len(stops)
    if n == 0:
        matrix = np.zeros((0, 0), dtype=float)
        matrix.flags.writeable = False
        return matrix

    lon = np.array([float(stop.longitude) for stop in stops], dtype=float)
    lat = np.array([float(stop.latitude) for stop in stops], dtype=float)

    if model is DistanceModel.GREAT_CIRCLE:
        if np.any(np.abs(lat) > 90.0):
            raise InvalidInputError("Latitude must be within [-90, 90] for great-circle distances.")
        phi = np.radians(lat)
        lam = np.radians(lon)
        d_phi = phi[None, :] - phi[:, None]
        d_lambda = lam[None, :] - lam[:, None]
        a = np.sin(d_phi / 2) ** 2 + np.cos(phi)[:, None] * np.cos(phi)[None, :] * np.sin(d_lambda / 2) ** 2
        a = np.clip(a, 0.0, 1.0)
        matrix = EARTH_RADIUS_KM * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    else:
        d_lon = lon[None, :] - lon[:, None]
        d_lat = lat[None, :] - lat[:, None]
        matrix = np.hypot(d_lon, d_lat) * planar_km_per_degree

    # Mirror the upper triangle so the table is exactly symmetric with a zero diagonal.
    upper = np.triu(matrix, k=1)
    matrix = upper + upper.T
    matrix.flags.writeable = False
    logger.debug(f"Built {n}x{n} {model.value} distance matrix")
    return matrix
