import pytest

from wasteroute.models.domain import Stop
from wasteroute.services.routing.distance_matrix import build_distance_matrix
from wasteroute.services.routing.metrics import evaluate_route, improvement_percentage, tour_distance
from wasteroute.services.routing.options import SolverOptions, build_solver_options


def _square():
    coords = [(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0)]
    stops = [Stop(stop_id=f"S{i}", longitude=lon, latitude=lat) for i, (lon, lat) in enumerate(coords)]
    return build_distance_matrix(stops, "planar", planar_km_per_degree=1.0)


def test_closed_tour_includes_return_edge():
    matrix = _square()
    assert tour_distance([0, 1, 2, 3], matrix) == pytest.approx(4.0)
    # Crossing tour: two sides plus two diagonals.
    assert tour_distance([0, 2, 1, 3], matrix) == pytest.approx(2 + 2 * 2 ** 0.5)


def test_evaluate_route_time_and_fuel():
    matrix = _square()
    options = SolverOptions(
        average_speed_kmh=30.0,
        service_time_per_stop_min=5.0,
        fuel_consumption_l_per_km=0.3,
        fuel_price_per_l=150.0,
    )

    metrics = evaluate_route([0, 1, 2, 3], matrix, options)

    assert metrics.total_distance_km == pytest.approx(4.0)
    assert metrics.total_time_min == pytest.approx(4.0 / 30.0 * 60 + 4 * 5.0)
    assert metrics.fuel_cost == pytest.approx(4.0 * 0.3 * 150.0)


@pytest.mark.parametrize("sequence", [[], [0]])
def test_degenerate_sequences_cost_nothing(sequence):
    matrix = _square()
    metrics = evaluate_route(sequence, matrix, SolverOptions())
    assert metrics.total_distance_km == 0
    assert metrics.total_time_min == 0
    assert metrics.fuel_cost == 0


def test_improvement_percentage():
    assert improvement_percentage(100.0, 80.0) == pytest.approx(20.0)
    assert improvement_percentage(80.0, 100.0) == pytest.approx(-25.0)
    assert improvement_percentage(0.0, 0.0) == 0.0


def test_build_solver_options_applies_defaults_and_overrides():
    options = build_solver_options({"average_speed_kmh": 45, "distance_model": "haversine", "seed": 3})

    assert options.average_speed_kmh == 45
    assert options.distance_model.value == "great_circle"
    assert options.seed == 3
    assert options.service_time_per_stop_min == SolverOptions().service_time_per_stop_min
    assert options.cooling_rate == 0.995
