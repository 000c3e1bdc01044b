import math

from app.analytics.geo import haversine_m, is_valid_coordinate, track_bounds


def test_haversine_zero_for_same_point():
    assert haversine_m(-23.5, -46.6, -23.5, -46.6) == 0


def test_haversine_one_degree_latitude():
    # one degree along a meridian is R * pi / 180
    assert math.isclose(haversine_m(0, 0, 1, 0), 111194.93, rel_tol=1e-6)


def test_haversine_is_symmetric():
    a = haversine_m(-23.55, -46.63, -22.90, -43.17)
    b = haversine_m(-22.90, -43.17, -23.55, -46.63)
    assert math.isclose(a, b)
    # Sao Paulo -> Rio de Janeiro is roughly 360 km
    assert 350_000 < a < 370_000


def test_haversine_nan_propagates():
    assert math.isnan(haversine_m(float("nan"), 0, 1, 0))


def test_track_bounds():
    coords = [[1.0, 5.0], [-2.0, 7.0], [0.5, 4.0]]
    assert track_bounds(coords) == {"minLat": -2.0, "minLon": 4.0, "maxLat": 1.0, "maxLon": 7.0}
    assert track_bounds([]) is None


def test_is_valid_coordinate():
    assert is_valid_coordinate(-23.5, -46.6)
    assert not is_valid_coordinate(None, 10)
    assert not is_valid_coordinate(float("nan"), 10)
    assert not is_valid_coordinate(91, 0)
    assert not is_valid_coordinate(0, 181)
