import pytest

from app.analytics.segments import ActivityPoint, best_moving_segment, distance_splits
from conftest import straight_track


def _points(samples):
    return [
        ActivityPoint(s.latitude, s.longitude, s.timestamp_seconds, s.distance_meters)
        for s in samples
    ]


def test_constant_pace_1200m_in_6_minutes():
    # 1200 m over 360 s, one point per second
    pts = _points(straight_track(361, 1200 / 360, 1))
    seg = best_moving_segment(pts, 1000)
    assert seg is not None
    assert seg.duration_s == pytest.approx(300, abs=2)
    assert seg.pace_min_km == pytest.approx(5.0, abs=0.05)
    assert seg.end_distance_m - seg.start_distance_m >= 999


def test_shorter_than_target_returns_none():
    pts = _points(straight_track(91, 10, 3))  # 900 m
    assert best_moving_segment(pts, 1000) is None


def test_too_few_points_returns_none():
    pts = _points(straight_track(9, 300, 60))
    assert best_moving_segment(pts, 1000) is None


def test_fastest_window_wins():
    # 300 m steps, 90 s each except steps 5..8 which take 60 s
    samples = straight_track(12, 300, 90)
    t = samples[0].timestamp_seconds
    for i, s in enumerate(samples):
        if i > 0:
            t += 60 if 5 <= i <= 8 else 90
        s.timestamp_seconds = t
    seg = best_moving_segment(_points(samples), 1000)
    assert seg.start_timestamp == samples[4].timestamp_seconds
    assert seg.end_timestamp == samples[8].timestamp_seconds
    assert seg.duration_s == 240
    assert seg.pace_min_km == 4.0


def test_equal_pace_keeps_first_window():
    samples = straight_track(12, 300, 90)
    seg = best_moving_segment(_points(samples), 1000)
    # every window spans 4 steps in 360 s; the first one found is kept
    assert seg.start_timestamp == samples[0].timestamp_seconds
    assert seg.duration_s == 360
    assert seg.pace_min_km == 6.0


def test_start_offset_does_not_change_constant_pace():
    a = best_moving_segment(_points(straight_track(12, 300, 90)), 1000)
    b = best_moving_segment(_points(straight_track(15, 300, 90)[3:]), 1000)
    assert a.pace_min_km == b.pace_min_km
    assert a.duration_s == b.duration_s


def test_input_order_does_not_matter():
    pts = _points(straight_track(12, 300, 90))
    assert best_moving_segment(list(reversed(pts)), 1000) == best_moving_segment(pts, 1000)


def test_distance_splits_per_km():
    series = [
        {"distance_m": d, "pace_min_km": 5.0 if d < 1000 else 6.0, "hr": 150}
        for d in range(0, 2500, 100)
    ]
    splits = distance_splits(series, 1000)
    assert [s["segment"] for s in splits] == ["0-1km", "1-2km", "2-3km"]
    assert splits[0]["avg_pace_min_km"] == 5.0
    assert splits[1]["avg_pace_min_km"] == 6.0
    assert splits[0]["avg_hr"] == 150
    assert not splits[0]["partial"]
    assert splits[2]["partial"]
    assert splits[2]["end_m"] == 2400


def test_distance_splits_half_km_labels():
    series = [{"distance_m": d, "pace_min_km": 5.0, "hr": None} for d in range(0, 1001, 50)]
    splits = distance_splits(series, 500)
    assert [s["segment"] for s in splits] == ["0-0.5km", "0.5-1km"]
    assert splits[0]["avg_hr"] is None


def test_distance_splits_rejects_non_positive():
    with pytest.raises(ValueError):
        distance_splits([], 0)
