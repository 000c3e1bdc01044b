import pytest

from app.analytics.series import Sample, build_series, heart_rate_zones, summarize_series


def test_build_series_relative_time_and_pace():
    samples = [
        Sample(timestamp_s=1000.0, distance_m=0.0, hr=120, speed_ms=None),
        Sample(timestamp_s=1010.0, distance_m=33.3, hr=130, speed_ms=3.333),
        Sample(timestamp_s=1020.0, distance_m=66.6, hr=135, speed_ms=3.333),
    ]
    series = build_series(samples)
    assert [p["time_s"] for p in series] == [0.0, 10.0, 20.0]
    assert series[1]["pace_min_km"] == pytest.approx(5.0, abs=0.01)
    assert series[0]["speed_ms"] is None
    assert series[2]["hr"] == 135


def test_build_series_derives_speed_from_distance():
    samples = [
        Sample(timestamp_s=0.0, distance_m=0.0),
        Sample(timestamp_s=10.0, distance_m=40.0),
    ]
    series = build_series(samples)
    assert series[1]["speed_ms"] == 4.0
    assert series[1]["pace_min_km"] == pytest.approx(4.167, abs=0.001)


def test_build_series_without_timestamps_uses_index():
    series = build_series([Sample(distance_m=0.0), Sample(distance_m=5.0)])
    assert [p["time_s"] for p in series] == [0.0, 1.0]


def test_summarize_series():
    series = [
        {"time_s": 0.0, "distance_m": 0.0, "hr": 140, "speed_ms": 3.0, "pace_min_km": 5.556},
        {"time_s": 100.0, "distance_m": 300.0, "hr": 150, "speed_ms": 3.0, "pace_min_km": 5.556},
        {"time_s": 200.0, "distance_m": 600.0, "hr": 160, "speed_ms": 3.0, "pace_min_km": 5.556},
    ]
    summary = summarize_series(series)
    assert summary["duration_seconds"] == 200.0
    assert summary["total_distance_meters"] == 600.0
    assert summary["avg_speed_ms"] == 3.0
    assert summary["avg_heart_rate"] == 150
    assert summary["max_heart_rate"] == 160


def test_heart_rate_zones():
    series = [{"time_s": float(t), "hr": hr} for t, hr in [(0, 95), (10, 125), (20, 175), (30, 180)]]
    zones = heart_rate_zones(series, 190)
    # 95/190 = 0.50 -> z1, 125/190 = 0.66 -> z2, 175/190 = 0.92 -> z5
    assert zones["z1"] == 10
    assert zones["z2"] == 10
    assert zones["z5"] == 10
    assert zones["z3"] == zones["z4"] == 0
    assert zones["hr_max"] == 190
