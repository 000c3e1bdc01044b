from app.analytics.classifier import WorkoutType, aggregate_series_metrics, classify_workout


def _metrics(**kw):
    base = {"dist_km": None, "dur_min": None, "avg_pace": None, "cv_pace": None, "avg_hr": None, "cv_hr": None}
    base.update(kw)
    return base


def test_slow_long_walk_is_walk_not_long_run():
    m = _metrics(dist_km=16, dur_min=190, avg_pace=12.0, cv_pace=0.05, avg_hr=120, cv_hr=0.05)
    assert classify_workout(m) == WorkoutType.walk_or_invalid


def test_low_heart_rate_is_walk():
    m = _metrics(dist_km=5, dur_min=30, avg_pace=6.0, cv_pace=0.05, avg_hr=85)
    assert classify_workout(m) == WorkoutType.walk_or_invalid


def test_long_run():
    m = _metrics(dist_km=18, dur_min=100, avg_pace=5.5, cv_pace=0.05, avg_hr=145, cv_hr=0.06)
    assert classify_workout(m) == WorkoutType.long_run


def test_long_run_without_heart_rate():
    m = _metrics(dist_km=21.1, dur_min=110, avg_pace=5.2, cv_pace=0.04)
    assert classify_workout(m) == WorkoutType.long_run


def test_interval():
    m = _metrics(dist_km=8, dur_min=45, avg_pace=5.0, cv_pace=0.25, avg_hr=160, cv_hr=0.12)
    assert classify_workout(m) == WorkoutType.interval_or_fartlek


def test_tempo():
    m = _metrics(dist_km=8, dur_min=36, avg_pace=4.5, cv_pace=0.05, avg_hr=165, cv_hr=0.05)
    assert classify_workout(m) == WorkoutType.tempo_run


def test_easy():
    m = _metrics(dist_km=6, dur_min=39, avg_pace=6.5, cv_pace=0.12, avg_hr=140, cv_hr=0.05)
    assert classify_workout(m) == WorkoutType.easy_run


def test_recovery():
    m = _metrics(dist_km=4, dur_min=30, avg_pace=7.5, cv_pace=0.12, avg_hr=120, cv_hr=0.10)
    assert classify_workout(m) == WorkoutType.recovery_run


def test_unclassified():
    assert classify_workout(_metrics()) == WorkoutType.unclassified
    m = _metrics(dist_km=20, dur_min=100, avg_pace=5.0, cv_pace=0.15, avg_hr=150, cv_hr=0.1)
    assert classify_workout(m) == WorkoutType.unclassified


def test_aggregate_drops_pace_outliers():
    series = [
        {"time_s": t * 60.0, "distance_m": t * 200.0, "hr": 150, "speed_ms": 3.333, "pace_min_km": 5.0}
        for t in range(11)
    ]
    series[5]["pace_min_km"] = 25.0
    metrics = aggregate_series_metrics(series)
    assert metrics["dist_km"] == 2.0
    assert metrics["dur_min"] == 10.0
    assert metrics["avg_pace"] == 5.0
    assert metrics["cv_pace"] == 0.0
    assert metrics["avg_hr"] == 150
    assert metrics["cv_hr"] == 0.0
