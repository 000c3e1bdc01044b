from datetime import date, timedelta

from app.analytics.overtraining import (
    ActivityLoad,
    calculate_overtraining_risk,
    consecutive_training_days,
    frequency_band,
    intensity_band,
    risk_level,
    training_load_band,
    volume_trend_band,
)

AS_OF = date(2025, 3, 31)


def _run(days_ago, minutes=50, hr=140, max_hr=160, km=10):
    return ActivityLoad(
        activity_date=AS_OF - timedelta(days=days_ago),
        duration_minutes=minutes,
        average_hr=hr,
        max_hr=max_hr,
        distance_meters=km * 1000,
    )


def test_no_activities_is_low_risk():
    risk = calculate_overtraining_risk([], as_of=AS_OF)
    assert risk.score == 0
    assert risk.level == "low"
    assert risk.factors == ["Dados insuficientes"]


def test_balanced_month_is_low():
    # three runs a week for four weeks
    activities = [_run(week * 7 + d) for week in range(4) for d in (0, 2, 4)]
    risk = calculate_overtraining_risk(activities, as_of=AS_OF)
    # 3 runs this week vs 12 in the month: load ratio ~1.07
    assert risk.training_load_score == 25
    assert risk.frequency_score == 0
    assert risk.intensity_score == 0
    assert risk.volume_trend_score == 0
    assert risk.score == 9
    assert risk.level == "low"
    assert risk.factors == ["Carga de treino adequada"]


def test_week_window_is_seven_calendar_days():
    # as_of-7 belongs to the previous week
    activities = [_run(d) for d in range(1, 8)]
    risk = calculate_overtraining_risk(activities, as_of=AS_OF)
    assert risk.frequency_score == 85
    assert "Frequência de treino muito alta" in risk.factors
    assert "Treinos quase diários sem descanso adequado" not in risk.factors
    # 60 km this week against the 10 km run on as_of-7
    assert risk.volume_trend_score == 100


def test_month_window_excludes_day_thirty():
    recent = [_run(0)]
    assert calculate_overtraining_risk(recent + [_run(30)], as_of=AS_OF) == (
        calculate_overtraining_risk(recent, as_of=AS_OF)
    )


def test_overloaded_week_is_high():
    activities = [_run(d, minutes=60, hr=160, max_hr=180) for d in range(8)]
    activities.append(_run(10, minutes=30, hr=130, km=5))
    risk = calculate_overtraining_risk(activities, as_of=AS_OF)
    assert risk.training_load_score == 100
    assert risk.frequency_score == 100
    assert risk.intensity_score == 100
    assert risk.volume_trend_score == 100
    assert risk.score == 100
    assert risk.level == "high"
    assert "8 dias consecutivos sem descanso" in risk.factors
    assert risk.recommendation.startswith("ATENÇÃO")


def test_missing_heart_rate_assumes_100_bpm():
    assert ActivityLoad(activity_date=AS_OF, duration_minutes=30).load == 30


def test_bands_are_monotonic():
    ratios = [0.9, 1.05, 1.2, 1.4, 1.6]
    scores = [training_load_band(r)[0] for r in ratios]
    assert scores == sorted(scores) == [0, 25, 50, 75, 100]

    increases = [5, 15, 25, 35]
    assert [volume_trend_band(p)[0] for p in increases] == [0, 40, 70, 100]

    shares = [0.3, 0.45, 0.6, 0.8]
    assert [intensity_band(s)[0] for s in shares] == [0, 40, 70, 100]


def test_frequency_band_combines_sessions_and_streak():
    assert frequency_band(3, 2) == (0, [])
    assert frequency_band(5, 4) == (35, [])
    score, factors = frequency_band(6, 5)
    assert score == 65
    assert factors == ["Frequência de treino muito alta", "5 dias consecutivos de treino"]


def test_consecutive_training_days():
    days = [AS_OF - timedelta(days=d) for d in (0, 1, 2, 5, 6)]
    assert consecutive_training_days(days) == 3
    # two activities on the same day count once
    assert consecutive_training_days([AS_OF, AS_OF]) == 1
    assert consecutive_training_days([]) == 0


def test_risk_level_boundaries():
    assert risk_level(24.9) == "low"
    assert risk_level(25) == "medium"
    assert risk_level(49.9) == "medium"
    assert risk_level(50) == "high"
