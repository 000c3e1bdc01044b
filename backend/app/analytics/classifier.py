"""Rule-based workout type from aggregate series metrics.

The rules form a decision list: they are checked top to bottom and the first
one that matches decides the label.
"""
import math
from enum import Enum
from typing import Optional, Sequence

from app.core.constants import PACE_OUTLIER_MIN_KM
from app.core.time_utils import pace_from_speed, speed_from_pace


class WorkoutType(str, Enum):
    walk_or_invalid = "walk_or_invalid"
    long_run = "long_run"
    interval_or_fartlek = "interval_or_fartlek"
    tempo_run = "tempo_run"
    easy_run = "easy_run"
    recovery_run = "recovery_run"
    unclassified = "unclassified"


def _finite(v) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


def _mean(values: Sequence[float]) -> Optional[float]:
    return sum(values) / len(values) if values else None


def _cv(values: Sequence[float]) -> Optional[float]:
    """Sample coefficient of variation (stddev with n-1)."""
    if len(values) < 2:
        return None
    m = _mean(values)
    if not m:
        return None
    variance = sum((v - m) ** 2 for v in values) / (len(values) - 1)
    return math.sqrt(variance) / m


def _rounded(v: Optional[float], digits: int) -> Optional[float]:
    return round(v, digits) if _finite(v) else None


def aggregate_series_metrics(series: Sequence[dict]) -> dict:
    """dist_km, dur_min, avg_pace, cv_pace, avg_hr, cv_hr for one activity.

    Pace samples at or above the outlier bound are dropped before averaging.
    """
    distances = [p["distance_m"] for p in series if _finite(p.get("distance_m")) and p["distance_m"] >= 0]
    times = [p["time_s"] for p in series if _finite(p.get("time_s")) and p["time_s"] >= 0]
    speeds = [p["speed_ms"] for p in series if _finite(p.get("speed_ms")) and p["speed_ms"] > 0]

    paces = []
    for p in series:
        pace = p.get("pace_min_km")
        if not (_finite(pace) and pace > 0):
            pace = pace_from_speed(p.get("speed_ms")) if _finite(p.get("speed_ms")) else None
        if pace is not None and 0 < pace < PACE_OUTLIER_MIN_KM:
            paces.append(pace)

    hrs = [p["hr"] for p in series if _finite(p.get("hr")) and p["hr"] > 0]

    dist_km = None
    if distances:
        dist_km = max(distances) / 1000
    elif times and speeds:
        dist_km = max(times) * _mean(speeds) / 1000

    dur_min = None
    if times:
        dur_min = max(times) / 60
    elif distances and speeds:
        dur_min = max(distances) / _mean(speeds) / 60

    avg_hr = _mean(hrs)
    return {
        "dist_km": _rounded(dist_km, 2),
        "dur_min": _rounded(dur_min, 1),
        "avg_pace": _rounded(_mean(paces), 2),
        "cv_pace": _rounded(_cv(paces), 3),
        "avg_hr": int(round(avg_hr)) if avg_hr is not None else None,
        "cv_hr": _rounded(_cv(hrs), 3),
    }


def classify_workout(metrics: dict) -> WorkoutType:
    dist_km = metrics.get("dist_km")
    dur_min = metrics.get("dur_min")
    avg_pace = metrics.get("avg_pace")
    cv_pace = metrics.get("cv_pace")
    avg_hr = metrics.get("avg_hr")
    cv_hr = metrics.get("cv_hr")

    has_dist, has_dur = _finite(dist_km), _finite(dur_min)
    has_pace, has_cv_pace = _finite(avg_pace), _finite(cv_pace)
    has_hr, has_cv_hr = _finite(avg_hr), _finite(cv_hr)
    avg_speed = speed_from_pace(avg_pace) if has_pace else None

    if (
        (has_pace and avg_pace > 11)
        or (avg_speed is not None and avg_speed < 1.5)
        or (has_hr and avg_hr < 90)
    ):
        return WorkoutType.walk_or_invalid

    if has_dist and dist_km > 14 and has_cv_pace and cv_pace < 0.10:
        if not has_hr or 100 <= avg_hr <= 160:
            return WorkoutType.long_run

    if has_cv_pace and cv_pace > 0.20 and has_dur and dur_min < 70:
        return WorkoutType.interval_or_fartlek

    if (
        has_dist and 5 <= dist_km <= 12
        and has_cv_pace and cv_pace < 0.10
        and has_hr and 150 <= avg_hr <= 180
    ):
        return WorkoutType.tempo_run

    if (
        has_dist and 3 <= dist_km <= 12
        and has_pace and avg_pace > 6.0
        and has_cv_hr and cv_hr < 0.08
    ):
        return WorkoutType.easy_run

    if (
        has_dist and dist_km < 6
        and has_pace and avg_pace > 7.0
        and has_hr and avg_hr < 130
    ):
        return WorkoutType.recovery_run

    return WorkoutType.unclassified
