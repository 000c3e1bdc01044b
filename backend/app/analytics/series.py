"""Normalized chart series built from raw activity samples."""
from dataclasses import dataclass
from typing import Optional, Sequence

from app.core.constants import HR_ZONE_BOUNDS
from app.core.time_utils import pace_from_speed, speed_from_pace


@dataclass(frozen=True)
class Sample:
    timestamp_s: Optional[float] = None
    distance_m: Optional[float] = None
    hr: Optional[float] = None
    speed_ms: Optional[float] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    power_w: Optional[float] = None


def _round(v, digits):
    return round(v, digits) if v is not None else None


def build_series(samples: Sequence[Sample]) -> list[dict]:
    """One chart point per sample: {time_s, distance_m, hr, speed_ms, pace_min_km}.

    Time is made relative to the first timestamped sample; samples without a
    timestamp fall back to their index. Missing speeds are derived from
    distance/time deltas (GPX sources carry no speed), and speed and pace are
    kept consistent with each other.
    """
    t0 = next((s.timestamp_s for s in samples if s.timestamp_s is not None), None)

    series: list[dict] = []
    for i, s in enumerate(samples):
        if s.timestamp_s is not None and t0 is not None:
            time_s = s.timestamp_s - t0
        else:
            time_s = float(i)
        speed = s.speed_ms if s.speed_ms is not None and s.speed_ms > 0 else None
        series.append({
            "time_s": time_s,
            "distance_m": s.distance_m,
            "hr": int(s.hr) if s.hr is not None else None,
            "speed_ms": speed,
            "pace_min_km": pace_from_speed(speed),
        })

    for prev, cur in zip(series, series[1:]):
        dt = cur["time_s"] - prev["time_s"]
        if (
            cur["speed_ms"] is None
            and cur["distance_m"] is not None
            and prev["distance_m"] is not None
            and dt > 0
        ):
            dd = cur["distance_m"] - prev["distance_m"]
            if dd >= 0:
                cur["speed_ms"] = dd / dt
                cur["pace_min_km"] = pace_from_speed(cur["speed_ms"])
        if cur["pace_min_km"] and not cur["speed_ms"]:
            cur["speed_ms"] = speed_from_pace(cur["pace_min_km"])

    for p in series:
        p["time_s"] = _round(p["time_s"], 1)
        p["distance_m"] = _round(p["distance_m"], 1)
        p["speed_ms"] = _round(p["speed_ms"], 3)
        p["pace_min_km"] = _round(p["pace_min_km"], 3)
    return series


def _mean(values):
    return sum(values) / len(values) if values else None


def summarize_series(series: Sequence[dict]) -> dict:
    """Activity-level aggregates derived from a chart series."""
    duration = max((p["time_s"] or 0 for p in series), default=0)

    distances = [p["distance_m"] for p in series if p.get("distance_m") is not None]
    if distances:
        total_distance = max(distances)
    else:
        # assume 1 s sampling
        total_distance = sum(p.get("speed_ms") or 0 for p in series)

    avg_speed = _mean([p["speed_ms"] for p in series if p.get("speed_ms") is not None])
    if not avg_speed or avg_speed <= 0:
        avg_speed = total_distance / duration if duration > 0 and total_distance > 0 else None

    if avg_speed:
        avg_pace = pace_from_speed(avg_speed)
    elif duration > 0 and total_distance > 0:
        avg_pace = (duration / 60) / (total_distance / 1000)
    else:
        avg_pace = None

    hrs = [p["hr"] for p in series if p.get("hr") is not None]
    avg_hr = _mean(hrs)

    return {
        "duration_seconds": duration or None,
        "total_distance_meters": total_distance or None,
        "avg_speed_ms": _round(avg_speed, 3),
        "avg_pace_min_km": _round(avg_pace, 3),
        "avg_heart_rate": int(round(avg_hr)) if avg_hr is not None else None,
        "max_heart_rate": max(hrs) if hrs else None,
    }


def heart_rate_zones(series: Sequence[dict], hr_max: int) -> dict:
    """Seconds spent in each of five HR zones (fractions of `hr_max`)."""
    hr_points = [p for p in series if p.get("hr") is not None and p.get("time_s") is not None]
    zones = [0, 0, 0, 0, 0]
    for prev_p, p in zip(hr_points, hr_points[1:]):
        dt = max(1, p["time_s"] - prev_p["time_s"])  # seconds
        frac = (prev_p["hr"] / hr_max) if hr_max else 0
        for z in range(5):
            if HR_ZONE_BOUNDS[z] <= frac < HR_ZONE_BOUNDS[z + 1]:
                zones[z] += dt
                break
    return {
        "z1": zones[0], "z2": zones[1], "z3": zones[2], "z4": zones[3], "z5": zones[4],
        "hr_max": hr_max,
    }
