"""Best-segment search and fixed-distance splits over a GPS track."""
import logging
import math
from dataclasses import asdict, dataclass
from typing import Iterable, Optional

from app.analytics.geo import haversine_m

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivityPoint:
    lat: float
    lon: float
    timestamp_s: float
    distance_m: float  # cumulative, non-decreasing


@dataclass(frozen=True)
class BestSegment:
    start_timestamp: float
    end_timestamp: float
    start_distance_m: float
    end_distance_m: float
    duration_s: float
    pace_min_km: float

    def to_dict(self) -> dict:
        return asdict(self)


def best_moving_segment(
    points: Iterable[ActivityPoint],
    segment_distance_m: float = 1000.0,
    min_points: int = 10,
) -> Optional[BestSegment]:
    """Fastest contiguous window covering `segment_distance_m`.

    For every start index the track is walked forward, summing haversine
    distance between consecutive points, until the window covers the target.
    The pace of that window is its elapsed time over the *target* distance.
    The first window with a strictly lower pace wins, so later windows with
    an equal pace never replace it.

    Returns None when there are fewer than `min_points` points or when no
    window reaches the target distance.
    """
    pts = sorted(points, key=lambda p: p.timestamp_s)
    if len(pts) < min_points:
        logger.info("Only %d points, need %d for a segment search", len(pts), min_points)
        return None

    steps = [
        haversine_m(a.lat, a.lon, b.lat, b.lon)
        for a, b in zip(pts, pts[1:])
    ]
    target_km = segment_distance_m / 1000

    best: Optional[tuple[int, int, float, float]] = None
    best_pace = math.inf
    windows = 0

    for i in range(len(pts) - 1):
        acc_m = 0.0
        for j in range(i + 1, len(pts)):
            acc_m += steps[j - 1]
            if acc_m >= segment_distance_m:
                duration = pts[j].timestamp_s - pts[i].timestamp_s
                pace = (duration / 60) / target_km
                windows += 1
                if 0 < pace < best_pace:
                    best_pace = pace
                    best = (i, j, duration, pace)
                break
        else:
            # the remaining suffix is shorter than the target for every later start too
            break

    logger.debug("Analyzed %d windows of %.0fm", windows, segment_distance_m)
    if best is None:
        return None

    i, j, duration, pace = best
    return BestSegment(
        start_timestamp=pts[i].timestamp_s,
        end_timestamp=pts[j].timestamp_s,
        start_distance_m=pts[i].distance_m,
        end_distance_m=pts[j].distance_m,
        duration_s=round(duration, 2),
        pace_min_km=round(pace, 2),
    )


def _km_label(meters: float) -> str:
    return f"{meters / 1000:g}"


def distance_splits(series: list[dict], split_m: float = 1000.0) -> list[dict]:
    """Average pace and heart rate per consecutive fixed-distance split.

    `series` is an ordered chart series ({distance_m, pace_min_km, hr, ...}).
    Points without distance are skipped. The last split is reported with
    `partial=True` when the activity ends before its boundary.
    """
    if split_m <= 0:
        raise ValueError("split_m must be > 0")

    buckets: dict[int, dict] = {}
    max_distance = 0.0
    for point in series:
        d = point.get("distance_m")
        if d is None:
            continue
        max_distance = max(max_distance, d)
        idx = int(d // split_m)
        b = buckets.setdefault(idx, {"paces": [], "hrs": []})
        pace = point.get("pace_min_km")
        if pace is not None and pace > 0:
            b["paces"].append(pace)
        hr = point.get("hr")
        if hr is not None and hr > 0:
            b["hrs"].append(hr)

    splits = []
    for idx in sorted(buckets):
        start_m = idx * split_m
        end_m = start_m + split_m
        # a point exactly on the final boundary opens an empty split
        if start_m >= max_distance and idx > 0:
            continue
        paces, hrs = buckets[idx]["paces"], buckets[idx]["hrs"]
        splits.append({
            "index": idx + 1,
            "segment": f"{_km_label(start_m)}-{_km_label(end_m)}km",
            "start_m": start_m,
            "end_m": min(end_m, max_distance),
            "avg_pace_min_km": round(sum(paces) / len(paces), 2) if paces else None,
            "avg_hr": int(round(sum(hrs) / len(hrs))) if hrs else None,
            "partial": max_distance < end_m,
        })
    return splits
