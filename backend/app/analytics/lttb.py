"""Chart series downsampling.

`lttb` implements Largest-Triangle-Three-Buckets: first and last points are
kept, the rest is split into `threshold - 2` buckets and from each bucket the
point forming the largest triangle with the previously kept point and the
average of the next bucket is selected. Peaks and troughs survive far better
than with a plain stride.
"""
import math
from typing import Any, Callable, Sequence

from app.core.config import settings


def default_x(point: dict) -> float:
    d = point.get("distance_m")
    if d is not None:
        return d
    return point.get("time_s") or 0


def default_y(point: dict) -> float:
    return point.get("pace_min_km") or point.get("hr") or 0


def lttb(
    data: Sequence[Any],
    threshold: int,
    x: Callable[[Any], float] = default_x,
    y: Callable[[Any], float] = default_y,
) -> list:
    n = len(data)
    if threshold >= n or threshold <= 2:
        return list(data)

    sampled = [data[0]]
    bucket_size = (n - 2) / (threshold - 2)
    a = 0  # index of the previously selected point

    for i in range(threshold - 2):
        # average of the next bucket, clamped to the series
        avg_start = min(int(math.floor((i + 1) * bucket_size)) + 1, n - 1)
        avg_end = min(int(math.floor((i + 2) * bucket_size)) + 1, n)
        if avg_end <= avg_start:
            avg_end = avg_start + 1
        avg_len = avg_end - avg_start
        avg_x = sum(x(data[j]) for j in range(avg_start, avg_end)) / avg_len
        avg_y = sum(y(data[j]) for j in range(avg_start, avg_end)) / avg_len

        range_start = min(int(math.floor(i * bucket_size)) + 1, n - 1)
        range_end = min(int(math.floor((i + 1) * bucket_size)) + 1, n - 1)
        if range_end <= range_start:
            range_end = range_start + 1

        ax, ay = x(data[a]), y(data[a])
        max_area = -1.0
        chosen = range_start
        for j in range(range_start, range_end):
            area = abs(
                (ax - avg_x) * (y(data[j]) - ay)
                - (ax - x(data[j])) * (avg_y - ay)
            ) * 0.5
            if area > max_area:
                max_area = area
                chosen = j

        sampled.append(data[chosen])
        a = chosen

    sampled.append(data[n - 1])
    return sampled


def decimate(data: Sequence[Any], max_points: int) -> list:
    """Keep every Nth point to stay around `max_points`; last point always kept."""
    n = len(data)
    if n <= max_points or max_points <= 0:
        return list(data)
    step = math.ceil(n / max_points)
    sampled = list(data[::step])
    if (n - 1) % step:
        sampled.append(data[n - 1])
    return sampled


def downsample_series(series: Sequence[dict], full_precision: bool = False) -> list:
    """Reduce a chart series for storage.

    Default mode keeps at most `chart_default_points`. Full-precision mode
    keeps everything unless the series exceeds `chart_full_precision_trigger`
    points, in which case it is reduced to `chart_full_precision_points`.
    """
    n = len(series)
    if full_precision:
        if n > settings.chart_full_precision_trigger:
            return lttb(series, settings.chart_full_precision_points)
        return list(series)
    if n > settings.chart_default_points:
        return lttb(series, settings.chart_default_points)
    return list(series)
