"""
Per-activity pipeline steps: fetch rows, run the pure analytics, upsert.

Every function takes the request's Session and commits its own write. A
`PipelineResult` whose value is None is a "not applicable" outcome (too
short, too few samples); it is not an error.
"""
import logging
import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Optional

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from app.analytics.classifier import aggregate_series_metrics, classify_workout
from app.analytics.geo import is_valid_coordinate, track_bounds
from app.analytics.lttb import decimate, downsample_series
from app.analytics.overtraining import ActivityLoad, calculate_overtraining_risk
from app.analytics.performance import ActivityAggregates, calculate_performance_metrics
from app.analytics.segments import ActivityPoint, best_moving_segment, distance_splits
from app.analytics.series import Sample, build_series, heart_rate_zones, summarize_series
from app.analytics.variation import variation_analysis
from app.core.config import settings
from app.core.exceptions import ComputationError, UpstreamDataError
from app.models.activity import Activity
from app.models.activity_sample import ActivitySample
from app.models.best_segment import ActivityBestSegment
from app.models.chart_data import ActivityChartData, ActivityCoordinates
from app.models.overtraining import OvertrainingScore
from app.models.performance_metrics import PerformanceMetrics
from app.models.variation_analysis import VariationAnalysis
from app.models.workout_classification import WorkoutClassification

logger = logging.getLogger(__name__)

PERFORMANCE_FIELDS = (
    "power_per_beat",
    "distance_per_minute",
    "efficiency_comment",
    "average_speed_kmh",
    "pace_variation_coefficient",
    "pace_comment",
    "average_hr",
    "relative_intensity",
    "relative_reserve",
    "heart_rate_comment",
    "effort_beginning_bpm",
    "effort_middle_bpm",
    "effort_end_bpm",
    "effort_distribution_comment",
)


@dataclass
class PipelineResult:
    value: Any
    message: Optional[str] = None

    @property
    def applicable(self) -> bool:
        return self.value is not None


def row_to_dict(row) -> dict:
    return {attr.key: getattr(row, attr.key) for attr in inspect(row).mapper.column_attrs}


def _upsert(db: Session, model, keys: dict, values: dict):
    row = db.query(model).filter_by(**keys).first()
    if row is None:
        row = model(**keys)
        db.add(row)
    for key, value in values.items():
        setattr(row, key, value)
    return row


def _ensure_finite(values: dict, user_id: str, activity_id: Optional[str] = None) -> None:
    for key, value in values.items():
        if isinstance(value, float) and not math.isfinite(value):
            raise ComputationError(
                f"{key} is not a finite number ({value})",
                activity_id=activity_id,
                user_id=user_id,
            )


def get_activity(
    db: Session,
    user_id: str,
    activity_id: str,
    activity_source: Optional[str] = None,
) -> Activity:
    query = db.query(Activity).filter(
        Activity.user_id == user_id,
        Activity.activity_id == activity_id,
    )
    if activity_source:
        query = query.filter(Activity.activity_source == activity_source)
    activity = query.first()
    if not activity:
        raise UpstreamDataError(
            f"Activity {activity_id} not found", activity_id=activity_id, user_id=user_id
        )
    return activity


def load_samples(db: Session, user_id: str, activity_id: str, required: bool = True) -> list[Sample]:
    rows = (
        db.query(ActivitySample)
        .filter(ActivitySample.user_id == user_id, ActivitySample.activity_id == activity_id)
        .order_by(ActivitySample.idx)
        .all()
    )
    if not rows and required:
        raise UpstreamDataError(
            f"No detail rows for activity {activity_id}", activity_id=activity_id, user_id=user_id
        )
    return [
        Sample(
            timestamp_s=r.timestamp_seconds,
            distance_m=r.distance_meters,
            hr=r.heart_rate,
            speed_ms=r.speed_mps,
            lat=r.latitude,
            lon=r.longitude,
            power_w=r.power_watts,
        )
        for r in rows
    ]


def _hr_max() -> int:
    return settings.hr_max or (220 - settings.age)


def compute_chart_data(
    db: Session,
    user_id: str,
    activity_id: str,
    activity_source: Optional[str] = None,
    full_precision: bool = False,
) -> PipelineResult:
    ids = {"user_id": user_id, "activity_id": activity_id}
    logger.info("Computing chart data", extra={**ids, "step": "chart_data"})

    activity = get_activity(db, user_id, activity_id, activity_source)
    samples = load_samples(db, user_id, activity_id)

    series = build_series(samples)
    summary = summarize_series(series)
    _ensure_finite(summary, user_id, activity_id)
    stored = downsample_series(series, full_precision=full_precision)

    zones = None
    if any(p["hr"] is not None for p in series):
        zones = heart_rate_zones(series, _hr_max())

    _upsert(db, ActivityChartData, ids, {
        "activity_source": activity.activity_source,
        "series_data": stored,
        "data_points_count": len(stored),
        "hr_zones": zones,
        **summary,
    })

    coords = [[s.lat, s.lon] for s in samples if is_valid_coordinate(s.lat, s.lon)]
    if coords:
        sampled = decimate(coords, settings.coordinates_max_points)
        _upsert(db, ActivityCoordinates, ids, {
            "activity_source": activity.activity_source,
            "coordinates": sampled,
            "bounds": track_bounds(coords),
            "total_points": len(coords),
            "sampled_points": len(sampled),
            "starting_latitude": coords[0][0],
            "starting_longitude": coords[0][1],
        })
    db.commit()

    logger.info(
        "Stored %d of %d chart points", len(stored), len(series),
        extra={**ids, "step": "chart_data"},
    )
    return PipelineResult({
        "points": len(stored),
        "total_points": len(series),
        "coordinates": len(coords),
        "summary": summary,
        "hr_zones": zones,
    })


def compute_best_segment(
    db: Session,
    user_id: str,
    activity_id: str,
    segment_distance_m: Optional[float] = None,
) -> PipelineResult:
    target = segment_distance_m or settings.segment_distance_m
    ids = {"user_id": user_id, "activity_id": activity_id}
    logger.info("Searching best %gm segment", target, extra={**ids, "step": "best_segment"})

    activity = get_activity(db, user_id, activity_id)
    samples = load_samples(db, user_id, activity_id)

    total = activity.distance_meters
    if total is None:
        total = max((s.distance_m for s in samples if s.distance_m is not None), default=0)
    if total < target:
        message = f"Activity skipped - less than {target:g}m distance"
        logger.info(message, extra={**ids, "step": "best_segment"})
        return PipelineResult(None, message)

    points = [
        ActivityPoint(lat=s.lat, lon=s.lon, timestamp_s=s.timestamp_s, distance_m=s.distance_m)
        for s in samples
        if is_valid_coordinate(s.lat, s.lon) and s.timestamp_s is not None and s.distance_m is not None
    ]
    if len(points) < settings.segment_min_points:
        message = f"Insufficient GPS data - only {len(points)} valid points found"
        logger.info(message, extra={**ids, "step": "best_segment"})
        return PipelineResult(None, message)

    segment = best_moving_segment(points, target, settings.segment_min_points)
    if segment is None:
        message = f"No valid {target:g}m segment found"
        logger.info(message, extra={**ids, "step": "best_segment"})
        return PipelineResult(None, message)
    _ensure_finite(segment.to_dict(), user_id, activity_id)

    row = _upsert(db, ActivityBestSegment, {**ids, "segment_distance_meters": target}, {
        "activity_date": activity.activity_date,
        "best_pace_min_km": segment.pace_min_km,
        "segment_start_timestamp": segment.start_timestamp,
        "segment_end_timestamp": segment.end_timestamp,
        "segment_start_distance_meters": segment.start_distance_m,
        "segment_end_distance_meters": segment.end_distance_m,
        "segment_duration_seconds": segment.duration_s,
    })
    db.commit()
    db.refresh(row)
    return PipelineResult(row_to_dict(row), f"Best {target:g}m pace: {segment.pace_min_km} min/km")


def compute_performance_metrics(
    db: Session,
    user_id: str,
    activity_id: str,
    resting_hr: Optional[int] = None,
) -> PipelineResult:
    ids = {"user_id": user_id, "activity_id": activity_id}
    logger.info("Computing performance metrics", extra={**ids, "step": "performance_metrics"})

    activity = get_activity(db, user_id, activity_id)
    # Aggregates alone still yield metrics, so samples are optional here
    samples = load_samples(db, user_id, activity_id, required=False)
    # GPX samples carry no speed; the series derives it from distance/time
    hr_points = [p for p in build_series(samples) if p["hr"] is not None]

    aggregates = ActivityAggregates(
        average_hr=activity.average_heart_rate,
        max_hr=activity.max_heart_rate,
        duration_seconds=activity.duration_seconds,
        distance_meters=activity.distance_meters,
        average_speed_mps=activity.average_speed_mps,
        active_kilocalories=activity.active_kilocalories,
    )
    metrics = calculate_performance_metrics(
        aggregates,
        speed_samples=[p["speed_ms"] for p in hr_points],
        hr_samples=[p["hr"] for p in hr_points],
        resting_hr=resting_hr or settings.resting_hr,
    )
    _ensure_finite(metrics, user_id, activity_id)

    # whole-row write: fields missing from this run are cleared
    _upsert(db, PerformanceMetrics, ids, {f: metrics.get(f) for f in PERFORMANCE_FIELDS})
    db.commit()
    return PipelineResult({"metrics": metrics, "details_count": len(hr_points)})


def compute_variation_analysis(db: Session, user_id: str, activity_id: str) -> PipelineResult:
    ids = {"user_id": user_id, "activity_id": activity_id}
    logger.info("Computing variation analysis", extra={**ids, "step": "variation"})

    get_activity(db, user_id, activity_id)
    samples = load_samples(db, user_id, activity_id)

    series = build_series(samples)
    result = variation_analysis([p["hr"] for p in series], [p["speed_ms"] for p in series])
    if result is None:
        message = "Dados de frequência cardíaca insuficientes para análise"
        logger.info(message, extra={**ids, "step": "variation"})
        return PipelineResult(None, message)
    _ensure_finite(result, user_id, activity_id)

    _upsert(db, VariationAnalysis, ids, result)
    db.commit()
    return PipelineResult(result)


def _chart_series(db: Session, user_id: str, activity_id: str) -> list[dict]:
    chart = (
        db.query(ActivityChartData)
        .filter(ActivityChartData.user_id == user_id, ActivityChartData.activity_id == activity_id)
        .first()
    )
    if chart and chart.series_data:
        return chart.series_data
    return build_series(load_samples(db, user_id, activity_id))


def classify_activity(db: Session, user_id: str, activity_id: str) -> PipelineResult:
    ids = {"user_id": user_id, "activity_id": activity_id}
    logger.info("Classifying activity", extra={**ids, "step": "classification"})

    get_activity(db, user_id, activity_id)
    series = _chart_series(db, user_id, activity_id)

    metrics = aggregate_series_metrics(series)
    workout_type = classify_workout(metrics)

    _upsert(db, WorkoutClassification, ids, {
        "detected_workout_type": workout_type.value,
        "metrics": metrics,
    })
    db.commit()
    logger.info("Classified as %s", workout_type.value, extra={**ids, "step": "classification"})
    return PipelineResult({"type": workout_type.value, "metrics": metrics})


def fixed_distance_splits(
    db: Session,
    user_id: str,
    activity_id: str,
    split_m: float = 1000.0,
) -> PipelineResult:
    get_activity(db, user_id, activity_id)
    splits = distance_splits(_chart_series(db, user_id, activity_id), split_m)
    if not splits:
        return PipelineResult(None, "No distance data for splits")
    return PipelineResult(splits)


def compute_overtraining_risk(
    db: Session,
    user_id: str,
    days_to_analyze: Optional[int] = None,
    as_of: Optional[date] = None,
) -> PipelineResult:
    days = days_to_analyze or settings.overtraining_days
    as_of = as_of or date.today()
    logger.info("Computing overtraining risk over %d days", days, extra={"user_id": user_id})

    rows = (
        db.query(Activity)
        .filter(
            Activity.user_id == user_id,
            Activity.activity_date > as_of - timedelta(days=days),
            Activity.activity_date <= as_of,
        )
        .order_by(Activity.activity_date.desc())
        .all()
    )
    loads = [
        ActivityLoad(
            activity_date=a.activity_date,
            duration_minutes=(a.duration_seconds or 0) / 60,
            average_hr=a.average_heart_rate,
            max_hr=a.max_heart_rate,
            distance_meters=a.distance_meters or 0,
        )
        for a in rows
    ]
    risk = calculate_overtraining_risk(loads, as_of=as_of)

    if not rows:
        message = "Nenhuma atividade encontrada no período"
        logger.info(message, extra={"user_id": user_id})
        return PipelineResult({"risk": risk.to_dict(), "saved": None}, message)

    score = OvertrainingScore(
        user_id=user_id,
        activities_analyzed=len(rows),
        days_analyzed=days,
        **risk.to_dict(),
    )
    db.add(score)
    db.commit()
    db.refresh(score)
    logger.info(
        "Overtraining score %d (%s) from %d activities", risk.score, risk.level, len(rows),
        extra={"user_id": user_id},
    )
    return PipelineResult({"risk": risk.to_dict(), "saved": row_to_dict(score)})


def overtraining_history(db: Session, user_id: str, limit: int = 10) -> list[dict]:
    rows = (
        db.query(OvertrainingScore)
        .filter(OvertrainingScore.user_id == user_id)
        .order_by(OvertrainingScore.created_at.desc(), OvertrainingScore.id.desc())
        .limit(limit)
        .all()
    )
    return [row_to_dict(r) for r in rows]


def best_segments(db: Session, user_id: str, activity_id: Optional[str] = None) -> list[dict]:
    query = db.query(ActivityBestSegment).filter(ActivityBestSegment.user_id == user_id)
    if activity_id:
        query = query.filter(ActivityBestSegment.activity_id == activity_id)
    rows = query.order_by(ActivityBestSegment.best_pace_min_km).all()
    return [row_to_dict(r) for r in rows]
