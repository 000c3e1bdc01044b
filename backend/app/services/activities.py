"""Storage of raw activities and their sample streams."""
import logging

from sqlalchemy.orm import Session

from app.core.time_utils import compute_pace_min_km, format_pace, seconds_to_hhmmss
from app.models.activity import Activity
from app.models.activity_sample import ActivitySample
from app.models.best_segment import ActivityBestSegment
from app.models.chart_data import ActivityChartData, ActivityCoordinates
from app.models.performance_metrics import PerformanceMetrics
from app.models.variation_analysis import VariationAnalysis
from app.models.workout_classification import WorkoutClassification
from app.schemas.activity import ActivityCreate, ActivityRead

logger = logging.getLogger(__name__)

# per-activity tables cleared together with the activity
DERIVED_MODELS = (
    ActivitySample,
    ActivityChartData,
    ActivityCoordinates,
    ActivityBestSegment,
    PerformanceMetrics,
    VariationAnalysis,
    WorkoutClassification,
)


def save_activity(db: Session, payload: ActivityCreate) -> Activity:
    """Insert or replace an activity; a non-empty sample list replaces the stored one."""
    data = payload.model_dump(exclude={"samples"})
    activity = (
        db.query(Activity)
        .filter(Activity.user_id == payload.user_id, Activity.activity_id == payload.activity_id)
        .first()
    )
    if activity is None:
        activity = Activity()
        db.add(activity)
    for key, value in data.items():
        setattr(activity, key, value)

    if payload.samples:
        db.query(ActivitySample).filter(
            ActivitySample.user_id == payload.user_id,
            ActivitySample.activity_id == payload.activity_id,
        ).delete(synchronize_session=False)
        db.add_all([
            ActivitySample(
                user_id=payload.user_id,
                activity_id=payload.activity_id,
                idx=i,
                **sample.model_dump(),
            )
            for i, sample in enumerate(payload.samples)
        ])

    db.commit()
    db.refresh(activity)
    logger.info(
        "Stored activity with %d samples", len(payload.samples),
        extra={"user_id": payload.user_id, "activity_id": payload.activity_id},
    )
    return activity


def delete_activity(db: Session, activity: Activity) -> None:
    for model in DERIVED_MODELS:
        db.query(model).filter(
            model.user_id == activity.user_id,
            model.activity_id == activity.activity_id,
        ).delete(synchronize_session=False)
    db.delete(activity)
    db.commit()


def count_samples(db: Session, activity: Activity) -> int:
    return (
        db.query(ActivitySample)
        .filter(
            ActivitySample.user_id == activity.user_id,
            ActivitySample.activity_id == activity.activity_id,
        )
        .count()
    )


def to_read(db: Session, activity: Activity) -> ActivityRead:
    pace = compute_pace_min_km(activity.duration_seconds, activity.distance_meters)
    return ActivityRead(
        id=activity.id,
        user_id=activity.user_id,
        activity_id=activity.activity_id,
        activity_source=activity.activity_source,
        activity_type=activity.activity_type,
        name=activity.name,
        activity_date=activity.activity_date,
        start_time=activity.start_time,
        distance_meters=activity.distance_meters,
        duration_seconds=activity.duration_seconds,
        average_heart_rate=activity.average_heart_rate,
        max_heart_rate=activity.max_heart_rate,
        average_speed_mps=activity.average_speed_mps,
        active_kilocalories=activity.active_kilocalories,
        duration=seconds_to_hhmmss(activity.duration_seconds) if activity.duration_seconds is not None else None,
        pace=format_pace(pace) if pace is not None else None,
        samples_count=count_samples(db, activity),
    )
