"""
Batch sweeps over many activities or users.

Items are processed in fixed-size chunks with a fixed pause between chunks.
The chunk is only a throttle: items inside a chunk run one after another on
the caller's Session, never in parallel.
A failing item is rolled back and reported on its own; the sweep goes on.
"""
import logging
import time
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Iterable, Optional, Sequence

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AnalyticsError
from app.models.activity import Activity
from app.models.overtraining import OvertrainingBatchLog
from app.schemas.analytics import PipelineStep
from app.services.analytics import (
    classify_activity,
    compute_best_segment,
    compute_chart_data,
    compute_overtraining_risk,
    compute_performance_metrics,
    compute_variation_analysis,
)

logger = logging.getLogger(__name__)

# chart data first: classification reads the stored series
STEP_FUNCTIONS = {
    PipelineStep.chart_data: compute_chart_data,
    PipelineStep.best_segment: compute_best_segment,
    PipelineStep.performance_metrics: compute_performance_metrics,
    PipelineStep.variation: compute_variation_analysis,
    PipelineStep.classification: classify_activity,
}


def chunked(items: Sequence, size: int) -> list[list]:
    if size <= 0:
        raise ValueError("batch size must be > 0")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


def select_activities(
    db: Session,
    user_id: Optional[str] = None,
    activity_ids: Optional[Iterable[str]] = None,
) -> list[tuple[str, str]]:
    query = db.query(Activity.user_id, Activity.activity_id)
    if user_id:
        query = query.filter(Activity.user_id == user_id)
    if activity_ids:
        query = query.filter(Activity.activity_id.in_(list(activity_ids)))
    rows = query.order_by(Activity.activity_date, Activity.id).all()
    return [(r.user_id, r.activity_id) for r in rows]


def _error_text(exc: Exception) -> str:
    return exc.message if isinstance(exc, AnalyticsError) else str(exc)


def _run_steps(db: Session, user_id: str, activity_id: str, steps: Sequence[PipelineStep]) -> dict:
    item = {"user_id": user_id, "activity_id": activity_id, "success": True, "steps": {}}
    ordered = [s for s in STEP_FUNCTIONS if s in steps]
    for step in ordered:
        try:
            result = STEP_FUNCTIONS[step](db, user_id, activity_id)
        except Exception as e:
            db.rollback()
            logger.exception(
                "Step %s failed", step.value,
                extra={"user_id": user_id, "activity_id": activity_id, "step": step.value},
            )
            item["success"] = False
            item["error"] = _error_text(e)
            item["steps"][step.value] = "failed"
            break
        item["steps"][step.value] = "ok" if result.applicable else "not_applicable"
    return item


def run_backfill(
    db: Session,
    activities: Sequence[tuple[str, str]],
    steps: Sequence[PipelineStep] = tuple(PipelineStep),
    batch_size: Optional[int] = None,
    delay_s: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> dict:
    """Run the selected pipeline steps for every (user_id, activity_id).

    `batch_size` only sets how often to pause; items run sequentially.
    """
    batch_size = batch_size or settings.batch_size
    delay_s = settings.batch_delay_seconds if delay_s is None else delay_s

    batches = chunked(activities, batch_size)
    results = []
    for n, batch in enumerate(batches, start=1):
        logger.info("Processing batch %d/%d (%d activities)", n, len(batches), len(batch))
        for user_id, activity_id in batch:
            results.append(_run_steps(db, user_id, activity_id, steps))
        if n < len(batches) and delay_s > 0:
            sleep(delay_s)

    successful = sum(1 for r in results if r["success"])
    logger.info("Backfill done: %d ok, %d failed", successful, len(results) - successful)
    return {
        "processed": len(results),
        "successful": successful,
        "failed": len(results) - successful,
        "results": results,
    }


def active_users(db: Session, since: date) -> list[str]:
    rows = (
        db.query(Activity.user_id)
        .filter(Activity.activity_date >= since)
        .distinct()
        .order_by(Activity.user_id)
        .all()
    )
    return [r.user_id for r in rows]


def run_overtraining_batch(
    db: Session,
    batch_size: Optional[int] = None,
    days_active_threshold: int = 30,
    days_to_analyze: Optional[int] = None,
    delay_s: Optional[float] = None,
    as_of: Optional[date] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> dict:
    """Score every user with an activity in the last `days_active_threshold` days.

    Users are scored sequentially; `batch_size` only sets how often to pause.
    """
    batch_size = batch_size or settings.batch_size
    delay_s = settings.batch_delay_seconds if delay_s is None else delay_s
    days_to_analyze = days_to_analyze or settings.overtraining_days
    as_of = as_of or date.today()
    started = time.monotonic()

    log = OvertrainingBatchLog(
        status="running",
        batch_size=batch_size,
        days_active_threshold=days_active_threshold,
        metadata_json={"days_to_analyze": days_to_analyze, "as_of": as_of.isoformat()},
    )
    db.add(log)
    db.commit()
    db.refresh(log)

    successful = failed = 0
    errors: list[dict] = []
    try:
        users = active_users(db, as_of - timedelta(days=days_active_threshold))
        logger.info("Overtraining batch %d: %d active users", log.id, len(users))

        batches = chunked(users, batch_size)
        for n, batch in enumerate(batches, start=1):
            for user_id in batch:
                try:
                    compute_overtraining_risk(db, user_id, days_to_analyze, as_of=as_of)
                    successful += 1
                except Exception as e:
                    db.rollback()
                    failed += 1
                    errors.append({"user_id": user_id, "error": _error_text(e)})
                    logger.exception("Overtraining failed", extra={"user_id": user_id})
            if n < len(batches) and delay_s > 0:
                sleep(delay_s)

        log.status = "completed"
        log.total_users_processed = len(users)
    except Exception as e:
        db.rollback()
        log.status = "failed"
        log.error_message = str(e)
        log.completed_at = datetime.now(timezone.utc)
        log.execution_time_seconds = int(time.monotonic() - started)
        db.commit()
        raise

    log.successful_calculations = successful
    log.failed_calculations = failed
    log.execution_time_seconds = int(time.monotonic() - started)
    log.completed_at = datetime.now(timezone.utc)
    log.metadata_json = {
        **(log.metadata_json or {}),
        "errors": errors[:settings.batch_log_max_errors],
    }
    db.commit()

    logger.info("Overtraining batch %d done: %d ok, %d failed", log.id, successful, failed)
    return {
        "batch_id": log.id,
        "total_users": log.total_users_processed,
        "successful": successful,
        "failed": failed,
        "errors": errors[:settings.batch_log_max_errors],
        "execution_time_seconds": log.execution_time_seconds,
    }
