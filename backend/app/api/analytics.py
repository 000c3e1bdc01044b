from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.db import get_db
from app.schemas.analytics import (
    ActivityRequest,
    BackfillRequest,
    BestSegmentRequest,
    ChartDataRequest,
    OvertrainingBatchRequest,
    OvertrainingRequest,
    PerformanceMetricsRequest,
)
from app.services import analytics as svc
from app.services.batch import run_backfill, run_overtraining_batch, select_activities

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.post("/chart-data")
def chart_data(payload: ChartDataRequest, db: Session = Depends(get_db)):
    result = svc.compute_chart_data(
        db,
        payload.user_id,
        payload.activity_id,
        activity_source=payload.activity_source,
        full_precision=payload.full_precision,
    )
    return {
        "success": True,
        "user_id": payload.user_id,
        "activity_id": payload.activity_id,
        **result.value,
    }


@router.post("/best-segment")
def best_segment(payload: BestSegmentRequest, db: Session = Depends(get_db)):
    result = svc.compute_best_segment(
        db, payload.user_id, payload.activity_id, payload.segment_distance_meters
    )
    return {"success": True, "best_segment": result.value, "message": result.message}


@router.post("/performance-metrics")
def performance_metrics(payload: PerformanceMetricsRequest, db: Session = Depends(get_db)):
    result = svc.compute_performance_metrics(
        db, payload.user_id, payload.activity_id, resting_hr=payload.resting_hr
    )
    return {"success": True, **result.value}


@router.post("/variation")
def variation(payload: ActivityRequest, db: Session = Depends(get_db)):
    result = svc.compute_variation_analysis(db, payload.user_id, payload.activity_id)
    return {"success": True, "data": result.value, "message": result.message}


@router.post("/classify")
def classify(payload: ActivityRequest, db: Session = Depends(get_db)):
    result = svc.classify_activity(db, payload.user_id, payload.activity_id)
    return {"success": True, **result.value}


@router.post("/overtraining-risk")
def overtraining_risk(payload: OvertrainingRequest, db: Session = Depends(get_db)):
    result = svc.compute_overtraining_risk(
        db, payload.user_id, payload.days_to_analyze, as_of=payload.as_of
    )
    return {
        "success": True,
        "risk": result.value["risk"],
        "data": result.value["saved"],
        "message": result.message,
    }


@router.get("/overtraining-history")
def overtraining_history(
    user_id: str = Query(...),
    limit: int = Query(10, gt=0, le=100),
    db: Session = Depends(get_db),
):
    return {"success": True, "data": svc.overtraining_history(db, user_id, limit)}


@router.post("/overtraining-batch")
def overtraining_batch(payload: OvertrainingBatchRequest, db: Session = Depends(get_db)):
    summary = run_overtraining_batch(
        db,
        batch_size=payload.batch_size,
        days_active_threshold=payload.days_active_threshold,
        days_to_analyze=payload.days_to_analyze,
        delay_s=payload.delay_seconds,
        as_of=payload.as_of,
    )
    return {"success": True, **summary}


@router.post("/backfill")
def backfill(payload: BackfillRequest, db: Session = Depends(get_db)):
    activities = select_activities(db, payload.user_id, payload.activity_ids)
    summary = run_backfill(
        db,
        activities,
        steps=payload.steps,
        batch_size=payload.batch_size,
        delay_s=payload.delay_seconds,
    )
    return {"success": True, **summary}


@router.get("/splits")
def splits(
    user_id: str = Query(...),
    activity_id: str = Query(...),
    split_meters: float = Query(1000.0, gt=0),
    db: Session = Depends(get_db),
):
    result = svc.fixed_distance_splits(db, user_id, activity_id, split_meters)
    return {"success": True, "splits": result.value or [], "message": result.message}


@router.get("/best-segments")
def list_best_segments(
    user_id: str = Query(...),
    activity_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return {"success": True, "data": svc.best_segments(db, user_id, activity_id)}
