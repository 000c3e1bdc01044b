from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, HTTPException, UploadFile, File, Form
from sqlalchemy.orm import Session
from app.schemas.activity import ActivityCreate, ActivityRead
from app.models.activity import Activity
from app.db import get_db
from app.services.activities import save_activity, delete_activity, to_read
from app.services.importers import parse_activity_file

router = APIRouter(prefix="/activities", tags=["activities"])


def _get_or_404(db: Session, user_id: str, activity_id: str) -> Activity:
    activity = (
        db.query(Activity)
        .filter(Activity.user_id == user_id, Activity.activity_id == activity_id)
        .first()
    )
    if not activity:
        raise HTTPException(status_code=404, detail="Activity not found")
    return activity


@router.post("/", response_model=ActivityRead)
def create_activity(payload: ActivityCreate, db: Session = Depends(get_db)):
    # Validate inputs
    if payload.distance_meters is not None and payload.distance_meters < 0:
        raise HTTPException(status_code=422, detail="distance_meters must be >= 0")
    if payload.duration_seconds is not None and payload.duration_seconds < 0:
        raise HTTPException(status_code=422, detail="duration_seconds must be >= 0")

    activity = save_activity(db, payload)
    return to_read(db, activity)


@router.post("/import", response_model=ActivityRead)
def import_activity(
    file: UploadFile = File(...),
    user_id: str = Form(...),
    activity_id: Optional[str] = Form(None),
    activity_source: Optional[str] = Form(None),
    db: Session = Depends(get_db),
):
    """Import a .gpx or .fit file as an activity with its full sample stream."""
    data = file.file.read()
    try:
        payload = parse_activity_file(
            file.filename or "import",
            data,
            user_id=user_id,
            activity_id=activity_id,
            source=activity_source,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Invalid file: {e}")

    activity = save_activity(db, payload)
    return to_read(db, activity)


@router.get("/", response_model=list[ActivityRead])
def list_activities(
    user_id: str = Query(...),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
):
    """
    List a user's activities, optionally filtered by [start_date, end_date].

      GET /activities?user_id=u1&start_date=2025-01-06&end_date=2025-01-12
    """
    query = db.query(Activity).filter(Activity.user_id == user_id)

    if start_date is not None:
        query = query.filter(Activity.activity_date >= start_date)
    if end_date is not None:
        query = query.filter(Activity.activity_date <= end_date)

    # Most recent first
    activities = query.order_by(Activity.activity_date.desc(), Activity.id.desc()).all()
    return [to_read(db, a) for a in activities]


@router.get("/{activity_id}", response_model=ActivityRead)
def get_activity(activity_id: str, user_id: str = Query(...), db: Session = Depends(get_db)):
    return to_read(db, _get_or_404(db, user_id, activity_id))


@router.delete("/{activity_id}")
def remove_activity(activity_id: str, user_id: str = Query(...), db: Session = Depends(get_db)):
    delete_activity(db, _get_or_404(db, user_id, activity_id))
    return {"message": "Activity deleted"}
