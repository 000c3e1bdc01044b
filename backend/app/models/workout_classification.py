from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from app.db import Base, JSONType


class WorkoutClassification(Base):
    __tablename__ = "workout_classification"
    __table_args__ = (
        UniqueConstraint("user_id", "activity_id", name="uq_workout_classification_user_activity"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    activity_id = Column(String, nullable=False)

    detected_workout_type = Column(String(30), nullable=False)
    # {dist_km, dur_min, avg_pace, cv_pace, avg_hr, cv_hr}
    metrics = Column(JSONType, nullable=False)

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
