from sqlalchemy import Column, Integer, String, Float, Date, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from app.db import Base


class ActivityBestSegment(Base):
    __tablename__ = "activity_best_segments"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "activity_id", "segment_distance_meters",
            name="uq_best_segments_user_activity_distance",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    activity_id = Column(String, nullable=False)
    activity_date = Column(Date, nullable=True)

    segment_distance_meters = Column(Float, nullable=False, default=1000.0)
    best_pace_min_km = Column(Float, nullable=False)
    segment_start_timestamp = Column(Float, nullable=False)
    segment_end_timestamp = Column(Float, nullable=False)
    segment_start_distance_meters = Column(Float, nullable=False)
    segment_end_distance_meters = Column(Float, nullable=False)
    segment_duration_seconds = Column(Float, nullable=False)

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
