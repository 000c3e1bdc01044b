from sqlalchemy import Column, Integer, String, Date, DateTime, Float, UniqueConstraint
from sqlalchemy.sql import func
from app.db import Base


class Activity(Base):
    __tablename__ = "activities"
    __table_args__ = (
        UniqueConstraint("user_id", "activity_id", name="uq_activities_user_activity"),
    )

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(String, nullable=False, index=True)
    activity_id = Column(String, nullable=False, index=True)

    # Upstream provider: garmin, strava, polar, strava_gpx, zepp_gpx, manual
    activity_source = Column(String(20), nullable=False, server_default="manual")
    activity_type = Column(String(40), nullable=True)  # RUNNING, WALKING, ...
    name = Column(String, nullable=True)

    activity_date = Column(Date, nullable=False, index=True)
    start_time = Column(DateTime(timezone=True), nullable=True)

    # Aggregates as reported by the provider (or derived on import)
    distance_meters = Column(Float, nullable=True)
    duration_seconds = Column(Integer, nullable=True)
    average_heart_rate = Column(Integer, nullable=True)
    max_heart_rate = Column(Integer, nullable=True)
    average_speed_mps = Column(Float, nullable=True)
    active_kilocalories = Column(Float, nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
