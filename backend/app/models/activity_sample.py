from sqlalchemy import Column, Integer, String, Float, Index
from app.db import Base


class ActivitySample(Base):
    """One raw sensor/GPS sample as stored by ingestion. Read-only for analytics."""

    __tablename__ = "activity_samples"
    __table_args__ = (
        Index("ix_activity_samples_user_activity", "user_id", "activity_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False)
    activity_id = Column(String, nullable=False)

    idx = Column(Integer, nullable=False)  # 0-based position in the stream
    timestamp_seconds = Column(Float, nullable=True)  # epoch or activity-relative
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    distance_meters = Column(Float, nullable=True)  # cumulative
    heart_rate = Column(Integer, nullable=True)
    speed_mps = Column(Float, nullable=True)
    power_watts = Column(Float, nullable=True)
    elevation_meters = Column(Float, nullable=True)
