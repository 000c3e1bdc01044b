from sqlalchemy import Column, Integer, String, Float, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from app.db import Base, JSONType


class ActivityChartData(Base):
    __tablename__ = "activity_chart_data"
    __table_args__ = (
        UniqueConstraint("user_id", "activity_id", name="uq_chart_data_user_activity"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    activity_id = Column(String, nullable=False)
    activity_source = Column(String(20), nullable=True)

    # [{time_s, distance_m, hr, speed_ms, pace_min_km}] (downsampled)
    series_data = Column(JSONType, nullable=False)
    data_points_count = Column(Integer, nullable=False)
    hr_zones = Column(JSONType, nullable=True)

    duration_seconds = Column(Float, nullable=True)
    total_distance_meters = Column(Float, nullable=True)
    avg_speed_ms = Column(Float, nullable=True)
    avg_pace_min_km = Column(Float, nullable=True)
    avg_heart_rate = Column(Integer, nullable=True)
    max_heart_rate = Column(Integer, nullable=True)

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class ActivityCoordinates(Base):
    __tablename__ = "activity_coordinates"
    __table_args__ = (
        UniqueConstraint("user_id", "activity_id", name="uq_coordinates_user_activity"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    activity_id = Column(String, nullable=False)
    activity_source = Column(String(20), nullable=True)

    coordinates = Column(JSONType, nullable=False)  # [[lat, lon], ...] sampled
    bounds = Column(JSONType, nullable=True)        # {minLat, minLon, maxLat, maxLon}
    total_points = Column(Integer, nullable=False)
    sampled_points = Column(Integer, nullable=False)
    starting_latitude = Column(Float, nullable=True)
    starting_longitude = Column(Float, nullable=True)
