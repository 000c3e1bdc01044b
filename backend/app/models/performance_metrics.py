from sqlalchemy import Column, Integer, String, Float, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from app.db import Base


class PerformanceMetrics(Base):
    __tablename__ = "performance_metrics"
    __table_args__ = (
        UniqueConstraint("user_id", "activity_id", name="uq_performance_metrics_user_activity"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    activity_id = Column(String, nullable=False)

    # Efficiency
    power_per_beat = Column(Float, nullable=True)
    distance_per_minute = Column(Float, nullable=True)
    efficiency_comment = Column(String, nullable=True)

    # Pace
    average_speed_kmh = Column(Float, nullable=True)
    pace_variation_coefficient = Column(Float, nullable=True)
    pace_comment = Column(String, nullable=True)

    # Heart rate
    average_hr = Column(Integer, nullable=True)
    relative_intensity = Column(Float, nullable=True)
    relative_reserve = Column(Float, nullable=True)
    heart_rate_comment = Column(String, nullable=True)

    # Effort distribution over chronological thirds
    effort_beginning_bpm = Column(Integer, nullable=True)
    effort_middle_bpm = Column(Integer, nullable=True)
    effort_end_bpm = Column(Integer, nullable=True)
    effort_distribution_comment = Column(String, nullable=True)

    calculated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
