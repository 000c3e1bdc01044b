from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from app.db import Base, JSONType


class OvertrainingScore(Base):
    """Append-only history: one row per analysis run."""

    __tablename__ = "overtraining_scores"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)

    score = Column(Integer, nullable=False)  # 0-100
    level = Column(String(10), nullable=False)  # low, medium, high
    factors = Column(JSONType, nullable=False)  # list[str]
    recommendation = Column(String, nullable=True)

    training_load_score = Column(Integer, nullable=False)
    frequency_score = Column(Integer, nullable=False)
    intensity_score = Column(Integer, nullable=False)
    volume_trend_score = Column(Integer, nullable=False)

    activities_analyzed = Column(Integer, nullable=False)
    days_analyzed = Column(Integer, nullable=False)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )


class OvertrainingBatchLog(Base):
    __tablename__ = "overtraining_batch_logs"

    id = Column(Integer, primary_key=True, index=True)
    status = Column(String(20), nullable=False, server_default="running")  # running, completed, failed

    batch_size = Column(Integer, nullable=False)
    days_active_threshold = Column(Integer, nullable=False)

    total_users_processed = Column(Integer, nullable=True)
    successful_calculations = Column(Integer, nullable=True)
    failed_calculations = Column(Integer, nullable=True)
    execution_time_seconds = Column(Integer, nullable=True)
    error_message = Column(String, nullable=True)
    # {days_to_analyze, errors: [{user_id, error}]}
    metadata_json = Column("metadata", JSONType, nullable=True)

    started_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    completed_at = Column(DateTime(timezone=True), nullable=True)
