from sqlalchemy import Column, Integer, String, Float, Boolean, UniqueConstraint
from app.db import Base


class VariationAnalysis(Base):
    __tablename__ = "variation_analysis"
    __table_args__ = (
        UniqueConstraint("user_id", "activity_id", name="uq_variation_analysis_user_activity"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    activity_id = Column(String, nullable=False)

    heart_rate_cv = Column(Float, nullable=False)
    heart_rate_category = Column(String(10), nullable=False)  # Baixo / Alto
    pace_cv = Column(Float, nullable=True)
    pace_category = Column(String(10), nullable=True)
    diagnosis = Column(String, nullable=False)
    has_heart_rate_data = Column(Boolean, nullable=False)
    has_pace_data = Column(Boolean, nullable=False)
    data_points_count = Column(Integer, nullable=False)
