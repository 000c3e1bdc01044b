from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PipelineStep(str, Enum):
    chart_data = "chart_data"
    best_segment = "best_segment"
    performance_metrics = "performance_metrics"
    variation = "variation"
    classification = "classification"


class ActivityRequest(BaseModel):
    """Common body of every per-activity pipeline call."""

    activity_id: str
    user_id: str
    activity_source: Optional[str] = None

    # clients send extra tuning flags we don't use
    model_config = ConfigDict(extra="ignore")


class ChartDataRequest(ActivityRequest):
    full_precision: bool = False


class BestSegmentRequest(ActivityRequest):
    segment_distance_meters: Optional[float] = Field(default=None, gt=0)


class PerformanceMetricsRequest(ActivityRequest):
    resting_hr: Optional[int] = Field(default=None, gt=0)


class OvertrainingRequest(BaseModel):
    user_id: str
    days_to_analyze: int = Field(default=30, gt=0)
    as_of: Optional[date] = None


class OvertrainingBatchRequest(BaseModel):
    batch_size: Optional[int] = Field(default=None, gt=0)
    days_active_threshold: int = Field(default=30, gt=0)
    days_to_analyze: int = Field(default=30, gt=0)
    delay_seconds: Optional[float] = Field(default=None, ge=0)
    as_of: Optional[date] = None


class BackfillRequest(BaseModel):
    user_id: Optional[str] = None
    activity_ids: Optional[list[str]] = None
    steps: list[PipelineStep] = Field(default_factory=lambda: list(PipelineStep))
    batch_size: Optional[int] = Field(default=None, gt=0)
    delay_seconds: Optional[float] = Field(default=None, ge=0)
