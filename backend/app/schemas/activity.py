from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.constants import ACTIVITY_SOURCES


class SampleIn(BaseModel):
    """One raw sample as delivered by ingestion."""

    timestamp_seconds: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    distance_meters: Optional[float] = None
    heart_rate: Optional[int] = None
    speed_mps: Optional[float] = None
    power_watts: Optional[float] = None
    elevation_meters: Optional[float] = None


class ActivityBase(BaseModel):
    user_id: str
    activity_id: str
    activity_source: str = "manual"
    activity_type: Optional[str] = None
    name: Optional[str] = None
    activity_date: date
    start_time: Optional[datetime] = None

    distance_meters: Optional[float] = None
    duration_seconds: Optional[int] = None
    average_heart_rate: Optional[int] = None
    max_heart_rate: Optional[int] = None
    average_speed_mps: Optional[float] = None
    active_kilocalories: Optional[float] = None

    @field_validator("activity_source")
    @classmethod
    def _known_source(cls, v):
        if v not in ACTIVITY_SOURCES:
            raise ValueError(f"activity_source must be one of {', '.join(ACTIVITY_SOURCES)}")
        return v


class ActivityCreate(ActivityBase):
    """Schema for storing an activity together with its sample stream."""

    samples: list[SampleIn] = Field(default_factory=list)


class ActivityRead(ActivityBase):
    """Schema returned when reading an activity."""

    id: int
    duration: Optional[str] = None  # "HH:MM:SS"
    pace: Optional[str] = None      # e.g. "5:15/km"
    samples_count: int = 0

    model_config = ConfigDict(from_attributes=True)
