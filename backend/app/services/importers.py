"""
GPX / FIT file import into activity samples.

Both parsers return an `ActivityCreate` with one sample per track point and
the activity aggregates derived from the samples (session totals win for FIT).
"""
import io
import logging
import os
from datetime import date, datetime, timezone
from typing import Optional

import gpxpy
from fitparse import FitFile

from app.analytics.geo import haversine_m
from app.core.config import settings
from app.core.time_utils import to_local_datetime
from app.schemas.activity import ActivityCreate, SampleIn

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".gpx", ".fit")


def _semicircles_to_degrees(val):
    return val * (180 / 2**31) if val is not None else None


def _epoch(ts: Optional[datetime]) -> Optional[float]:
    if ts is None:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.timestamp()


def _gpx_heart_rate(point) -> Optional[int]:
    # Garmin TrackPointExtension: <gpxtpx:TrackPointExtension><gpxtpx:hr>
    for ext in point.extensions or []:
        for el in ext.iter():
            if el.tag.split("}")[-1].lower() == "hr" and el.text:
                try:
                    return int(float(el.text))
                except ValueError:
                    return None
    return None


def _with_distance(samples: list[SampleIn]) -> list[SampleIn]:
    """Fill cumulative distance by walking the track where the file has none."""
    total = 0.0
    last = None
    for s in samples:
        if s.latitude is not None and s.longitude is not None:
            if last is not None:
                total += haversine_m(last[0], last[1], s.latitude, s.longitude)
            last = (s.latitude, s.longitude)
        if s.distance_meters is None:
            s.distance_meters = round(total, 2)
    return samples


def _aggregates(samples: list[SampleIn], start: Optional[datetime]) -> dict:
    timestamps = [s.timestamp_seconds for s in samples if s.timestamp_seconds is not None]
    distances = [s.distance_meters for s in samples if s.distance_meters is not None]
    hrs = [s.heart_rate for s in samples if s.heart_rate]

    duration = int(max(timestamps) - min(timestamps)) if timestamps else None
    distance = max(distances) if distances else None

    if start is not None:
        local_start = to_local_datetime(start, settings.timezone)
        activity_date = local_start.date()
    else:
        local_start = None
        activity_date = date.today()

    return {
        "activity_date": activity_date,
        "start_time": local_start,
        "distance_meters": round(distance, 1) if distance is not None else None,
        "duration_seconds": duration,
        "average_heart_rate": int(round(sum(hrs) / len(hrs))) if hrs else None,
        "max_heart_rate": max(hrs) if hrs else None,
        "average_speed_mps": round(distance / duration, 3) if distance and duration else None,
    }


def parse_gpx(data, user_id: str, activity_id: str, source: str = "strava_gpx") -> ActivityCreate:
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    gpx = gpxpy.parse(data)

    samples: list[SampleIn] = []
    start = None
    for track in gpx.tracks:
        for segment in track.segments:
            for p in segment.points:
                if p.time is not None and start is None:
                    start = p.time
                samples.append(SampleIn(
                    timestamp_seconds=_epoch(p.time),
                    latitude=p.latitude,
                    longitude=p.longitude,
                    heart_rate=_gpx_heart_rate(p),
                    elevation_meters=p.elevation,
                ))
    samples = _with_distance(samples)
    name = gpx.tracks[0].name if gpx.tracks and gpx.tracks[0].name else gpx.name

    logger.info("Parsed %d GPX points", len(samples), extra={"activity_id": activity_id, "user_id": user_id})
    return ActivityCreate(
        user_id=user_id,
        activity_id=activity_id,
        activity_source=source,
        activity_type="RUNNING",
        name=name,
        samples=samples,
        **_aggregates(samples, start),
    )


def parse_fit(data: bytes, user_id: str, activity_id: str, source: str = "garmin") -> ActivityCreate:
    ff = FitFile(io.BytesIO(data))

    session: dict = {}
    for message in ff.get_messages("session"):
        session = {f.name: f.value for f in message}
        break

    samples: list[SampleIn] = []
    start = None
    for record in ff.get_messages("record"):
        fields = {f.name: f.value for f in record}
        ts = fields.get("timestamp")
        if ts and start is None:
            start = ts
        # Prefer enhanced fields when present
        speed = fields.get("enhanced_speed")
        if speed is None:
            speed = fields.get("speed")
        ele = fields.get("enhanced_altitude")
        if ele is None:
            ele = fields.get("altitude")
        distance = fields.get("distance")
        samples.append(SampleIn(
            timestamp_seconds=_epoch(ts),
            latitude=_semicircles_to_degrees(fields.get("position_lat")),
            longitude=_semicircles_to_degrees(fields.get("position_long")),
            distance_meters=float(distance) if distance is not None else None,
            heart_rate=fields.get("heart_rate"),
            speed_mps=float(speed) if speed is not None else None,
            power_watts=fields.get("power"),
            elevation_meters=float(ele) if ele is not None else None,
        ))
    samples = _with_distance(samples)

    aggregates = _aggregates(samples, start)
    # Session totals cover treadmill runs without GPS
    if session.get("total_distance") is not None:
        aggregates["distance_meters"] = float(session["total_distance"])
    if session.get("total_timer_time") is not None:
        aggregates["duration_seconds"] = int(session["total_timer_time"])
    if session.get("avg_heart_rate") is not None:
        aggregates["average_heart_rate"] = int(session["avg_heart_rate"])
    if session.get("max_heart_rate") is not None:
        aggregates["max_heart_rate"] = int(session["max_heart_rate"])
    if session.get("total_calories") is not None:
        aggregates["active_kilocalories"] = float(session["total_calories"])
    if aggregates["distance_meters"] and aggregates["duration_seconds"]:
        aggregates["average_speed_mps"] = round(
            aggregates["distance_meters"] / aggregates["duration_seconds"], 3
        )

    logger.info("Parsed %d FIT records", len(samples), extra={"activity_id": activity_id, "user_id": user_id})
    return ActivityCreate(
        user_id=user_id,
        activity_id=activity_id,
        activity_source=source,
        activity_type=str(session.get("sport") or "running").upper(),
        samples=samples,
        **aggregates,
    )


def parse_activity_file(
    filename: str,
    data: bytes,
    user_id: str,
    activity_id: Optional[str] = None,
    source: Optional[str] = None,
) -> ActivityCreate:
    """Dispatch on the file extension. Raises ValueError for anything unsupported."""
    stem, ext = os.path.splitext(filename or "")
    ext = ext.lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise ValueError("Only .gpx or .fit files are supported")
    activity_id = activity_id or stem or "import"
    if ext == ".gpx":
        return parse_gpx(data, user_id, activity_id, source or "strava_gpx")
    return parse_fit(data, user_id, activity_id, source or "garmin")
