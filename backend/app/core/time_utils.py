def seconds_to_hhmmss(total_seconds: int) -> str:
    """
    Convert total seconds (int) -> 'HH:MM:SS'.
    Example: 2732 -> '00:45:32'
    """
    total_seconds = int(total_seconds)
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def compute_pace_min_km(duration_seconds: float, distance_m: float) -> float | None:
    """Pace in decimal minutes per kilometer, or None without distance."""
    if not distance_m or distance_m <= 0 or duration_seconds is None:
        return None
    return (duration_seconds / 60) / (distance_m / 1000)


def format_pace(pace_min_km: float | None) -> str:
    """
    Format decimal min/km as 'M:SS/km'.
    Example: 5.25 -> '5:15/km'
    """
    if pace_min_km is None or pace_min_km <= 0:
        return "0:00/km"

    pace_sec = int(round(pace_min_km * 60))
    minutes = pace_sec // 60
    seconds = pace_sec % 60
    return f"{minutes}:{seconds:02d}/km"


def pace_from_speed(speed_ms: float | None) -> float | None:
    """m/s -> min/km. None for missing or non-positive speeds."""
    if speed_ms is None or speed_ms <= 0:
        return None
    return 1000 / (speed_ms * 60)


def speed_from_pace(pace_min_km: float | None) -> float | None:
    """min/km -> m/s. None for missing or non-positive paces."""
    if pace_min_km is None or pace_min_km <= 0:
        return None
    return 1000 / (pace_min_km * 60)


def to_local_datetime(dt, tz_name: str | None = None):
    """Convert a datetime from source tz (assume UTC if naive) to local or given tz.

    - If `tz_name` is 'local' or None: use system local timezone.
    - If `tz_name` is IANA tz name (e.g., 'America/Sao_Paulo'): use that.
    - If `dt` has no tzinfo, assume UTC.
    """
    from datetime import timezone
    from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    if tz_name and tz_name != "local":
        try:
            return dt.astimezone(ZoneInfo(tz_name))
        except ZoneInfoNotFoundError:
            return dt.astimezone()
    return dt.astimezone()
