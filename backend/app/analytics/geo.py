import math

from app.core.constants import EARTH_RADIUS_M


def haversine_m(lat1, lon1, lat2, lon2):
    """Return great‑circle distance in meters between two WGS84 points.

    Uses the standard haversine formula; sufficient for per‑point distances
    over a typical GPS activity track. NaN inputs propagate to the result.
    """
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def track_bounds(coords):
    """Bounding box of [[lat, lon], ...] as {minLat, minLon, maxLat, maxLon}."""
    if not coords:
        return None
    lats = [c[0] for c in coords]
    lons = [c[1] for c in coords]
    return {
        "minLat": min(lats),
        "minLon": min(lons),
        "maxLat": max(lats),
        "maxLon": max(lons),
    }


def is_valid_coordinate(lat, lon) -> bool:
    if lat is None or lon is None:
        return False
    if math.isnan(lat) or math.isnan(lon):
        return False
    return abs(lat) <= 90 and abs(lon) <= 180
