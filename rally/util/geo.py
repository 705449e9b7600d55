"""Great-circle distance helpers."""

import math

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Distance in kilometres between two coordinates."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def bounding_box(
    lat: float, lng: float, radius_km: float
) -> tuple[float, float, float, float]:
    """Coarse ``(min_lat, max_lat, min_lng, max_lng)`` box around a point.

    Always contains the circle of ``radius_km``; callers refine with
    ``haversine_km``.
    """
    d_lat = math.degrees(radius_km / EARTH_RADIUS_KM)
    cos_lat = math.cos(math.radians(lat))
    if cos_lat < 1e-6:
        d_lng = 180.0
    else:
        d_lng = min(math.degrees(radius_km / (EARTH_RADIUS_KM * cos_lat)), 180.0)
    return (
        max(lat - d_lat, -90.0),
        min(lat + d_lat, 90.0),
        max(lng - d_lng, -180.0),
        min(lng + d_lng, 180.0),
    )
