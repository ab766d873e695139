"""
Geometry and parsing helpers shared by the tracking pipeline
"""
import math
from datetime import timezone as dt_timezone

from django.utils import timezone
from django.utils.dateparse import parse_datetime

EARTH_RADIUS_KM = 6371


def distance_km(lat1, lon1, lat2, lon2):
    """
    Calculate great-circle distance between two points in kilometers using Haversine formula.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = math.sin(delta_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_m(lat1, lon1, lat2, lon2):
    return distance_km(lat1, lon1, lat2, lon2) * 1000


def whole_minutes(delta):
    """
    Whole minutes of a timedelta, truncated toward zero (-30s -> 0, 90s -> 1)
    """
    return int(delta.total_seconds() / 60)


def parse_timestamp(value):
    """
    Parse timestamp sent by the mobile app

    Args:
        value: ISO 8601 string like "2025-01-26T10:30:00" or "2025-01-26T10:30:00Z",
               or an already parsed datetime

    Returns:
        Aware datetime, or None if the value is blank or unparseable.
        Naive values are interpreted as UTC.
    """
    if value is None:
        return None

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            parsed = parse_datetime(value)
        except ValueError:
            return None
        if parsed is None:
            return None
    else:
        parsed = value

    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed


def parse_coordinate(value):
    """
    Convert a coordinate from JSON/form input to float

    Returns:
        float, or None if missing or not a number
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
