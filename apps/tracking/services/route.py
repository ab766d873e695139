"""
Route reconstruction
Fills large gaps of a time-ordered point sequence with linearly interpolated points.
"""
from ..functions import distance_km, whole_minutes
from ..models import LocationTrack

MIN_GAP_MINUTES = 5
MIN_GAP_DISTANCE_KM = 0.1  # 100 meters
MINUTES_PER_POINT = 2
MAX_POINTS_PER_GAP = 10


def interpolate(prev, curr, count):
    """
    Build `count` synthetic points evenly spaced between prev and curr
    """
    duration = curr.timestamp - prev.timestamp
    points = []
    for j in range(1, count + 1):
        factor = j / (count + 1)
        points.append(LocationTrack(
            surveyor_id=prev.surveyor_id,
            latitude=prev.latitude + factor * (curr.latitude - prev.latitude),
            longitude=prev.longitude + factor * (curr.longitude - prev.longitude),
            timestamp=prev.timestamp + duration * factor,
            geometry=None,
        ))
    return points


def reconstruct(points,
                min_gap_minutes=MIN_GAP_MINUTES,
                min_gap_distance_km=MIN_GAP_DISTANCE_KM,
                minutes_per_point=MINUTES_PER_POINT,
                max_points=MAX_POINTS_PER_GAP):
    """
    Ensure a complete route by filling gaps between consecutive points

    A gap is filled when it is longer than 5 whole minutes AND wider than 100 m.
    It gets one synthetic point per 2 minutes, at most 10.

    Args:
        points: Points of one surveyor in ascending time order

    Returns:
        New list with real points in original order and synthetic points
        (id=None, geometry=None) between them
    """
    if points is None or len(points) < 2:
        return points

    enhanced = [points[0]]

    for prev, curr in zip(points, points[1:]):
        minutes = whole_minutes(curr.timestamp - prev.timestamp)

        if minutes > min_gap_minutes:
            distance = distance_km(prev.latitude, prev.longitude, curr.latitude, curr.longitude)
            if distance > min_gap_distance_km:
                count = min(minutes // minutes_per_point, max_points)
                enhanced.extend(interpolate(prev, curr, count))

        enhanced.append(curr)

    return enhanced
