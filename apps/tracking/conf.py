"""
Tracking settings with defaults
Values in settings.TRACKING override the defaults below.
"""
from django.conf import settings

DEFAULTS = {
    # A surveyor is online if the last GPS point (or activity) is at most 12 minutes old
    'ONLINE_TIMEOUT_SECONDS': 720,
    # Dashboard status also accepts a location from the last 15 minutes
    'STATUS_LOCATION_WINDOW_MINUTES': 15,

    # Duplicate suppression: skip only if BOTH limits are undercut
    'DEDUP_MAX_MINUTES': 1,
    'DEDUP_MAX_METERS': 10,
    'FUTURE_TOLERANCE_SECONDS': 60,

    # Route gap interpolation
    'INTERPOLATION_MIN_GAP_MINUTES': 5,
    'INTERPOLATION_MIN_DISTANCE_KM': 0.1,
    'INTERPOLATION_MINUTES_PER_POINT': 2,
    'INTERPOLATION_MAX_POINTS': 10,

    'HISTORY_PAGE_SIZE': 1000,

    # Redis URL for live broadcast, None logs instead of publishing
    'BROADCAST_URL': None,
    'BROADCAST_TOPIC_PREFIX': '/topic/location',

    # Basic auth on ingestion endpoints
    'REQUIRE_AUTH': True,
}


def tracking_setting(name):
    """
    Return a tracking setting, falling back to the default value
    """
    overrides = getattr(settings, 'TRACKING', None) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
