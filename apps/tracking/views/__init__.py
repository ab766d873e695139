"""
Tracking Views Package
Provides the JSON API used by the mobile app and the dashboard
"""
from .api.receiver import publish_live_location, publish_final_location, publish_location_batch
from .api.history import (
    get_latest_location,
    get_track_history,
    get_enhanced_track_history,
    get_total_distance,
)
from .api.surveyors import (
    get_surveyor_statuses,
    filter_surveyors,
    get_surveyors_with_locations,
    get_surveyor_status,
    update_activity,
)

__all__ = [
    # Ingestion endpoints
    'publish_live_location',
    'publish_final_location',
    'publish_location_batch',

    # History endpoints
    'get_latest_location',
    'get_track_history',
    'get_enhanced_track_history',
    'get_total_distance',

    # Surveyor status endpoints
    'get_surveyor_statuses',
    'filter_surveyors',
    'get_surveyors_with_locations',
    'get_surveyor_status',
    'update_activity',
]
