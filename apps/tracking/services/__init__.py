"""
Tracking services

get_services() returns the process-wide container used by views and
management commands. Tests build isolated containers with build_services().
"""
from dataclasses import dataclass
from functools import lru_cache

from django.utils import timezone

from ..conf import tracking_setting
from ..notifications import build_notification_sink
from ..repositories import PointStore, SurveyorDirectory
from .activity import ActivityCache, ActivityTracker
from .ingestion import IngestionPipeline
from .query import QueryService
from .route import reconstruct


@dataclass
class TrackingServices:
    directory: object
    points: object
    activity: ActivityTracker
    ingestion: IngestionPipeline
    queries: QueryService


def build_services(directory=None, points=None, sink=None, cache=None, clock=timezone.now):
    directory = directory if directory is not None else SurveyorDirectory()
    points = points if points is not None else PointStore()
    if sink is None:
        sink = build_notification_sink(tracking_setting('BROADCAST_URL'))

    activity = ActivityTracker(
        directory,
        points,
        cache=cache if cache is not None else ActivityCache(),
        clock=clock,
        online_timeout_seconds=tracking_setting('ONLINE_TIMEOUT_SECONDS'),
        status_window_minutes=tracking_setting('STATUS_LOCATION_WINDOW_MINUTES'),
    )

    ingestion = IngestionPipeline(
        points,
        activity,
        sink,
        clock=clock,
        topic_prefix=tracking_setting('BROADCAST_TOPIC_PREFIX'),
        dedup_max_minutes=tracking_setting('DEDUP_MAX_MINUTES'),
        dedup_max_meters=tracking_setting('DEDUP_MAX_METERS'),
        future_tolerance_seconds=tracking_setting('FUTURE_TOLERANCE_SECONDS'),
    )

    def reconstructor(track):
        return reconstruct(
            track,
            min_gap_minutes=tracking_setting('INTERPOLATION_MIN_GAP_MINUTES'),
            min_gap_distance_km=tracking_setting('INTERPOLATION_MIN_DISTANCE_KM'),
            minutes_per_point=tracking_setting('INTERPOLATION_MINUTES_PER_POINT'),
            max_points=tracking_setting('INTERPOLATION_MAX_POINTS'),
        )

    queries = QueryService(
        directory,
        points,
        activity,
        reconstructor=reconstructor,
        page_size=tracking_setting('HISTORY_PAGE_SIZE'),
    )

    return TrackingServices(directory, points, activity, ingestion, queries)


@lru_cache(maxsize=None)
def get_services():
    return build_services()


def reset_services():
    get_services.cache_clear()
