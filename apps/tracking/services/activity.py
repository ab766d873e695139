"""
Surveyor activity and online status

Online status is derived from three sources, in order:
    1. the latest stored GPS point (short-circuits when present)
    2. the in-memory last-activity cache
    3. the persisted last_activity_timestamp of the directory entry
"""
import logging
import math
import threading
from datetime import timedelta

from django.db import DatabaseError
from django.utils import timezone

logger = logging.getLogger(__name__)

ONLINE_TIMEOUT_SECONDS = 720
STATUS_LOCATION_WINDOW_MINUTES = 15

ONLINE = 'Online'
OFFLINE = 'Offline'


class ActivityCache:
    """
    Process-wide map of surveyor id -> last activity time
    Last write wins, entries are never evicted
    """

    def __init__(self):
        self._entries = {}
        self._lock = threading.Lock()

    def touch(self, surveyor_id, when):
        with self._lock:
            self._entries[surveyor_id] = when

    def get(self, surveyor_id):
        with self._lock:
            return self._entries.get(surveyor_id)

    def __contains__(self, surveyor_id):
        with self._lock:
            return surveyor_id in self._entries

    def __len__(self):
        with self._lock:
            return len(self._entries)


class ActivityTracker:

    def __init__(self, directory, points, cache=None, clock=timezone.now,
                 online_timeout_seconds=ONLINE_TIMEOUT_SECONDS,
                 status_window_minutes=STATUS_LOCATION_WINDOW_MINUTES):
        self.directory = directory
        self.points = points
        self.cache = cache if cache is not None else ActivityCache()
        self.clock = clock
        self.online_timeout_seconds = online_timeout_seconds
        self.status_window_minutes = status_window_minutes

    def record_activity(self, surveyor_id):
        """
        Mark the surveyor as active now and mirror the time into the directory entry
        An unknown surveyor only gets the in-memory entry
        """
        now = self.clock()
        self.cache.touch(surveyor_id, now)

        surveyor = self.directory.find_surveyor(surveyor_id)
        if surveyor is not None:
            surveyor.last_activity_timestamp = now
            self.directory.save(surveyor)
        return now

    def last_activity(self, surveyor_id):
        last = self.cache.get(surveyor_id)
        if last is not None:
            return last
        surveyor = self.directory.find_surveyor(surveyor_id)
        if surveyor is not None:
            return surveyor.last_activity_timestamp
        return None

    def _within_timeout(self, when):
        # Whole epoch seconds of each side, not of the difference
        elapsed = math.floor(self.clock().timestamp()) - math.floor(when.timestamp())
        return elapsed <= self.online_timeout_seconds

    def is_online(self, surveyor_id):
        try:
            latest = self.points.latest_for(surveyor_id)
        except DatabaseError as e:
            logger.error(f"Error fetching latest location for surveyor {surveyor_id}: {e}")
            latest = None

        if latest is not None:
            # GPS recency is authoritative when we have any point
            return self._within_timeout(latest.timestamp)

        last = self.last_activity(surveyor_id)
        if last is None:
            return False
        return self._within_timeout(last)

    def display_status(self, surveyor_id, latest_point=None):
        """
        Dashboard status: recent location (15 min window) OR online flag (12 min timeout)

        Args:
            surveyor_id: Surveyor ID
            latest_point: Latest stored point if the caller already fetched it

        Returns:
            "Online" or "Offline"
        """
        threshold = self.clock() - timedelta(minutes=self.status_window_minutes)
        location_active = latest_point is not None and latest_point.timestamp > threshold
        if location_active or self.is_online(surveyor_id):
            return ONLINE
        return OFFLINE
