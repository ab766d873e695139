"""
Read-side queries for the dashboard

Storage failures on these paths are logged and reported as empty results.
The try_* variants return a ReadResult so callers can tell empty from failed.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from django.db import DatabaseError

from ..functions import distance_km
from ..repositories import total_pages
from .route import reconstruct

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 1000


class InvalidTimeRange(ValueError):
    pass


@dataclass
class ReadResult:
    value: Any = None
    error: Optional[Exception] = None

    @property
    def failed(self):
        return self.error is not None


@dataclass
class HistoryPage:
    points: List[Any] = field(default_factory=list)
    page: int = 0
    size: int = DEFAULT_PAGE_SIZE
    total: int = 0

    @property
    def total_pages(self):
        return total_pages(self.total, self.size)

    def as_dict(self):
        return {
            'points': [point.as_dict() for point in self.points],
            'page': self.page,
            'size': self.size,
            'total': self.total,
            'total_pages': self.total_pages,
        }


def validate_time_range(start, end):
    if start is not None and end is not None and start > end:
        raise InvalidTimeRange("Start time must be before end time")


class QueryService:

    def __init__(self, directory, points, activity, reconstructor=reconstruct,
                 page_size=DEFAULT_PAGE_SIZE):
        self.directory = directory
        self.points = points
        self.activity = activity
        self.reconstructor = reconstructor
        self.page_size = page_size

    def try_latest(self, surveyor_id):
        try:
            return ReadResult(self.points.latest_for(surveyor_id))
        except DatabaseError as e:
            logger.error(f"Error fetching latest location for surveyor {surveyor_id}: {e}")
            return ReadResult(error=e)

    def latest(self, surveyor_id):
        return self.try_latest(surveyor_id).value

    def try_history(self, surveyor_id, start=None, end=None):
        validate_time_range(start, end)
        try:
            results = self.points.between(surveyor_id, start, end)
        except DatabaseError as e:
            logger.error(f"Error fetching track history for surveyor {surveyor_id}: {e}")
            return ReadResult([], error=e)

        logger.info(f"Query returned {len(results)} records for surveyor {surveyor_id}")
        for point in results[:3]:
            logger.debug(f"  {point.surveyor_id} at {point.timestamp} -> ({point.latitude:.6f}, {point.longitude:.6f})")
        return ReadResult(results)

    def history(self, surveyor_id, start=None, end=None):
        """
        Points of a surveyor in ascending time order
        Any combination of start/end may be given, both bounds are inclusive

        Raises:
            InvalidTimeRange: start is after end
        """
        return self.try_history(surveyor_id, start, end).value

    def history_page(self, surveyor_id, start=None, end=None, page=0, size=None):
        validate_time_range(start, end)
        size = size or self.page_size
        try:
            points, total = self.points.page_for(surveyor_id, start, end, page, size)
        except DatabaseError as e:
            logger.error(f"Error fetching track page {page} for surveyor {surveyor_id}: {e}")
            points, total = [], 0
        return HistoryPage(points=points, page=page, size=size, total=total)

    def enhanced_history(self, surveyor_id, start=None, end=None):
        """
        History with interpolated points for large gaps
        """
        return self.reconstructor(self.history(surveyor_id, start, end))

    def total_distance(self, surveyor_id):
        """
        Sum of consecutive haversine distances (km) over the full stored sequence
        """
        points = self.history(surveyor_id)
        return sum(
            distance_km(prev.latitude, prev.longitude, curr.latitude, curr.longitude)
            for prev, curr in zip(points, points[1:])
        )

    def _visible(self, surveyors):
        return [surveyor for surveyor in surveyors if surveyor.id and not surveyor.is_admin]

    def surveyors(self, city=None, project=None):
        """
        Directory entries matching city/project, administrative accounts excluded
        """
        try:
            if city or project:
                found = self.directory.filter(city, project)
            else:
                found = self.directory.list_all()
        except DatabaseError as e:
            logger.error(f"Error listing surveyors (city={city}, project={project}): {e}")
            return []

        surveyors = self._visible(found)
        for surveyor in surveyors:
            logger.debug(
                f"Surveyor: ID={surveyor.id}, Name={surveyor.name}, "
                f"City={surveyor.city}, Project={surveyor.project_name}"
            )
        return surveyors

    def status_map(self):
        """
        Returns:
            {surveyor_id: "Online" | "Offline"} for every non-admin surveyor
        """
        return {
            surveyor.id: self.activity.display_status(surveyor.id, self.latest(surveyor.id))
            for surveyor in self.surveyors()
        }

    def surveyors_with_latest_locations(self):
        results = []
        for surveyor in self.surveyors():
            entry = {'surveyor': surveyor.as_dict()}

            latest = self.latest(surveyor.id)
            if latest is not None:
                entry['latest_location'] = {
                    'latitude': latest.latitude,
                    'longitude': latest.longitude,
                    'timestamp': latest.timestamp.isoformat(),
                }

            entry['online'] = self.activity.is_online(surveyor.id)
            results.append(entry)
        return results
