"""
ORM-backed collaborators of the tracking services

SurveyorDirectory - read access to surveyor entries plus the activity mirror
PointStore        - ordered append store of LocationTrack rows per surveyor
"""
import math

from django.core.paginator import EmptyPage, Paginator
from django.utils.crypto import constant_time_compare

from .models import LocationTrack, Surveyor


class SurveyorDirectory:

    def find_surveyor(self, surveyor_id):
        return Surveyor.objects.filter(pk=surveyor_id).first()

    def save(self, surveyor):
        surveyor.save()
        return surveyor

    def list_all(self):
        return list(Surveyor.objects.all())

    def filter(self, city=None, project=None):
        """
        Case-insensitive substring match on city and project, missing filters match all
        """
        query = Surveyor.objects.all()
        if city:
            query = query.filter(city__icontains=city)
        if project:
            query = query.filter(project_name__icontains=project)
        return list(query)

    def authenticate(self, username, password):
        """
        Plain credential equality against the directory entry
        """
        surveyor = Surveyor.objects.filter(username=username).first()
        if surveyor is None:
            return None
        if constant_time_compare(password or '', surveyor.password or ''):
            return surveyor
        return None


class PointStore:

    def save(self, point):
        point.save()
        return point

    def latest_for(self, surveyor_id):
        return (
            LocationTrack.objects.filter(surveyor_id=surveyor_id)
            .order_by('-timestamp', '-id')
            .first()
        )

    def _range(self, surveyor_id, start=None, end=None):
        query = LocationTrack.objects.filter(surveyor_id=surveyor_id)
        if start is not None:
            query = query.filter(timestamp__gte=start)
        if end is not None:
            query = query.filter(timestamp__lte=end)
        return query.order_by('timestamp', 'id')

    def between(self, surveyor_id, start=None, end=None):
        """
        Points of one surveyor in ascending time order, bounds inclusive and optional
        """
        return list(self._range(surveyor_id, start, end))

    def page_for(self, surveyor_id, start=None, end=None, page=0, size=1000):
        """
        One page of between(), page index is 0-based

        Returns:
            (points, total) - points is empty when the page is out of range
        """
        paginator = Paginator(self._range(surveyor_id, start, end), size)
        try:
            points = list(paginator.page(page + 1).object_list)
        except EmptyPage:
            points = []
        return points, paginator.count

    def count_for(self, surveyor_id):
        return LocationTrack.objects.filter(surveyor_id=surveyor_id).count()

    def delete_all_for(self, surveyor_id):
        deleted, _ = LocationTrack.objects.filter(surveyor_id=surveyor_id).delete()
        return deleted


def total_pages(total, size):
    if size <= 0:
        return 0
    return math.ceil(total / size)
