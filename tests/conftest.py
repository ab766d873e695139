"""Shared pytest fixtures.

In-memory stand-ins for the directory, point store and broadcast sink so the
services can be exercised without a database, plus a controllable clock.
"""
from __future__ import annotations

import base64
from datetime import datetime, timedelta, timezone

import pytest
from django.db import DatabaseError

from apps.tracking.models import LocationTrack, Surveyor
from apps.tracking.services import build_services, reset_services

T0 = datetime(2025, 1, 26, 10, 0, 0, tzinfo=timezone.utc)

# Metres per degree of latitude on a 6371 km sphere
METERS_PER_DEGREE = 111194.93


def north_of(lat, meters):
    return lat + meters / METERS_PER_DEGREE


def basic_auth(username, password):
    token = base64.b64encode(f"{username}:{password}".encode()).decode()
    return f"Basic {token}"


# --- Fakes -----------------------------------------------------------
class FakeClock:
    def __init__(self, now=T0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class InMemoryPointStore:
    def __init__(self):
        self.rows = []
        self._next_id = 1
        self.fail_reads = False
        self.fail_writes = False

    def _check_read(self):
        if self.fail_reads:
            raise DatabaseError("read replica unavailable")

    def add(self, surveyor_id, lat, lon, ts):
        return self.save(LocationTrack(surveyor_id=surveyor_id, latitude=lat, longitude=lon, timestamp=ts))

    def save(self, point):
        if self.fail_writes:
            raise DatabaseError("disk full")
        point.id = self._next_id
        self._next_id += 1
        self.rows.append(point)
        return point

    def _ordered(self, surveyor_id):
        own = [p for p in self.rows if p.surveyor_id == surveyor_id]
        return sorted(own, key=lambda p: (p.timestamp, p.id))

    def latest_for(self, surveyor_id):
        self._check_read()
        ordered = self._ordered(surveyor_id)
        return ordered[-1] if ordered else None

    def between(self, surveyor_id, start=None, end=None):
        self._check_read()
        return [
            p for p in self._ordered(surveyor_id)
            if (start is None or p.timestamp >= start) and (end is None or p.timestamp <= end)
        ]

    def page_for(self, surveyor_id, start=None, end=None, page=0, size=1000):
        matching = self.between(surveyor_id, start, end)
        return matching[page * size:(page + 1) * size], len(matching)

    def count_for(self, surveyor_id):
        return len([p for p in self.rows if p.surveyor_id == surveyor_id])

    def delete_all_for(self, surveyor_id):
        before = len(self.rows)
        self.rows = [p for p in self.rows if p.surveyor_id != surveyor_id]
        return before - len(self.rows)


class InMemoryDirectory:
    def __init__(self, surveyors=()):
        self.surveyors = {s.id: s for s in surveyors}
        self.saves = 0

    def find_surveyor(self, surveyor_id):
        return self.surveyors.get(surveyor_id)

    def save(self, surveyor):
        self.saves += 1
        self.surveyors[surveyor.id] = surveyor
        return surveyor

    def list_all(self):
        return sorted(self.surveyors.values(), key=lambda s: s.id)

    def filter(self, city=None, project=None):
        return [
            s for s in self.list_all()
            if (not city or city.lower() in s.city.lower())
            and (not project or project.lower() in s.project_name.lower())
        ]

    def authenticate(self, username, password):
        for surveyor in self.surveyors.values():
            if surveyor.username == username and surveyor.password == password:
                return surveyor
        return None


class RecordingSink:
    def __init__(self):
        self.messages = []
        self.fail = False

    def publish(self, topic, payload):
        if self.fail:
            raise ConnectionError("redis down")
        self.messages.append((topic, payload))
        return 1


# --- Fixtures --------------------------------------------------------
@pytest.fixture(autouse=True)
def _fresh_service_container():
    reset_services()
    yield
    reset_services()


@pytest.fixture
def clock():
    return FakeClock(T0 + timedelta(hours=1))


@pytest.fixture
def store():
    return InMemoryPointStore()


@pytest.fixture
def directory():
    return InMemoryDirectory([
        Surveyor(id="SUR001", username="ravi", password="secret", city="Pune", project_name="Metro Line 3"),
        Surveyor(id="SUR002", username="asha", password="secret", city="Mumbai", project_name="Coastal Road"),
        Surveyor(id="ADMIN01", username="root", password="secret", city="Pune", project_name="Metro Line 3"),
        Surveyor(id="SUR900", username="SiteAdmin", password="secret", city="Pune", project_name="Ops"),
    ])


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def services(directory, store, sink, clock):
    return build_services(directory=directory, points=store, sink=sink, clock=clock)
