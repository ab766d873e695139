"""
Read-side queries over the in-memory collaborators.
"""
from datetime import timedelta

import pytest

from apps.tracking.functions import distance_km
from apps.tracking.services.query import InvalidTimeRange

from .conftest import T0, north_of

LAT, LON = 19.0, 72.0


@pytest.fixture
def track(store):
    return [
        store.add("SUR001", LAT, LON, T0),
        store.add("SUR001", north_of(LAT, 100), LON, T0 + timedelta(minutes=2)),
        store.add("SUR001", north_of(LAT, 600), LON, T0 + timedelta(minutes=14)),
        store.add("SUR002", LAT, LON, T0 + timedelta(minutes=1)),
    ]


class TestLatest:

    def test_most_recent_point(self, services, track):
        assert services.queries.latest("SUR001") is track[2]

    def test_no_data(self, services):
        assert services.queries.latest("SUR001") is None
        assert not services.queries.try_latest("SUR001").failed

    def test_storage_error_reads_as_no_data(self, services, store, track):
        store.fail_reads = True
        assert services.queries.latest("SUR001") is None
        assert services.queries.try_latest("SUR001").failed


class TestHistory:

    def test_unbounded(self, services, track):
        assert services.queries.history("SUR001") == track[:3]

    @pytest.mark.parametrize("start_min,end_min,expected", [
        (2, None, [1, 2]),
        (None, 2, [0, 1]),
        (1, 13, [1]),
        (0, 14, [0, 1, 2]),
    ])
    def test_bounds(self, services, track, start_min, end_min, expected):
        start = T0 + timedelta(minutes=start_min) if start_min is not None else None
        end = T0 + timedelta(minutes=end_min) if end_min is not None else None
        assert services.queries.history("SUR001", start, end) == [track[i] for i in expected]

    def test_start_after_end_is_rejected(self, services, track):
        with pytest.raises(InvalidTimeRange):
            services.queries.history("SUR001", T0 + timedelta(hours=1), T0)
        with pytest.raises(InvalidTimeRange):
            services.queries.history_page("SUR001", T0 + timedelta(hours=1), T0)

    def test_storage_error_reads_as_empty(self, services, store, track):
        store.fail_reads = True
        assert services.queries.history("SUR001") == []
        assert services.queries.try_history("SUR001").failed

    def test_paging(self, services, track):
        first = services.queries.history_page("SUR001", page=0, size=2)
        second = services.queries.history_page("SUR001", page=1, size=2)

        assert first.points == track[:2]
        assert second.points == track[2:3]
        assert first.total == 3
        assert first.total_pages == 2
        assert services.queries.history_page("SUR001", page=5, size=2).points == []

    def test_page_as_dict(self, services, track):
        data = services.queries.history_page("SUR001", size=2).as_dict()
        assert data["total"] == 3
        assert data["points"][0]["surveyor_id"] == "SUR001"
        assert data["points"][0]["timestamp"] == T0.isoformat()


class TestEnhancedHistory:

    def test_gap_is_filled(self, services, track):
        route = services.queries.enhanced_history("SUR001")
        # 2 -> 14 minutes, 500 m: six synthetic points
        assert len(route) == 3 + 6
        assert [p.pk for p in route if p.pk is not None] == [p.pk for p in track[:3]]

    def test_range_validation(self, services):
        with pytest.raises(InvalidTimeRange):
            services.queries.enhanced_history("SUR001", T0, T0 - timedelta(seconds=1))


def test_total_distance(services, track):
    expected = (
        distance_km(LAT, LON, track[1].latitude, LON)
        + distance_km(track[1].latitude, LON, track[2].latitude, LON)
    )
    assert services.queries.total_distance("SUR001") == pytest.approx(expected)
    assert services.queries.total_distance("SUR001") == pytest.approx(0.6, abs=0.001)
    assert services.queries.total_distance("NOBODY") == 0


class TestSurveyorListings:

    def test_admins_are_excluded(self, services):
        ids = [s.id for s in services.queries.surveyors()]
        assert ids == ["SUR001", "SUR002"]

    def test_filter_by_city(self, services):
        assert [s.id for s in services.queries.surveyors(city="pune")] == ["SUR001"]

    def test_filter_by_project(self, services):
        assert [s.id for s in services.queries.surveyors(project="coastal")] == ["SUR002"]

    def test_status_map(self, services, store, clock):
        store.add("SUR001", LAT, LON, clock.now - timedelta(minutes=1))
        store.add("ADMIN01", LAT, LON, clock.now)

        assert services.queries.status_map() == {"SUR001": "Online", "SUR002": "Offline"}

    def test_with_latest_locations(self, services, store, clock):
        store.add("SUR001", LAT, LON, clock.now - timedelta(minutes=1))
        entries = {e["surveyor"]["id"]: e for e in services.queries.surveyors_with_latest_locations()}

        assert set(entries) == {"SUR001", "SUR002"}
        assert entries["SUR001"]["online"] is True
        assert entries["SUR001"]["latest_location"]["latitude"] == LAT
        assert "latest_location" not in entries["SUR002"]
        assert entries["SUR002"]["online"] is False

    def test_storage_errors_fall_back_to_activity(self, services, store, clock):
        store.add("SUR001", LAT, LON, clock.now - timedelta(hours=2))
        services.activity.cache.touch("SUR001", clock.now - timedelta(minutes=1))
        store.fail_reads = True

        assert services.queries.status_map() == {"SUR001": "Online", "SUR002": "Offline"}

        entries = {e["surveyor"]["id"]: e for e in services.queries.surveyors_with_latest_locations()}
        assert entries["SUR001"]["online"] is True
        assert "latest_location" not in entries["SUR001"]
        assert entries["SUR002"]["online"] is False
