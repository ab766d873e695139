"""
Online status resolution and activity recording.
"""
from datetime import timedelta

import pytest

from apps.tracking.services.activity import ActivityCache, OFFLINE, ONLINE


class TestRecordActivity:

    def test_updates_cache_and_directory(self, services, directory, clock):
        services.activity.record_activity("SUR001")

        assert services.activity.cache.get("SUR001") == clock.now
        assert directory.find_surveyor("SUR001").last_activity_timestamp == clock.now

    def test_unknown_surveyor_is_ignored_by_directory(self, services, directory):
        services.activity.record_activity("GHOST")

        assert "GHOST" in services.activity.cache
        assert directory.saves == 0

    def test_cache_is_never_evicted(self, services, clock):
        for i in range(50):
            services.activity.record_activity(f"S{i}")
            clock.advance(days=1)
        assert len(services.activity.cache) == 50

    def test_last_write_wins(self):
        cache = ActivityCache()
        cache.touch("SUR001", 2)
        cache.touch("SUR001", 1)
        assert cache.get("SUR001") == 1


class TestIsOnline:

    def test_recent_gps_point_is_online(self, services, store, clock):
        store.add("SUR001", 19.0, 72.0, clock.now - timedelta(seconds=600))
        assert services.activity.is_online("SUR001") is True

    def test_boundary_is_inclusive(self, services, store, clock):
        store.add("SUR001", 19.0, 72.0, clock.now - timedelta(seconds=720))
        assert services.activity.is_online("SUR001") is True

    @pytest.mark.parametrize("now_fraction_ms,expected", [(0, False), (800, True)])
    def test_boundary_compares_whole_epoch_seconds(self, services, store, clock, now_fraction_ms, expected):
        # 720.5 s apart: 721 whole seconds when now is on the second, 720 when it is 0.8 s past
        clock.advance(milliseconds=now_fraction_ms)
        store.add("SUR001", 19.0, 72.0, clock.now - timedelta(seconds=720, milliseconds=500))

        assert services.activity.is_online("SUR001") is expected

    def test_storage_error_falls_back_to_cache(self, services, store, clock):
        store.add("SUR001", 19.0, 72.0, clock.now - timedelta(hours=1))
        services.activity.cache.touch("SUR001", clock.now - timedelta(seconds=100))
        store.fail_reads = True

        assert services.activity.is_online("SUR001") is True
        assert services.activity.is_online("SUR002") is False

    def test_stale_gps_point_overrides_recent_activity(self, services, store, clock):
        store.add("SUR001", 19.0, 72.0, clock.now - timedelta(seconds=800))
        services.activity.record_activity("SUR001")

        assert services.activity.is_online("SUR001") is False

    def test_falls_back_to_cache(self, services, clock):
        services.activity.cache.touch("SUR001", clock.now - timedelta(seconds=100))
        assert services.activity.is_online("SUR001") is True

    def test_falls_back_to_persisted_timestamp(self, services, directory, clock):
        directory.find_surveyor("SUR002").last_activity_timestamp = clock.now - timedelta(seconds=300)
        assert services.activity.is_online("SUR002") is True

        directory.find_surveyor("SUR002").last_activity_timestamp = clock.now - timedelta(seconds=1000)
        assert services.activity.is_online("SUR002") is False

    def test_cache_takes_precedence_over_persisted(self, services, directory, clock):
        directory.find_surveyor("SUR002").last_activity_timestamp = clock.now
        services.activity.cache.touch("SUR002", clock.now - timedelta(hours=2))
        assert services.activity.is_online("SUR002") is False

    def test_no_information_is_offline(self, services):
        assert services.activity.is_online("SUR002") is False
        assert services.activity.is_online("NOBODY") is False


class TestDisplayStatus:

    def test_location_window_is_looser_than_online_timeout(self, services, store, clock):
        point = store.add("SUR001", 19.0, 72.0, clock.now - timedelta(seconds=800))

        assert services.activity.is_online("SUR001") is False
        assert services.activity.display_status("SUR001", point) == ONLINE

    def test_old_location_is_offline(self, services, store, clock):
        point = store.add("SUR001", 19.0, 72.0, clock.now - timedelta(seconds=1000))
        assert services.activity.display_status("SUR001", point) == OFFLINE

    def test_activity_alone_is_online(self, services):
        services.activity.record_activity("SUR002")
        assert services.activity.display_status("SUR002", None) == ONLINE
