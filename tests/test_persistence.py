"""
Tests for analytics persistence.
"""

import json
import logging
from datetime import datetime

import pytest

from traffic_analytics.models import AggregateCounters, DayBucket
from traffic_analytics.persistence import PersistenceManager
from traffic_analytics.store import AggregationStore


CHROME_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/115.0.0.0 Safari/537.36"
)


class TestPersistenceManager:
    """Test saving and loading of the two documents."""

    @pytest.fixture
    def data_dir(self, tmp_path):
        return tmp_path / "analytics_data"

    @pytest.fixture
    def manager(self, data_dir):
        return PersistenceManager.in_directory(data_dir)

    def _populated_store(self, manager):
        store = AggregationStore(persistence=manager)
        store.record("10.0.0.1", CHROME_WINDOWS, None, "/", timestamp=datetime(2024, 5, 1, 8))
        store.record("10.0.0.2", CHROME_WINDOWS, "https://t.co/abc", "/services",
                     timestamp=datetime(2024, 5, 1, 13))
        store.record("10.0.0.1", None, None, "/contact", timestamp=datetime(2024, 5, 2, 23))
        return store

    def test_missing_files_give_empty_state(self, manager):
        counters, days = manager.load()
        assert counters.total_requests == 0
        assert counters.unique_clients == set()
        assert counters.daily_stats == {}
        assert counters.last_updated is not None
        assert days == {}

    def test_round_trip(self, manager):
        """save() then load() reproduces the same counters and client sets."""
        store = self._populated_store(manager)
        assert store.save() is True

        restored = AggregationStore(persistence=manager)
        restored.load()

        original = store.snapshot()
        loaded = restored.snapshot()
        assert loaded.total_requests == original.total_requests == 3
        assert loaded.unique_clients == original.unique_clients
        assert loaded.browsers == original.browsers
        assert loaded.operating_systems == original.operating_systems
        assert loaded.referrers == original.referrers
        assert loaded.pages == original.pages
        assert loaded.hourly_stats == original.hourly_stats
        assert loaded.daily_stats == original.daily_stats
        assert loaded.last_updated == original.last_updated
        assert restored.days() == store.days()

    def test_cumulative_document_layout(self, manager):
        self._populated_store(manager).save()

        document = json.loads(manager.summary_file.read_text(encoding="utf-8"))

        assert document["metadata"]["version"] == "1.0.0"
        assert document["metadata"]["totalRecords"] == 3
        assert document["metadata"]["uniqueVisitors"] == 2
        assert "lastUpdated" in document["metadata"]

        data = document["data"]
        assert data["totalRequests"] == 3
        assert sorted(data["uniqueIPs"]) == ["10.0.0.1", "10.0.0.2"]
        assert data["hourlyStats"] == {"8": 1, "13": 1, "23": 1}
        assert data["dailyStats"] == {"2024-05-01": 2, "2024-05-02": 1}
        assert data["referrers"] == {"Direct": 2, "https://t.co/abc": 1}
        assert set(data) == {
            "totalRequests", "uniqueIPs", "browsers", "operatingSystems", "referrers",
            "pages", "hourlyStats", "dailyStats", "lastUpdated",
        }

    def test_daily_document_layout(self, manager):
        self._populated_store(manager).save()

        document = json.loads(manager.daily_file.read_text(encoding="utf-8"))

        assert set(document) == {"2024-05-01", "2024-05-02"}
        day = document["2024-05-01"]
        assert set(day) == {
            "totalRequests", "uniqueIPs", "browsers", "operatingSystems", "pages", "hourlyStats",
        }
        assert day["totalRequests"] == 2
        assert sorted(day["uniqueIPs"]) == ["10.0.0.1", "10.0.0.2"]

    def test_bare_legacy_document(self, manager, data_dir):
        data_dir.mkdir(parents=True)
        manager.summary_file.write_text(json.dumps({
            "totalRequests": 2,
            "uniqueIPs": ["10.0.0.1"],
            "browsers": {"Chrome 115.0": 2},
            "operatingSystems": {"Windows 10": 2},
            "referrers": {"Direct": 2},
            "pages": {"/": 2},
            "hourlyStats": {"9": 2},
            "dailyStats": {"2023-12-24": 2},
            "lastUpdated": "2023-12-24T09:15:00.000Z",
        }), encoding="utf-8")

        counters, _ = manager.load()

        assert counters.total_requests == 2
        assert counters.unique_clients == {"10.0.0.1"}
        assert counters.hourly_stats == {9: 2}
        assert counters.last_updated == "2023-12-24T09:15:00.000Z"

    def test_incomplete_metadata_keeps_counters(self, manager, data_dir):
        """A partial metadata block does not discard the counters under data."""
        data_dir.mkdir(parents=True)
        manager.summary_file.write_text(json.dumps({
            "metadata": {"version": "1.0.0"},
            "data": {"totalRequests": 500, "uniqueIPs": ["10.0.0.1"], "pages": {"/": 500}},
        }), encoding="utf-8")

        store = AggregationStore(persistence=manager)
        store.load()
        assert store.snapshot().total_requests == 500

        store.save()
        document = json.loads(manager.summary_file.read_text(encoding="utf-8"))
        assert document["data"]["totalRequests"] == 500
        assert document["metadata"]["totalRecords"] == 500

    def test_malformed_metadata_is_not_validated(self, manager, data_dir):
        data_dir.mkdir(parents=True)
        manager.summary_file.write_text(json.dumps({
            "metadata": "corrupted",
            "data": {"totalRequests": 12},
        }), encoding="utf-8")

        counters, _ = manager.load()

        assert counters.total_requests == 12

    @pytest.mark.parametrize("data", [None, {}])
    def test_empty_data_falls_back_to_bare_layout(self, manager, data_dir, data):
        data_dir.mkdir(parents=True)
        manager.summary_file.write_text(json.dumps({
            "data": data,
            "totalRequests": 7,
            "pages": {"/": 7},
        }), encoding="utf-8")

        counters, _ = manager.load()

        assert counters.total_requests == 7
        assert counters.pages == {"/": 7}

    def test_missing_timestamp_defaults_to_load_time(self, manager, data_dir):
        data_dir.mkdir(parents=True)
        manager.summary_file.write_text(json.dumps({"data": {"totalRequests": 3}}), encoding="utf-8")

        before = datetime.now().isoformat()
        counters, _ = manager.load()

        assert counters.last_updated >= before

    def test_duplicate_clients_collapse(self, manager, data_dir):
        data_dir.mkdir(parents=True)
        manager.summary_file.write_text(json.dumps({
            "data": {"totalRequests": 3, "uniqueIPs": ["a", "b", "a"]},
        }), encoding="utf-8")
        manager.daily_file.write_text(json.dumps({
            "2024-01-01": {"totalRequests": 3, "uniqueIPs": ["a", "a", "a"]},
        }), encoding="utf-8")

        counters, days = manager.load()

        assert counters.unique_clients == {"a", "b"}
        assert days["2024-01-01"].unique_clients == {"a"}

    def test_legacy_daily_document_with_object_client_set(self, manager, data_dir):
        """Older daily files stored the client set as an empty object."""
        data_dir.mkdir(parents=True)
        manager.daily_file.write_text(json.dumps({
            "2023-11-02": {
                "totalRequests": 4,
                "uniqueIPs": {},
                "browsers": {"Safari 16.5": 4},
                "operatingSystems": {"macOS 10.15": 4},
                "pages": {"/": 4},
                "hourlyStats": {"7": 4},
            },
        }), encoding="utf-8")

        _, days = manager.load()

        assert days["2023-11-02"] == DayBucket(
            total_requests=4,
            unique_clients=set(),
            browsers={"Safari 16.5": 4},
            operating_systems={"macOS 10.15": 4},
            pages={"/": 4},
            hourly_stats={7: 4},
        )

    def test_corrupt_summary_is_logged_and_ignored(self, manager, data_dir, caplog):
        data_dir.mkdir(parents=True)
        manager.summary_file.write_text("{not json", encoding="utf-8")
        manager.daily_file.write_text(json.dumps({
            "2024-01-01": {"totalRequests": 1, "uniqueIPs": ["a"]},
        }), encoding="utf-8")

        with caplog.at_level(logging.ERROR, logger="traffic_analytics.persistence"):
            counters, days = manager.load()

        assert counters.total_requests == 0
        assert counters.pages == {}
        assert days["2024-01-01"].total_requests == 1
        assert "Error loading analytics data" in caplog.text

    def test_invalid_daily_document_is_ignored(self, manager, data_dir, caplog):
        data_dir.mkdir(parents=True)
        manager.daily_file.write_text(json.dumps(["not", "a", "mapping"]), encoding="utf-8")

        with caplog.at_level(logging.ERROR, logger="traffic_analytics.persistence"):
            _, days = manager.load()

        assert days == {}
        assert "Error loading daily analytics data" in caplog.text

    def test_invalid_field_types_are_ignored(self, manager, data_dir):
        data_dir.mkdir(parents=True)
        manager.summary_file.write_text(json.dumps({
            "data": {"totalRequests": "lots", "pages": []},
        }), encoding="utf-8")

        counters, _ = manager.load()

        assert counters.total_requests == 0

    def test_save_creates_data_directory(self, manager, data_dir):
        assert not data_dir.exists()
        assert manager.save(AggregateCounters(), {}) is True
        assert manager.summary_file.exists()
        assert json.loads(manager.daily_file.read_text(encoding="utf-8")) == {}

    def test_write_failure_is_logged_not_raised(self, tmp_path, caplog):
        blocked = tmp_path / "data.json"
        blocked.mkdir()
        manager = PersistenceManager(blocked, tmp_path / "daily-data.json")

        with caplog.at_level(logging.ERROR, logger="traffic_analytics.persistence"):
            result = manager.save(AggregateCounters(total_requests=1), {})

        assert result is False
        assert "Error saving analytics data" in caplog.text
