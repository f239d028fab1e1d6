"""Tests for search history bookkeeping and the location consent flag."""

import json
from pathlib import Path

import pytest

from weatherview.storage.database import connect, run_migrations
from weatherview.storage.history_store import (
    ANSWER_KEY,
    CONSENT_KEY,
    HISTORY_KEY,
    HistoryStore,
    LocationConsent,
)
from weatherview.storage.kv_store import MemoryStorage, SqliteStorage


class TestLoad:
    def test_empty(self, storage: MemoryStorage):
        assert HistoryStore(storage).load() == []

    def test_persisted(self):
        storage = MemoryStorage({HISTORY_KEY: json.dumps(["Paris", "Rome"])})
        assert HistoryStore(storage).load() == ["Paris", "Rome"]

    @pytest.mark.parametrize(
        "raw",
        ["not json", "{\"a\": 1}", "[1, 2]", "null", "\"Paris\""],
    )
    def test_malformed_discarded(self, raw: str):
        storage = MemoryStorage({HISTORY_KEY: raw})
        assert HistoryStore(storage).load() == []

    def test_oversized_persisted_list_truncated(self):
        cities = [f"City{i}" for i in range(8)]
        storage = MemoryStorage({HISTORY_KEY: json.dumps(cities)})
        assert HistoryStore(storage).load() == cities[:5]


class TestRecord:
    def test_pushes_to_front_and_persists(self, storage: MemoryStorage):
        store = HistoryStore(storage)
        store.record("Paris")
        store.record("Rome")
        assert store.load() == ["Rome", "Paris"]
        assert json.loads(storage.load(HISTORY_KEY)) == ["Rome", "Paris"]

    def test_same_city_twice_kept_once(self, storage: MemoryStorage):
        store = HistoryStore(storage)
        store.record("Paris")
        store.record("Paris")
        assert store.load() == ["Paris"]

    def test_existing_entry_moves_to_front(self, storage: MemoryStorage):
        store = HistoryStore(storage)
        for city in ["Paris", "Rome", "Oslo"]:
            store.record(city)
        assert store.record("Paris") == ["Paris", "Oslo", "Rome"]

    def test_case_sensitive(self, storage: MemoryStorage):
        store = HistoryStore(storage)
        store.record("paris")
        store.record("Paris")
        assert store.load() == ["Paris", "paris"]

    def test_capped_at_five(self, storage: MemoryStorage):
        store = HistoryStore(storage)
        for i in range(12):
            history = store.record(f"City{i}")
            assert len(history) <= 5
            assert len(set(history)) == len(history)
            assert history[0] == f"City{i}"
        assert store.load() == ["City11", "City10", "City9", "City8", "City7"]

    def test_clear(self, storage: MemoryStorage):
        store = HistoryStore(storage)
        store.record("Paris")
        store.clear()
        assert store.load() == []
        assert storage.load(HISTORY_KEY) is None


class TestLocationConsent:
    def test_initially_not_requested(self, storage: MemoryStorage):
        assert LocationConsent(storage).was_requested() is False

    def test_mark(self, storage: MemoryStorage):
        LocationConsent(storage).mark_requested()
        assert storage.load(CONSENT_KEY) == "true"
        assert LocationConsent(storage).was_requested() is True

    def test_answer_unknown_until_recorded(self, storage: MemoryStorage):
        assert LocationConsent(storage).allowed() is None

    @pytest.mark.parametrize("answer", [True, False])
    def test_record_answer(self, storage: MemoryStorage, answer: bool):
        LocationConsent(storage).record(answer)
        consent = LocationConsent(storage)
        assert consent.was_requested() is True
        assert consent.allowed() is answer
        assert storage.load(ANSWER_KEY) == ("true" if answer else "false")


class TestSqliteStorage:
    def test_history_survives_reconnect(self, tmp_path: Path):
        db_path = tmp_path / "state.db"
        conn = connect(db_path)
        run_migrations(conn)
        HistoryStore(SqliteStorage(conn)).record("Lisbon")
        conn.close()

        conn = connect(db_path)
        run_migrations(conn)
        assert HistoryStore(SqliteStorage(conn)).load() == ["Lisbon"]
        conn.close()

    def test_save_overwrites_and_delete(self, tmp_path: Path):
        conn = connect(tmp_path / "state.db")
        run_migrations(conn)
        kv = SqliteStorage(conn)
        kv.save("k", "1")
        kv.save("k", "2")
        assert kv.load("k") == "2"
        kv.delete("k")
        assert kv.load("k") is None
        conn.close()
