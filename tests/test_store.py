"""Tests for per-identity snapshot storage."""
import logging
import sqlite3
from datetime import date
from unittest.mock import patch

from study_tracker.auth import Identity
from study_tracker.db import get_connection, init_db, write_records
from study_tracker.models import Subject, TopicStatus
from study_tracker.store import GUEST_PARTITION, EntityStore, partition_key


def test_partition_key_guest():
    assert partition_key(None) == GUEST_PARTITION == "guest"


def test_partition_keys_are_distinct():
    keys = {partition_key(Identity("a@example.com")), partition_key(Identity("b@example.com")), partition_key(None)}
    assert len(keys) == 3


def test_identity_named_guest_does_not_collide():
    assert partition_key(Identity("guest")) != partition_key(None)


def test_load_defaults_to_starter_syllabus(tmp_db):
    init_db(tmp_db)
    snapshot = EntityStore(tmp_db).load(None)
    assert len(snapshot.subjects) == 4
    assert snapshot.progress == {}


def test_save_and_load_round_trip(tmp_db):
    init_db(tmp_db)
    store = EntityStore(tmp_db)
    store.snapshot.subjects.append(Subject(id="s9", name="Physics", icon="BeakerIcon"))
    store.snapshot.progress[date(2026, 10, 1)] = 2
    assert store.persist() is True

    loaded = EntityStore(tmp_db).snapshot
    assert loaded.subjects[-1].name == "Physics"
    assert loaded.progress == {date(2026, 10, 1): 2}


def test_load_swallows_missing_tables(tmp_db, caplog):
    # database never initialized
    with caplog.at_level(logging.WARNING):
        snapshot = EntityStore(tmp_db).snapshot
    assert len(snapshot.subjects) == 4
    assert "Could not read" in caplog.text


def test_load_swallows_corrupt_records(tmp_db):
    init_db(tmp_db)
    conn = get_connection(tmp_db)
    conn.execute("INSERT INTO kv_store (partition, key, value) VALUES ('guest', 'syllabus', '{not json')")
    conn.commit()
    conn.close()
    write_records(tmp_db, "guest", {"progressHistory": [{"date": "not-a-date", "completedCount": 1}]})
    snapshot = EntityStore(tmp_db).snapshot
    assert len(snapshot.subjects) == 4
    assert snapshot.progress == {}


def test_save_failure_is_logged_and_state_kept(tmp_db, caplog):
    init_db(tmp_db)
    store = EntityStore(tmp_db)
    store.snapshot.subjects.clear()
    with patch("study_tracker.store.write_records", side_effect=sqlite3.OperationalError("disk I/O error")):
        with caplog.at_level(logging.ERROR):
            assert store.persist() is False
    assert "Failed to save snapshot" in caplog.text
    assert store.snapshot.subjects == []


def test_switch_identity_swaps_snapshot(tmp_db):
    init_db(tmp_db)
    store = EntityStore(tmp_db)
    store.snapshot.subjects.clear()
    store.persist()

    alice = Identity("alice@example.com", "Alice")
    snapshot = store.switch_identity(alice)
    assert store.identity == alice
    assert store.snapshot is snapshot
    assert len(snapshot.subjects) == 4

    store.switch_identity(None)
    assert store.snapshot.subjects == []


def test_unknown_topic_status_does_not_lose_subjects(tmp_db):
    init_db(tmp_db)
    write_records(tmp_db, "guest", {"syllabus": [
        {"id": "s", "name": "Maths", "icon": "CalculatorIcon", "topics": [
            {"id": "t1", "name": "Algebra", "status": "Completed"},
            {"id": "t2", "name": "Geometry", "status": "done"},
        ]},
        {"id": "p", "name": "Physics", "icon": "BeakerIcon", "topics": []},
    ]})
    store = EntityStore(tmp_db)
    assert [s.id for s in store.snapshot.subjects] == ["s", "p"]
    topics = store.snapshot.find_subject("s").topics
    assert [t.status for t in topics] == [TopicStatus.COMPLETED, TopicStatus.NOT_STARTED]

    store.snapshot.subjects.append(Subject(id="n", name="New", icon="BrainIcon"))
    store.persist()
    assert [s.id for s in EntityStore(tmp_db).snapshot.subjects] == ["s", "p", "n"]


def test_unreadable_subject_is_skipped_alone(tmp_db):
    init_db(tmp_db)
    write_records(tmp_db, "guest", {"syllabus": [
        {"name": "no id"},
        {"id": "p", "name": "Physics", "icon": "BeakerIcon", "topics": []},
    ]})
    assert [s.id for s in EntityStore(tmp_db).snapshot.subjects] == ["p"]
