"""Tests for database initialization and key-value records."""
from study_tracker.db import (
    delete_setting, get_connection, get_setting, init_db, read_record, set_setting, write_records,
)


def test_init_db_creates_tables(tmp_db):
    init_db(tmp_db)
    conn = get_connection(tmp_db)
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
    )
    tables = {row[0] for row in cursor.fetchall()}
    assert {"kv_store", "users", "user_settings"}.issubset(tables)
    conn.close()


def test_init_db_is_idempotent(tmp_db):
    init_db(tmp_db)
    init_db(tmp_db)  # should not raise
    conn = get_connection(tmp_db)
    cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
    assert len(cursor.fetchall()) > 0
    conn.close()


def test_read_missing_record_returns_none(tmp_db):
    init_db(tmp_db)
    assert read_record(tmp_db, "guest", "syllabus") is None


def test_write_then_read_records(tmp_db):
    init_db(tmp_db)
    write_records(tmp_db, "guest", {"syllabus": [{"id": "s1"}], "progressHistory": []})
    write_records(tmp_db, "guest", {"syllabus": [{"id": "s2"}]})
    assert read_record(tmp_db, "guest", "syllabus") == [{"id": "s2"}]
    assert read_record(tmp_db, "guest", "progressHistory") == []


def test_records_are_partitioned(tmp_db):
    init_db(tmp_db)
    write_records(tmp_db, "user:a@example.com", {"syllabus": ["a"]})
    assert read_record(tmp_db, "guest", "syllabus") is None


def test_settings(tmp_db):
    init_db(tmp_db)
    assert get_setting(tmp_db, "session_email") is None
    set_setting(tmp_db, "session_email", "a@example.com")
    set_setting(tmp_db, "session_email", "b@example.com")
    assert get_setting(tmp_db, "session_email") == "b@example.com"
    delete_setting(tmp_db, "session_email")
    assert get_setting(tmp_db, "session_email", "none") == "none"
