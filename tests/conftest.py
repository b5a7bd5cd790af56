from datetime import date

import pytest

from study_tracker.db import init_db
from study_tracker.models import Subject, Topic
from study_tracker.store import EntityStore
from study_tracker.tracker import SyllabusTracker

TODAY = date(2026, 10, 19)


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_tracker.db")
    return db_path


@pytest.fixture
def tracker(tmp_db):
    """Tracker on an initialized database with a fixed 'today'."""
    init_db(tmp_db)
    return SyllabusTracker(EntityStore(tmp_db), today=lambda: TODAY)


@pytest.fixture
def single_topic_tracker(tracker):
    """Tracker whose syllabus is one subject holding one Not Started topic."""
    tracker.store.snapshot.subjects[:] = [
        Subject(id="math", name="Maths", icon="CalculatorIcon", topics=[Topic(id="t1", name="Algebra")])
    ]
    tracker.store.persist()
    return tracker
