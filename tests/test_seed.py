from study_tracker.models import TopicStatus
from study_tracker.seed import starter_subjects


def test_starter_subjects():
    subjects = starter_subjects()
    assert [s.id for s in subjects] == ["reasoning", "quant", "awareness", "english"]
    assert sum(len(s.topics) for s in subjects) == 32
    assert all(t.status is TopicStatus.NOT_STARTED for s in subjects for t in s.topics)


def test_starter_subjects_are_fresh_copies():
    first = starter_subjects()
    first[0].topics.clear()
    assert len(starter_subjects()[0].topics) == 8
