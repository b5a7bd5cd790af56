"""Mutation API and read views over the active syllabus snapshot."""
import logging
import uuid
from datetime import date
from typing import Callable

from study_tracker.auth import Identity
from study_tracker.models import ProgressLogEntry, Subject, SyllabusStats, Topic, TopicStatus
from study_tracker.stats import compute_stats, subject_completion
from study_tracker.store import EntityStore
from study_tracker.trends import SUNDAY, aggregate

logger = logging.getLogger(__name__)


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex}"


def completion_delta(old_status: TopicStatus, new_status: TopicStatus) -> int:
    """+1 for a move into Completed, -1 for a move out of it, else 0."""
    delta = 0
    if new_status is TopicStatus.COMPLETED:
        delta += 1
    if old_status is TopicStatus.COMPLETED:
        delta -= 1
    return delta


class SyllabusTracker:
    """The only write path into the store.

    Every mutation either applies completely and is persisted, or finds an
    unknown subject/topic id and changes nothing. Not-found is reported
    through the return value (None/False), never raised.
    """

    def __init__(self, store: EntityStore, today: Callable[[], date] = date.today):
        self.store = store
        self.today = today

    @property
    def identity(self) -> Identity | None:
        return self.store.identity

    @property
    def subjects(self) -> list[Subject]:
        """A copy of the subject list. Change subjects and topics through the mutation methods."""
        return list(self.store.snapshot.subjects)

    def switch_identity(self, identity: Identity | None) -> None:
        self.store.switch_identity(identity)

    def add_subject(self, name: str, icon: str) -> Subject:
        subject = Subject(id=_new_id("subject"), name=name, icon=icon)
        self.store.snapshot.subjects.append(subject)
        self.store.persist()
        return subject

    def add_topic(self, subject_id: str, name: str) -> Topic | None:
        subject = self.store.snapshot.find_subject(subject_id)
        if subject is None:
            logger.debug(f"add_topic: no subject {subject_id!r}")
            return None
        topic = Topic(id=_new_id("topic"), name=name)
        subject.topics.append(topic)
        self.store.persist()
        return topic

    def delete_topic(self, subject_id: str, topic_id: str) -> bool:
        """Remove a topic. Past progress-log entries are left as they were."""
        subject = self.store.snapshot.find_subject(subject_id)
        topic = subject.find_topic(topic_id) if subject else None
        if topic is None:
            logger.debug(f"delete_topic: no topic {topic_id!r} in subject {subject_id!r}")
            return False
        subject.topics.remove(topic)
        self.store.persist()
        return True

    def update_topic_status(self, subject_id: str, topic_id: str, new_status) -> bool:
        """Set a topic's status and record net completions for today.

        Any status may follow any other. Moving into Completed adds one to
        today's log entry and moving out of it removes one, never going below
        zero; an entry that reaches zero is dropped. Setting the current status
        again changes nothing.
        """
        snapshot = self.store.snapshot
        subject = snapshot.find_subject(subject_id)
        topic = subject.find_topic(topic_id) if subject else None
        if topic is None:
            logger.debug(f"update_topic_status: no topic {topic_id!r} in subject {subject_id!r}")
            return False
        new_status = TopicStatus.parse(new_status)

        old_status = topic.status
        if old_status is new_status:
            return True
        topic.status = new_status

        delta = completion_delta(old_status, new_status)
        if delta != 0:
            today = self.today()
            count = max(0, snapshot.progress.get(today, 0) + delta)
            if count > 0:
                snapshot.progress[today] = count
            else:
                snapshot.progress.pop(today, None)

        self.store.persist()
        return True

    def stats(self) -> SyllabusStats:
        return compute_stats(self.subjects)

    def subject_completion(self, subject_id: str) -> int:
        subject = self.store.snapshot.find_subject(subject_id)
        return subject_completion(subject) if subject else 0

    def progress_history(self) -> list[ProgressLogEntry]:
        return self.store.snapshot.progress_history()

    def trend(self, period: str, reference_date: date | None = None, week_start: int = SUNDAY) -> list[dict]:
        if reference_date is None:
            reference_date = self.today()
        return aggregate(self.store.snapshot.progress, period, reference_date, week_start)
