"""Data classes for the syllabus domain model."""
import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

logger = logging.getLogger(__name__)


class TopicStatus(Enum):
    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"

    @classmethod
    def parse(cls, value) -> "TopicStatus":
        """Accept either a member or its stored string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown topic status: {value!r}") from None

    @classmethod
    def from_stored(cls, value) -> "TopicStatus":
        """Decode a persisted status; unknown values load as NOT_STARTED."""
        try:
            return cls.parse(value)
        except ValueError:
            logger.warning(f"Unknown stored topic status {value!r}, loading as {cls.NOT_STARTED.value!r}")
            return cls.NOT_STARTED


@dataclass
class Topic:
    id: str
    name: str
    status: TopicStatus = TopicStatus.NOT_STARTED

    def to_record(self) -> dict:
        return {"id": self.id, "name": self.name, "status": self.status.value}

    @classmethod
    def from_record(cls, record: dict) -> "Topic":
        return cls(
            id=record["id"],
            name=record["name"],
            status=TopicStatus.from_stored(record.get("status", TopicStatus.NOT_STARTED.value)),
        )


@dataclass
class Subject:
    id: str
    name: str
    icon: str
    topics: list[Topic] = field(default_factory=list)

    def find_topic(self, topic_id: str) -> Topic | None:
        for topic in self.topics:
            if topic.id == topic_id:
                return topic
        return None

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "topics": [t.to_record() for t in self.topics],
        }

    @classmethod
    def from_record(cls, record: dict) -> "Subject":
        return cls(
            id=record["id"],
            name=record["name"],
            icon=record.get("icon", ""),
            topics=[Topic.from_record(t) for t in record.get("topics", [])],
        )


@dataclass
class ProgressLogEntry:
    date: date
    completed_count: int

    def to_record(self) -> dict:
        return {"date": self.date.isoformat(), "completedCount": self.completed_count}

    @classmethod
    def from_record(cls, record: dict) -> "ProgressLogEntry":
        return cls(
            date=date.fromisoformat(record["date"]),
            completed_count=int(record["completedCount"]),
        )


@dataclass
class SyllabusSnapshot:
    """Everything one identity partition holds: subjects plus the progress log.

    The log maps a calendar day to the net number of topics completed that
    day. Only positive counts are kept.
    """
    subjects: list[Subject] = field(default_factory=list)
    progress: dict[date, int] = field(default_factory=dict)

    def find_subject(self, subject_id: str) -> Subject | None:
        for subject in self.subjects:
            if subject.id == subject_id:
                return subject
        return None

    def progress_history(self) -> list[ProgressLogEntry]:
        return [ProgressLogEntry(day, count) for day, count in sorted(self.progress.items())]

    def subjects_record(self) -> list[dict]:
        return [s.to_record() for s in self.subjects]

    def progress_record(self) -> list[dict]:
        return [entry.to_record() for entry in self.progress_history()]

    @staticmethod
    def subjects_from_record(records: list) -> list[Subject]:
        subjects = []
        for record in records:
            try:
                subjects.append(Subject.from_record(record))
            except (KeyError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping unreadable subject record {record!r}: {e!r}")
        return subjects

    @staticmethod
    def progress_from_record(records: list) -> dict[date, int]:
        progress: dict[date, int] = {}
        for record in records:
            entry = ProgressLogEntry.from_record(record)
            total = progress.get(entry.date, 0) + entry.completed_count
            if total > 0:
                progress[entry.date] = total
            else:
                progress.pop(entry.date, None)
        return progress


@dataclass
class SyllabusStats:
    total_topics: int = 0
    completed_topics: int = 0
    in_progress_topics: int = 0
    not_started_topics: int = 0
    overall_completion: int = 0
