"""Per-identity snapshot storage.

Each identity (or the guest, when nobody is signed in) owns one partition in
the key-value table holding two records: the subjects and the progress log.
Persistence is best effort. Reads that fail fall back to defaults and writes
that fail are logged while the in-memory snapshot stays authoritative.
"""
import json
import logging
import sqlite3

from study_tracker.auth import Identity
from study_tracker.db import DEFAULT_DB_PATH, read_record, write_records
from study_tracker.models import SyllabusSnapshot
from study_tracker.seed import starter_subjects

logger = logging.getLogger(__name__)

GUEST_PARTITION = "guest"
USER_PARTITION_PREFIX = "user:"

SUBJECTS_KEY = "syllabus"
PROGRESS_KEY = "progressHistory"

_READ_ERRORS = (sqlite3.Error, json.JSONDecodeError, KeyError, TypeError, ValueError)


def partition_key(identity: Identity | None) -> str:
    if identity is None:
        return GUEST_PARTITION
    return USER_PARTITION_PREFIX + identity.key


class EntityStore:
    """Holds the active identity's snapshot and keeps it durable."""

    def __init__(self, db_path: str = DEFAULT_DB_PATH, identity: Identity | None = None):
        self.db_path = db_path
        self._identity = identity
        self._snapshot = self.load(identity)

    @property
    def identity(self) -> Identity | None:
        return self._identity

    @property
    def snapshot(self) -> SyllabusSnapshot:
        return self._snapshot

    def load(self, identity: Identity | None) -> SyllabusSnapshot:
        """Read the identity's snapshot. Never raises; missing or unreadable data yields defaults."""
        partition = partition_key(identity)
        try:
            records = read_record(self.db_path, partition, SUBJECTS_KEY)
            subjects = SyllabusSnapshot.subjects_from_record(records) if records is not None else starter_subjects()
        except _READ_ERRORS as e:
            logger.warning(f"Could not read subjects for partition {partition!r}: {e}")
            subjects = starter_subjects()
        try:
            records = read_record(self.db_path, partition, PROGRESS_KEY)
            progress = SyllabusSnapshot.progress_from_record(records) if records is not None else {}
        except _READ_ERRORS as e:
            logger.warning(f"Could not read progress history for partition {partition!r}: {e}")
            progress = {}
        return SyllabusSnapshot(subjects=subjects, progress=progress)

    def save(self, identity: Identity | None, snapshot: SyllabusSnapshot) -> bool:
        """Persist both records for the identity. Returns False if the write failed."""
        partition = partition_key(identity)
        try:
            write_records(self.db_path, partition, {
                SUBJECTS_KEY: snapshot.subjects_record(),
                PROGRESS_KEY: snapshot.progress_record(),
            })
        except sqlite3.Error as e:
            logger.error(f"Failed to save snapshot for partition {partition!r}: {e}")
            return False
        return True

    def persist(self) -> bool:
        return self.save(self._identity, self._snapshot)

    def switch_identity(self, identity: Identity | None) -> SyllabusSnapshot:
        """Drop the in-memory snapshot and make the new identity's snapshot active."""
        self._identity = identity
        self._snapshot = self.load(identity)
        logger.info(f"Switched to partition {partition_key(identity)!r}")
        return self._snapshot
