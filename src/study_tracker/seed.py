"""Starter syllabus used when a partition has no stored subjects."""
import json
from pathlib import Path

from study_tracker.models import Subject

CONTENT_DIR = Path(__file__).parent / "content"


def starter_subjects() -> list[Subject]:
    """Build a fresh copy of the starter syllabus from syllabus.json."""
    data = json.loads((CONTENT_DIR / "syllabus.json").read_text())
    return [Subject.from_record(subject) for subject in data["subjects"]]
