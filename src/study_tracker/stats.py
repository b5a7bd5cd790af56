"""Completion statistics derived from the current subjects."""
from study_tracker.models import Subject, SyllabusStats, TopicStatus


def completion_percent(completed: int, total: int) -> int:
    """Whole-number percentage, rounded half up. 0 when there is nothing to complete."""
    if total <= 0:
        return 0
    # floor(100 * completed / total + 1/2) without float error
    return (200 * completed + total) // (2 * total)


def compute_stats(subjects: list[Subject]) -> SyllabusStats:
    total = 0
    completed = 0
    in_progress = 0
    for subject in subjects:
        total += len(subject.topics)
        for topic in subject.topics:
            if topic.status is TopicStatus.COMPLETED:
                completed += 1
            elif topic.status is TopicStatus.IN_PROGRESS:
                in_progress += 1
    return SyllabusStats(
        total_topics=total,
        completed_topics=completed,
        in_progress_topics=in_progress,
        # Holds only while TopicStatus has exactly three members.
        not_started_topics=total - completed - in_progress,
        overall_completion=completion_percent(completed, total),
    )


def subject_completion(subject: Subject) -> int:
    completed = sum(1 for t in subject.topics if t.status is TopicStatus.COMPLETED)
    return completion_percent(completed, len(subject.topics))
