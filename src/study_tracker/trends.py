"""Bucket the progress log into daily, weekly or monthly chart windows."""
from datetime import date, timedelta

PERIODS = ("daily", "weekly", "monthly")

MONDAY, SUNDAY = 0, 6

# Labels are English regardless of the process locale.
DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

DAILY_BUCKETS = 7
WEEKLY_BUCKETS = 4
MONTHLY_BUCKETS = 6


def week_start_of(day: date, week_start: int = SUNDAY) -> date:
    """First day of the week containing `day` (weekday numbers as in date.weekday())."""
    return day - timedelta(days=(day.weekday() - week_start) % 7)


def _month_offset(year: int, month: int, offset: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def _daily(progress: dict, reference_date: date) -> list[dict]:
    buckets = []
    for i in range(DAILY_BUCKETS - 1, -1, -1):
        day = reference_date - timedelta(days=i)
        buckets.append({"label": DAY_NAMES[day.weekday()], "start": day, "completed": 0})
    index = {b["start"]: b for b in buckets}
    for day, count in progress.items():
        if day in index:
            index[day]["completed"] += count
    return buckets


def _weekly(progress: dict, reference_date: date, week_start: int) -> list[dict]:
    current = week_start_of(reference_date, week_start)
    buckets = []
    for i in range(WEEKLY_BUCKETS - 1, -1, -1):
        start = current - timedelta(weeks=i)
        buckets.append({
            "label": f"Week of {MONTH_NAMES[start.month - 1]} {start.day}",
            "start": start,
            "completed": 0,
        })
    index = {b["start"]: b for b in buckets}
    for day, count in progress.items():
        bucket = index.get(week_start_of(day, week_start))
        if bucket is not None:
            bucket["completed"] += count
    return buckets


def _monthly(progress: dict, reference_date: date) -> list[dict]:
    buckets = []
    for i in range(MONTHLY_BUCKETS - 1, -1, -1):
        year, month = _month_offset(reference_date.year, reference_date.month, -i)
        start = date(year, month, 1)
        buckets.append({"label": f"{MONTH_NAMES[month - 1]} {year % 100:02d}", "start": start, "completed": 0})
    index = {(b["start"].year, b["start"].month): b for b in buckets}
    for day, count in progress.items():
        bucket = index.get((day.year, day.month))
        if bucket is not None:
            bucket["completed"] += count
    return buckets


def aggregate(
    progress: dict[date, int],
    period: str,
    reference_date: date,
    week_start: int = SUNDAY,
) -> list[dict]:
    """Sum completed-topic counts into fixed buckets ending at `reference_date`.

    Args:
        progress: Mapping of calendar day to net completions that day.
        period: One of "daily" (7 days), "weekly" (4 weeks) or "monthly" (6 months).
        reference_date: The last day covered; the clock is never read here.
        week_start: Weekday weeks begin on, used for both window edges and assignment.

    Returns:
        Buckets oldest first, each {"label", "start", "completed"}. Every bucket
        is present even when no entries fall into it.
    """
    if period == "daily":
        return _daily(progress, reference_date)
    if period == "weekly":
        return _weekly(progress, reference_date, week_start)
    if period == "monthly":
        return _monthly(progress, reference_date)
    raise ValueError(f"Unknown period: {period!r} (expected one of {', '.join(PERIODS)})")
