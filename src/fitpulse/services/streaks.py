"""Day-streak computation over completion dates."""

from collections.abc import Iterable
from datetime import date, timedelta

ONE_DAY = timedelta(days=1)


def current_streak(completion_dates: Iterable[date], today: date) -> int:
    """Count consecutive completion days ending today or yesterday.

    Dates after ``today`` are ignored. The streak is 0 when the most recent
    completion is older than yesterday; otherwise it counts backward from
    the most recent date until the first missing day.

    Args:
        completion_dates: Calendar dates with at least one completion,
            in any order and possibly repeated
        today: The reference date, normally the completion event's date

    Returns:
        Number of days in the current streak
    """
    days = sorted({d for d in completion_dates if d <= today}, reverse=True)
    if not days or days[0] < today - ONE_DAY:
        return 0

    streak = 1
    for previous, current in zip(days, days[1:]):
        if previous - current != ONE_DAY:
            break
        streak += 1
    return streak
