"""Session generation from course definitions."""

from collections.abc import Callable, Iterable
from datetime import date
from uuid import uuid4

from lesson_tracker.domain.models import Course, Session
from lesson_tracker.services.recurrence import expand_dates

IdFactory = Callable[[], str]


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return str(uuid4())


def generate_sessions(
    course: Course, *, id_factory: IdFactory = new_id
) -> list[Session]:
    """Build the full regular schedule of ``course`` from its start date.

    Both ``total_lessons`` and ``end_date`` apply when set; the first one to
    trigger ends generation.
    """
    dates = expand_dates(
        course.start_date,
        course.days_of_week,
        max_count=course.total_lessons,
        end_date=course.end_date,
    )
    return sessions_for_dates(course, dates, id_factory=id_factory)


def sessions_for_dates(
    course: Course, dates: Iterable[date], *, id_factory: IdFactory = new_id
) -> list[Session]:
    """Create one unattended regular session per date."""
    return [
        Session(
            id=id_factory(),
            course_id=course.id,
            course_name=course.name,
            date=day,
        )
        for day in dates
    ]
