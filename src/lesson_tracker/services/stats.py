"""Attendance statistics and agenda queries over a session set."""

from collections.abc import Iterable
from datetime import date

from lesson_tracker.domain.models import AbsenceReason, Session
from lesson_tracker.domain.stats import CourseStats
from lesson_tracker.services.replacements import is_makeup_eligible


def aggregate(sessions: Iterable[Session]) -> dict[str, CourseStats]:
    """Return per-course stats keyed by the denormalized course name.

    Grouping by name rather than course id is intentional: sessions whose
    ``course_name`` diverged from their course form their own group.
    """
    grouped: dict[str, list[Session]] = {}
    for session in sessions:
        grouped.setdefault(session.course_name, []).append(session)
    return {name: _course_stats(name, group) for name, group in grouped.items()}


def _course_stats(name: str, sessions: list[Session]) -> CourseStats:
    present = sum(1 for s in sessions if s.is_present)
    pending = [s for s in sessions if s.is_pending]
    personal = sum(
        1
        for s in sessions
        if s.is_absent and s.attendance.reason is AbsenceReason.PERSONAL
    )
    return CourseStats(
        course_name=name,
        total=len(sessions),
        replacements=sum(1 for s in sessions if s.is_replacement),
        present=present,
        absent=sum(1 for s in sessions if s.is_absent),
        pending_regular=sum(1 for s in pending if not s.is_replacement),
        pending_replacement=sum(1 for s in pending if s.is_replacement),
        used=present + personal,
        makeup_eligible=sum(1 for s in sessions if is_makeup_eligible(s)),
    )


def next_session_ids(sessions: Iterable[Session], *, today: date) -> set[str]:
    """Return the id of the earliest session on or after ``today`` per course."""
    ids: set[str] = set()
    seen_courses: set[str] = set()
    upcoming = sorted((s for s in sessions if s.date >= today), key=lambda s: s.date)
    for session in upcoming:
        if session.course_id not in seen_courses:
            ids.add(session.id)
            seen_courses.add(session.course_id)
    return ids


def daily_agenda(
    sessions: Iterable[Session],
    *,
    today: date,
    course_id: str | None = None,
    include_future: bool = False,
) -> list[Session]:
    """Return sessions newest first for the daily view.

    Without ``include_future`` only sessions up to today plus each course's
    next upcoming session are listed.
    """
    sessions = list(sessions)
    upcoming = next_session_ids(sessions, today=today)
    visible = [
        s
        for s in sessions
        if (include_future or s.date <= today or s.id in upcoming)
        and (course_id is None or s.course_id == course_id)
    ]
    return sorted(visible, key=lambda s: s.date, reverse=True)
