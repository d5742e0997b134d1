"""Course edit reconciliation.

An edit is classified by the first matching change, in priority order:
lesson count, days of week, end date, then rename only. Exactly one branch
runs per edit. Replacement sessions survive every edit branch.
"""

import logging
from collections.abc import Iterable
from dataclasses import replace
from datetime import date
from enum import StrEnum

from lesson_tracker.domain.models import Course, ScheduleState, Session
from lesson_tracker.services.generator import IdFactory, new_id, sessions_for_dates
from lesson_tracker.services.recurrence import expand_dates

logger = logging.getLogger(__name__)


class EditKind(StrEnum):
    """Which reconciliation branch an edit falls into."""

    LESSON_COUNT = "lesson_count"
    DAYS_OF_WEEK = "days_of_week"
    END_DATE = "end_date"
    RENAME_ONLY = "rename_only"


def classify_edit(old: Course, new: Course) -> EditKind:
    """Return the reconciliation branch for an edit of ``old`` into ``new``."""
    if old.total_lessons != new.total_lessons and new.total_lessons:
        return EditKind.LESSON_COUNT
    if set(old.days_of_week) != set(new.days_of_week):
        return EditKind.DAYS_OF_WEEK
    if old.end_date != new.end_date and new.end_date is not None:
        return EditKind.END_DATE
    return EditKind.RENAME_ONLY


def reconcile(
    old: Course,
    new: Course,
    sessions: Iterable[Session],
    *,
    today: date,
    id_factory: IdFactory = new_id,
) -> list[Session]:
    """Return the session list after editing ``old`` into ``new``.

    Sessions of other courses pass through untouched and keep their order.
    """
    sessions = list(sessions)
    kind = classify_edit(old, new)
    logger.info("Reconciling course %s edit as %s", new.id, kind.value)

    if kind is EditKind.LESSON_COUNT:
        kept = [s for s in sessions if s.course_id != new.id or s.is_replacement]
        dates = expand_dates(
            new.start_date, new.days_of_week, max_count=new.total_lessons
        )
        return kept + sessions_for_dates(new, dates, id_factory=id_factory)

    if kind is EditKind.DAYS_OF_WEEK:
        past_count = sum(
            1 for s in sessions if s.course_id == new.id and s.date < today
        )
        kept = [
            s
            for s in sessions
            if s.course_id != new.id or s.date < today or s.is_replacement
        ]
        return kept + _regenerate_future(new, today, past_count, id_factory)

    if kind is EditKind.END_DATE:
        end_date = new.end_date
        kept = [
            s
            for s in sessions
            if s.course_id != new.id or s.is_replacement or s.date <= end_date
        ]
        return rename_sessions(kept, new.id, new.name) if old.name != new.name else kept

    if old.name != new.name:
        return rename_sessions(sessions, new.id, new.name)
    return sessions


def _regenerate_future(
    course: Course, today: date, past_count: int, id_factory: IdFactory
) -> list[Session]:
    max_count = None
    if course.total_lessons:
        max_count = course.total_lessons - past_count
        if max_count <= 0:
            return []
    dates = expand_dates(
        today, course.days_of_week, max_count=max_count, end_date=course.end_date
    )
    return sessions_for_dates(course, dates, id_factory=id_factory)


def rename_sessions(
    sessions: Iterable[Session], course_id: str, name: str
) -> list[Session]:
    """Rewrite the denormalized ``course_name`` on every session of a course."""
    return [
        replace(s, course_name=name) if s.course_id == course_id else s
        for s in sessions
    ]


def delete_course(state: ScheduleState, course_id: str) -> ScheduleState:
    """Remove a course and every session pointing at it, replacements included."""
    return ScheduleState(
        courses=tuple(c for c in state.courses if c.id != course_id),
        sessions=tuple(s for s in state.sessions if s.course_id != course_id),
    )
