"""Makeup (replacement) session protocol.

A missed session and its makeup point at each other through
``replacement_session_id`` and ``replacement_for_session_id``. Every
operation here keeps both ends consistent in a single returned list.
"""

import logging
from collections.abc import Iterable
from dataclasses import replace
from datetime import date
from enum import StrEnum

from lesson_tracker.domain.models import (
    AbsenceReason,
    AttendanceRecord,
    Course,
    ScheduleState,
    Session,
    find_session,
)
from lesson_tracker.domain.stats import ReplacementBudget
from lesson_tracker.services.generator import IdFactory, new_id
from lesson_tracker.services.recurrence import next_matching_date

logger = logging.getLogger(__name__)

MAX_REPLACEMENT_SEARCH_DAYS = 100


class AttendanceChange(StrEnum):
    """Outcome of an attendance update request."""

    APPLIED = "applied"
    NEEDS_CONFIRMATION = "needs_confirmation"
    NOT_FOUND = "not_found"


def is_makeup_eligible(session: Session) -> bool:
    """Return true for absences with a reason other than personal."""
    attendance = session.attendance
    return (
        attendance is not None
        and attendance.is_absent
        and attendance.reason is not None
        and attendance.reason is not AbsenceReason.PERSONAL
    )


def replacement_budget(
    sessions: Iterable[Session], course_id: str
) -> ReplacementBudget:
    """Return eligible absences and scheduled makeups for a course."""
    eligible = 0
    used = 0
    for session in sessions:
        if session.course_id != course_id:
            continue
        if is_makeup_eligible(session):
            eligible += 1
        if session.is_replacement:
            used += 1
    return ReplacementBudget(eligible=eligible, used=used)


def can_schedule_replacement(sessions: Iterable[Session], session_id: str) -> bool:
    """Return true when a makeup may be scheduled for ``session_id``.

    The session itself must be eligible and not yet linked, and the
    course-wide budget must not be exhausted.
    """
    sessions = list(sessions)
    session = find_session(sessions, session_id)
    if session is None or not is_makeup_eligible(session):
        return False
    if session.replacement_session_id is not None:
        return False
    return not replacement_budget(sessions, session.course_id).exhausted


def find_replacement_date(
    course: Course,
    sessions: Iterable[Session],
    max_search_days: int = MAX_REPLACEMENT_SEARCH_DAYS,
) -> date | None:
    """Return the first course weekday after the course's latest session."""
    dates = [s.date for s in sessions if s.course_id == course.id]
    if not dates:
        return None
    return next_matching_date(max(dates), course.days_of_week, max_search_days)


def schedule_replacement(
    state: ScheduleState,
    session_id: str,
    *,
    id_factory: IdFactory = new_id,
) -> tuple[ScheduleState, Session | None]:
    """Append a linked makeup for a missed session.

    Returns the unchanged state and ``None`` when the session or its course
    cannot be resolved, the request is not allowed, or no matching weekday
    exists within the search window.
    """
    original = state.find_session(session_id)
    if original is None:
        return state, None
    course = state.find_course(original.course_id)
    if course is None:
        return state, None
    if not can_schedule_replacement(state.sessions, session_id):
        logger.info("Replacement refused for session %s", session_id)
        return state, None

    replacement_date = find_replacement_date(course, state.sessions)
    if replacement_date is None:
        logger.info("No replacement date found for course %s", course.id)
        return state, None

    replacement = Session(
        id=id_factory(),
        course_id=course.id,
        course_name=course.name,
        date=replacement_date,
        is_replacement=True,
        replacement_for_session_id=original.id,
    )
    sessions = tuple(
        replace(s, replacement_session_id=replacement.id) if s.id == original.id else s
        for s in state.sessions
    )
    return replace(state, sessions=(*sessions, replacement)), replacement


def delete_session(sessions: Iterable[Session], session_id: str) -> list[Session]:
    """Remove a session and clear whichever link pointed at it."""
    sessions = list(sessions)
    target = find_session(sessions, session_id)
    remaining = [s for s in sessions if s.id != session_id]
    if target is None:
        return remaining
    result = []
    for session in remaining:
        if (
            target.replacement_for_session_id is not None
            and session.id == target.replacement_for_session_id
        ):
            session = replace(session, replacement_session_id=None)
        elif (
            target.replacement_session_id is not None
            and session.id == target.replacement_session_id
        ):
            session = replace(session, replacement_for_session_id=None)
        result.append(session)
    return result


def update_attendance(
    sessions: Iterable[Session],
    session_id: str,
    attendance: AttendanceRecord | None,
    *,
    confirm_replacement_removal: bool = False,
) -> tuple[list[Session], AttendanceChange]:
    """Set or clear attendance on a session.

    Moving a session that has a linked makeup away from absent needs
    confirmation; once confirmed the makeup is deleted before the new value
    is applied. Clearing attendance keeps the link fields otherwise.
    """
    sessions = list(sessions)
    session = find_session(sessions, session_id)
    if session is None:
        return sessions, AttendanceChange.NOT_FOUND

    if attendance is not None and attendance.is_present:
        attendance = AttendanceRecord(status=attendance.status)

    leaves_absent = attendance is None or not attendance.is_absent
    if session.replacement_session_id is not None and leaves_absent:
        if not confirm_replacement_removal:
            return sessions, AttendanceChange.NEEDS_CONFIRMATION
        sessions = delete_session(sessions, session.replacement_session_id)

    updated = [
        s.with_attendance(attendance) if s.id == session_id else s for s in sessions
    ]
    return updated, AttendanceChange.APPLIED


def update_session_date(
    sessions: Iterable[Session], session_id: str, new_date: date
) -> tuple[list[Session], bool]:
    """Move a session to ``new_date``; returns whether it was found."""
    sessions = list(sessions)
    if find_session(sessions, session_id) is None:
        return sessions, False
    return [
        replace(s, date=new_date) if s.id == session_id else s for s in sessions
    ], True
