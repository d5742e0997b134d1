"""In-memory schedule tracker applying mutations and scheduling saves."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Protocol

from lesson_tracker.domain.models import (
    AttendanceRecord,
    Course,
    ScheduleState,
    Session,
)
from lesson_tracker.domain.stats import CourseStats, ReplacementBudget
from lesson_tracker.services import reconciliation, replacements
from lesson_tracker.services.generator import IdFactory, generate_sessions, new_id
from lesson_tracker.services.replacements import AttendanceChange
from lesson_tracker.services.stats import aggregate, daily_agenda, next_session_ids

logger = logging.getLogger(__name__)


class SaveScheduler(Protocol):
    """Receives the full state after every committed mutation."""

    def schedule(self, state: ScheduleState) -> None:
        """Arrange for ``state`` to be persisted."""


@dataclass
class ScheduleTracker:
    """Single-writer owner of the courses/sessions snapshot.

    Each mutation computes a new snapshot, swaps it in, and hands the full
    state to the saver. Business-rule refusals return a falsy result and
    leave the snapshot untouched.
    """

    saver: SaveScheduler
    state: ScheduleState = field(default_factory=ScheduleState.empty)
    clock: Callable[[], date] = date.today
    id_factory: IdFactory = new_id

    def add_course(self, course: Course) -> int:
        """Add a course with its generated schedule; return the session count."""
        generated = generate_sessions(course, id_factory=self.id_factory)
        self._commit(
            ScheduleState(
                courses=(*self.state.courses, course),
                sessions=(*self.state.sessions, *generated),
            )
        )
        logger.info("Generated %d sessions for course %s", len(generated), course.id)
        return len(generated)

    def edit_course(self, course: Course) -> bool:
        """Replace a course definition and reconcile its sessions."""
        old = self.state.find_course(course.id)
        if old is None:
            return False
        sessions = reconciliation.reconcile(
            old,
            course,
            self.state.sessions,
            today=self.clock(),
            id_factory=self.id_factory,
        )
        self._commit(
            ScheduleState(
                courses=tuple(
                    course if c.id == course.id else c for c in self.state.courses
                ),
                sessions=tuple(sessions),
            )
        )
        return True

    def delete_course(self, course_id: str) -> bool:
        """Delete a course and all of its sessions."""
        existed = self.state.find_course(course_id) is not None
        updated = reconciliation.delete_course(self.state, course_id)
        if updated != self.state:
            self._commit(updated)
        return existed

    def update_attendance(
        self,
        session_id: str,
        attendance: AttendanceRecord | None,
        *,
        confirm_replacement_removal: bool = False,
    ) -> AttendanceChange:
        """Set or clear attendance; see ``replacements.update_attendance``."""
        sessions, outcome = replacements.update_attendance(
            self.state.sessions,
            session_id,
            attendance,
            confirm_replacement_removal=confirm_replacement_removal,
        )
        if outcome is AttendanceChange.APPLIED:
            self._commit(replace(self.state, sessions=tuple(sessions)))
        return outcome

    def can_schedule_replacement(self, session_id: str) -> bool:
        return replacements.can_schedule_replacement(self.state.sessions, session_id)

    def replacement_budget(self, course_id: str) -> ReplacementBudget:
        return replacements.replacement_budget(self.state.sessions, course_id)

    def schedule_replacement(self, session_id: str) -> Session | None:
        """Schedule a makeup for a missed session, or return ``None``."""
        updated, replacement = replacements.schedule_replacement(
            self.state, session_id, id_factory=self.id_factory
        )
        if replacement is not None:
            self._commit(updated)
            logger.info(
                "Scheduled replacement %s on %s for session %s",
                replacement.id,
                replacement.date.isoformat(),
                session_id,
            )
        return replacement

    def update_session_date(self, session_id: str, new_date: date) -> bool:
        sessions, found = replacements.update_session_date(
            self.state.sessions, session_id, new_date
        )
        if found:
            self._commit(replace(self.state, sessions=tuple(sessions)))
        return found

    def delete_session(self, session_id: str) -> bool:
        """Delete one session, unlinking its replacement partner."""
        if self.state.find_session(session_id) is None:
            return False
        sessions = replacements.delete_session(self.state.sessions, session_id)
        self._commit(replace(self.state, sessions=tuple(sessions)))
        return True

    def stats(self) -> dict[str, CourseStats]:
        return aggregate(self.state.sessions)

    def next_session_ids(self) -> set[str]:
        return next_session_ids(self.state.sessions, today=self.clock())

    def agenda(
        self, course_id: str | None = None, include_future: bool = False
    ) -> list[Session]:
        return daily_agenda(
            self.state.sessions,
            today=self.clock(),
            course_id=course_id,
            include_future=include_future,
        )

    def _commit(self, state: ScheduleState) -> None:
        self.state = state
        self.saver.schedule(state)
