"""Domain models for courses and lesson sessions."""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import date
from enum import StrEnum


class AttendanceStatus(StrEnum):
    """Attendance outcome recorded for a session."""

    PRESENT = "present"
    ABSENT = "absent"


class AbsenceReason(StrEnum):
    """Why a session was missed.

    Personal absences consume the subscription but never grant a makeup.
    """

    PERSONAL = "personal"
    PROVIDER = "provider"
    HOLIDAY = "holiday"
    EXTERNAL = "external"
    OTHER = "other"


@dataclass(frozen=True)
class AttendanceRecord:
    """Attendance mark for a single session."""

    status: AttendanceStatus
    reason: AbsenceReason | None = None
    details: str | None = None

    @property
    def is_present(self) -> bool:
        return self.status is AttendanceStatus.PRESENT

    @property
    def is_absent(self) -> bool:
        return self.status is AttendanceStatus.ABSENT


@dataclass(frozen=True)
class Course:
    """Recurring lesson definition.

    ``days_of_week`` uses 0=Sunday through 6=Saturday. ``end_date`` and
    ``total_lessons`` are both optional and may both be present.
    """

    id: str
    name: str
    start_date: date
    days_of_week: frozenset[int]
    end_date: date | None = None
    total_lessons: int | None = None


@dataclass(frozen=True)
class Session:
    """One dated lesson occurrence of a course.

    ``course_name`` is a denormalized copy of the owning course's name and is
    rewritten whenever the course is renamed. Replacement links are stored as
    ids on both ends and resolved by lookup.
    """

    id: str
    course_id: str
    course_name: str
    date: date
    attendance: AttendanceRecord | None = None
    is_replacement: bool = False
    replacement_for_session_id: str | None = None
    replacement_session_id: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.attendance is None

    @property
    def is_absent(self) -> bool:
        return self.attendance is not None and self.attendance.is_absent

    @property
    def is_present(self) -> bool:
        return self.attendance is not None and self.attendance.is_present

    def with_attendance(self, attendance: AttendanceRecord | None) -> "Session":
        """Return a copy with attendance replaced, keeping replacement links."""
        return replace(self, attendance=attendance)


@dataclass(frozen=True)
class ScheduleState:
    """Full in-memory snapshot of courses and sessions."""

    courses: tuple[Course, ...] = field(default_factory=tuple)
    sessions: tuple[Session, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> "ScheduleState":
        return cls()

    def find_course(self, course_id: str) -> Course | None:
        for course in self.courses:
            if course.id == course_id:
                return course
        return None

    def find_session(self, session_id: str) -> Session | None:
        return find_session(self.sessions, session_id)


def find_session(sessions: Iterable[Session], session_id: str) -> Session | None:
    """Return the session with ``session_id`` or ``None`` when unresolvable."""
    for session in sessions:
        if session.id == session_id:
            return session
    return None
