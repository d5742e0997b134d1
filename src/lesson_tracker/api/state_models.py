"""Pydantic models for the persisted courses/sessions blob."""

import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lesson_tracker.domain.models import (
    AbsenceReason,
    AttendanceRecord,
    AttendanceStatus,
    Course,
    ScheduleState,
    Session,
)

Weekday = Annotated[int, Field(ge=0, le=6)]


class AttendancePayload(BaseModel):
    """Attendance mark payload."""

    status: AttendanceStatus
    reason: AbsenceReason | None = None
    details: str | None = None


class CoursePayload(BaseModel):
    """Course payload."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    start_date: datetime.date = Field(alias="startDate")
    days_of_week: list[Weekday] = Field(alias="daysOfWeek")
    end_date: datetime.date | None = Field(default=None, alias="endDate")
    total_lessons: int | None = Field(default=None, alias="totalLessons")

    @field_validator("end_date", "total_lessons", mode="before")
    @classmethod
    def _blank_as_none(cls, value: object) -> object:
        return None if value == "" else value

    def to_domain(self) -> Course:
        return Course(
            id=self.id,
            name=self.name,
            start_date=self.start_date,
            days_of_week=frozenset(self.days_of_week),
            end_date=self.end_date,
            total_lessons=self.total_lessons,
        )

    @classmethod
    def from_domain(cls, course: Course) -> "CoursePayload":
        return cls(
            id=course.id,
            name=course.name,
            start_date=course.start_date,
            days_of_week=sorted(course.days_of_week),
            end_date=course.end_date,
            total_lessons=course.total_lessons,
        )


class SessionPayload(BaseModel):
    """Session payload."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    course_id: str = Field(alias="courseId")
    course_name: str = Field(alias="courseName")
    date: datetime.date
    attendance: AttendancePayload | None = None
    is_replacement: bool | None = Field(default=None, alias="isReplacement")
    replacement_for_session_id: str | None = Field(
        default=None, alias="replacementForSessionId"
    )
    replacement_session_id: str | None = Field(
        default=None, alias="replacementSessionId"
    )

    def to_domain(self) -> Session:
        attendance = None
        if self.attendance is not None:
            attendance = AttendanceRecord(
                status=self.attendance.status,
                reason=self.attendance.reason,
                details=self.attendance.details,
            )
        return Session(
            id=self.id,
            course_id=self.course_id,
            course_name=self.course_name,
            date=self.date,
            attendance=attendance,
            is_replacement=bool(self.is_replacement),
            replacement_for_session_id=self.replacement_for_session_id,
            replacement_session_id=self.replacement_session_id,
        )

    @classmethod
    def from_domain(cls, session: Session) -> "SessionPayload":
        attendance = None
        if session.attendance is not None:
            attendance = AttendancePayload(
                status=session.attendance.status,
                reason=session.attendance.reason,
                details=session.attendance.details,
            )
        return cls(
            id=session.id,
            course_id=session.course_id,
            course_name=session.course_name,
            date=session.date,
            attendance=attendance,
            is_replacement=True if session.is_replacement else None,
            replacement_for_session_id=session.replacement_for_session_id,
            replacement_session_id=session.replacement_session_id,
        )


class StatePayload(BaseModel):
    """Full ``{courses, sessions}`` blob exchanged with the store."""

    courses: list[CoursePayload] = Field(default_factory=list)
    sessions: list[SessionPayload] = Field(default_factory=list)

    @field_validator("courses", "sessions", mode="before")
    @classmethod
    def _null_as_empty(cls, value: object) -> object:
        return [] if value is None else value

    def to_domain(self) -> ScheduleState:
        return ScheduleState(
            courses=tuple(course.to_domain() for course in self.courses),
            sessions=tuple(session.to_domain() for session in self.sessions),
        )

    @classmethod
    def from_domain(cls, state: ScheduleState) -> "StatePayload":
        return cls(
            courses=[CoursePayload.from_domain(course) for course in state.courses],
            sessions=[SessionPayload.from_domain(s) for s in state.sessions],
        )

    def to_json_dict(self) -> dict[str, object]:
        """Dump with camelCase keys, ISO dates and unset fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
