"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import date

import pytest

from lesson_tracker.adapters.json_file_store import JsonFileStateStore
from lesson_tracker.config import Settings
from lesson_tracker.containers import AppContainer
from lesson_tracker.domain.models import (
    AbsenceReason,
    AttendanceRecord,
    AttendanceStatus,
    Course,
    ScheduleState,
    Session,
)
from lesson_tracker.services.persistence import StateGateway
from lesson_tracker.services.tracker import SaveScheduler, ScheduleTracker

TODAY = date(2024, 1, 15)
MONDAY = 1
TUESDAY = 2
WEDNESDAY = 3
FRIDAY = 5


class SequentialIds:
    """Deterministic id factory."""

    def __init__(self, prefix: str = "id") -> None:
        self.prefix = prefix
        self.count = 0

    def __call__(self) -> str:
        self.count += 1
        return f"{self.prefix}-{self.count}"


def make_course(**overrides: object) -> Course:
    values: dict[str, object] = {
        "id": "course-1",
        "name": "Piano",
        "start_date": date(2024, 1, 1),
        "days_of_week": frozenset({MONDAY}),
    }
    values.update(overrides)
    return Course(**values)


def make_session(session_id: str, day: date, **overrides: object) -> Session:
    values: dict[str, object] = {
        "id": session_id,
        "course_id": "course-1",
        "course_name": "Piano",
        "date": day,
    }
    values.update(overrides)
    return Session(**values)


def present() -> AttendanceRecord:
    return AttendanceRecord(status=AttendanceStatus.PRESENT)


def absent(reason: AbsenceReason | None = None) -> AttendanceRecord:
    return AttendanceRecord(status=AttendanceStatus.ABSENT, reason=reason)


def mark(session: Session, attendance: AttendanceRecord | None) -> Session:
    return replace(session, attendance=attendance)


@dataclass
class RecordingSaver(SaveScheduler):
    """Saver that records every scheduled snapshot."""

    saved: list[ScheduleState] = field(default_factory=list)

    def schedule(self, state: ScheduleState) -> None:
        self.saved.append(state)


@dataclass
class InMemoryStateGateway(StateGateway):
    """In-memory state gateway for tests."""

    state: ScheduleState = field(default_factory=ScheduleState.empty)
    saves: list[ScheduleState] = field(default_factory=list)
    fail_load: bool = False
    fail_save: bool = False

    async def load(self) -> ScheduleState:
        if self.fail_load:
            raise OSError("store unreachable")
        return self.state

    async def save(self, state: ScheduleState) -> None:
        if self.fail_save:
            raise OSError("store unreachable")
        self.saves.append(state)
        self.state = state


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        data_file=tmp_path / "data" / "db.json",
        api_base_url="http://store.test",
    )


@pytest.fixture
def state_gateway() -> InMemoryStateGateway:
    return InMemoryStateGateway()


@pytest.fixture
def saver() -> RecordingSaver:
    return RecordingSaver()


@pytest.fixture
def tracker(saver: RecordingSaver) -> ScheduleTracker:
    return ScheduleTracker(
        saver=saver,
        clock=lambda: TODAY,
        id_factory=SequentialIds("gen"),
    )


@pytest.fixture
def container(
    settings: Settings, state_gateway: InMemoryStateGateway
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        state_store=JsonFileStateStore(settings.data_file),
        state_gateway=state_gateway,
        close_resources=close_resources,
    )
