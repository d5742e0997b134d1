"""Tests for container wiring."""

import asyncio

from lesson_tracker.containers import build_container, build_tracker
from lesson_tracker.domain.models import ScheduleState
from lesson_tracker.services.persistence import DebouncedSaver
from tests.conftest import InMemoryStateGateway, make_course


def test_build_container_creates_store_and_gateway(settings) -> None:
    container = build_container(settings)

    assert container.state_store.path == settings.data_file
    assert container.state_gateway.base_url == "http://store.test"
    asyncio.run(container.close_resources())


def test_build_tracker_loads_state(container) -> None:
    stored = ScheduleState(courses=(make_course(),))
    container.state_gateway.state = stored

    tracker = asyncio.run(build_tracker(container))

    assert tracker.state == stored
    assert isinstance(tracker.saver, DebouncedSaver)
    assert tracker.saver.delay_seconds == container.settings.save_debounce_seconds


def test_build_tracker_tolerates_unreachable_store(container) -> None:
    container.state_gateway = InMemoryStateGateway(fail_load=True)

    tracker = asyncio.run(build_tracker(container))

    assert tracker.state == ScheduleState.empty()


def test_tracker_mutations_reach_the_store(container) -> None:
    container.settings.save_debounce_seconds = 0

    async def run() -> None:
        tracker = await build_tracker(container)
        tracker.add_course(make_course(total_lessons=2))
        tracker.delete_session(tracker.state.sessions[0].id)
        await tracker.saver.flush()

    asyncio.run(run())

    saves = container.state_gateway.saves
    assert len(saves) == 1
    assert len(saves[0].sessions) == 1
