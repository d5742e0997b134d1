"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from lesson_tracker.adapters.http_state_gateway import HttpxStateGateway
from lesson_tracker.adapters.json_file_store import JsonFileStateStore
from lesson_tracker.config import Settings
from lesson_tracker.services.persistence import (
    DebouncedSaver,
    StateGateway,
    load_state,
)
from lesson_tracker.services.tracker import ScheduleTracker


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    state_store: JsonFileStateStore
    state_gateway: StateGateway
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    state_store = JsonFileStateStore(resolved_settings.data_file)
    state_gateway = HttpxStateGateway.create(resolved_settings.api_base_url)

    async def close_resources() -> None:
        await state_gateway.close()

    return AppContainer(
        settings=resolved_settings,
        state_store=state_store,
        state_gateway=state_gateway,
        close_resources=close_resources,
    )


async def build_tracker(container: AppContainer) -> ScheduleTracker:
    """Load the stored state and return a tracker that saves through the gateway."""
    state = await load_state(container.state_gateway)
    saver = DebouncedSaver(
        gateway=container.state_gateway,
        delay_seconds=container.settings.save_debounce_seconds,
    )
    return ScheduleTracker(saver=saver, state=state)
