"""Flat JSON file store for the courses/sessions blob."""

import asyncio
import json
from dataclasses import dataclass
from pathlib import Path

from lesson_tracker.api.state_models import StatePayload
from lesson_tracker.domain.models import ScheduleState
from lesson_tracker.services.persistence import StateGateway

_EMPTY_BLOB = {"courses": [], "sessions": []}


@dataclass
class JsonFileStateStore(StateGateway):
    """Stores the whole state in one JSON file, replaced on every save."""

    path: Path

    @property
    def temp_path(self) -> Path:
        return self.path.with_name(self.path.name + ".tmp")

    def ensure_exists(self) -> None:
        """Create the file with an empty blob when it is missing."""
        if self.path.exists():
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._replace_contents(_EMPTY_BLOB)

    def read(self) -> ScheduleState:
        """Return the stored state."""
        self.ensure_exists()
        raw = json.loads(self.path.read_text(encoding="utf-8"))
        return StatePayload.model_validate(raw).to_domain()

    def write(self, state: ScheduleState) -> None:
        """Replace the file with ``state``.

        The blob is written to a sibling temp file first, so readers see
        either the old contents or the new ones.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._replace_contents(StatePayload.from_domain(state).to_json_dict())

    async def load(self) -> ScheduleState:
        """Return the stored state without blocking the event loop."""
        return await asyncio.to_thread(self.read)

    async def save(self, state: ScheduleState) -> None:
        await asyncio.to_thread(self.write, state)

    def _replace_contents(self, payload: dict) -> None:
        temp_path = self.temp_path
        temp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        temp_path.replace(self.path)
