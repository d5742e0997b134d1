"""Persistence gateway interface and debounced saving."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol

from lesson_tracker.domain.models import ScheduleState

logger = logging.getLogger(__name__)

DEFAULT_SAVE_DELAY_SECONDS = 0.5


class StateGateway(Protocol):
    """Store holding the full courses/sessions blob."""

    async def load(self) -> ScheduleState:
        """Return the stored state."""

    async def save(self, state: ScheduleState) -> None:
        """Overwrite the stored state with ``state``."""


async def load_state(gateway: StateGateway) -> ScheduleState:
    """Load state, falling back to an empty schedule when the store fails."""
    try:
        return await gateway.load()
    except Exception:
        logger.exception("Failed to load schedule state")
        return ScheduleState.empty()


@dataclass
class DebouncedSaver:
    """Coalesces rapid saves into one write after a quiet period.

    Each ``schedule`` call supersedes a save still waiting out its delay.
    Writes to the gateway never overlap. Save failures are logged and
    dropped; the in-memory state stays authoritative.
    """

    gateway: StateGateway
    delay_seconds: float = DEFAULT_SAVE_DELAY_SECONDS
    _pending: asyncio.Task | None = field(default=None, init=False, repr=False)
    _delaying: bool = field(default=False, init=False, repr=False)
    _write_lock: asyncio.Lock = field(
        default_factory=asyncio.Lock, init=False, repr=False
    )

    def schedule(self, state: ScheduleState) -> None:
        """Replace a save still waiting out its delay with a save of ``state``.

        A save already talking to the gateway is left to finish; the new one
        is written after it.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop, schedule state not saved")
            return
        if self._pending is not None and not self._pending.done() and self._delaying:
            self._pending.cancel()
        self._delaying = True
        self._pending = loop.create_task(self._save_later(state))

    async def flush(self) -> None:
        """Wait until no save is pending, including saves scheduled meanwhile."""
        while True:
            pending = self._pending
            if pending is None:
                return
            await asyncio.wait({pending})
            if pending is self._pending:
                return

    async def _save_later(self, state: ScheduleState) -> None:
        await asyncio.sleep(self.delay_seconds)
        if asyncio.current_task() is self._pending:
            self._delaying = False
        async with self._write_lock:
            try:
                await self.gateway.save(state)
            except Exception:
                logger.exception("Failed to save schedule state")
