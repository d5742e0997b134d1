"""HTTP client for the ``/api/data`` persistence endpoints."""

from dataclasses import dataclass

import httpx

from lesson_tracker.api.state_models import StatePayload
from lesson_tracker.domain.models import ScheduleState
from lesson_tracker.services.persistence import StateGateway


@dataclass
class HttpxStateGateway(StateGateway):
    """State gateway implemented with httpx."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxStateGateway":
        """Create a gateway with a managed httpx session."""
        return cls(base_url=base_url.rstrip("/"), http_client=httpx.AsyncClient())

    async def load(self) -> ScheduleState:
        """Fetch the full state blob."""
        response = await self.http_client.get(f"{self.base_url}/api/data", timeout=10)
        response.raise_for_status()
        return StatePayload.model_validate(response.json()).to_domain()

    async def save(self, state: ScheduleState) -> None:
        """Send the full state blob, overwriting the store."""
        payload = StatePayload.from_domain(state).to_json_dict()
        response = await self.http_client.post(
            f"{self.base_url}/api/data", json=payload, timeout=10
        )
        response.raise_for_status()

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()
