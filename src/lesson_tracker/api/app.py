"""FastAPI application factory for the persistence endpoints."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from lesson_tracker.api.state_models import StatePayload
from lesson_tracker.app_logging import configure_logging
from lesson_tracker.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app serving the stored courses/sessions blob."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/api/data", response_model=None)
    def get_data(request: Request) -> dict[str, object] | JSONResponse:
        """Return the full stored state, creating an empty store if needed."""
        state_container: AppContainer = request.app.state.container
        try:
            state = state_container.state_store.read()
        except Exception:
            logger.exception("Failed to read data")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "Failed to read data"},
            )
        return StatePayload.from_domain(state).to_json_dict()

    @app.post("/api/data", response_model=None)
    def save_data(
        payload: StatePayload, request: Request
    ) -> dict[str, bool] | JSONResponse:
        """Overwrite the stored state with the posted blob."""
        state_container: AppContainer = request.app.state.container
        try:
            state_container.state_store.write(payload.to_domain())
        except Exception:
            logger.exception("Failed to save data")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "Failed to save data"},
            )
        return {"success": True}

    return app
