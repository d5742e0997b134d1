"""ASGI entrypoint for the lesson tracker API."""

from lesson_tracker.api.app import create_app
from lesson_tracker.containers import build_container

app = create_app(build_container())
