"""ASGI entrypoint for the nutrition entry API."""

from nutrition_entry.api.app import create_app
from nutrition_entry.containers import build_container

app = create_app(build_container())
