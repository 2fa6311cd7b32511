"""ASGI entrypoint for the recipe web app."""

from recipe_app.api.app import create_app
from recipe_app.containers import build_container

app = create_app(build_container())
