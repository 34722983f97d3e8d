"""ASGI entrypoint for the NutriSnap API."""

from nutrisnap.api.app import create_app
from nutrisnap.containers import get_container

app = create_app(get_container())
