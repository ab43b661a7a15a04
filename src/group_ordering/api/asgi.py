"""ASGI entrypoint for the group ordering API."""

from group_ordering.api.app import create_app
from group_ordering.containers import build_container

app = create_app(build_container())
