"""ASGI entrypoint for the Harley vote front end."""

from harley_vote.api.app import create_app
from harley_vote.containers import build_container

app = create_app(build_container())
