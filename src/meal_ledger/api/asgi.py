"""ASGI entrypoint for the meal ledger API."""

from meal_ledger.api.app import create_app
from meal_ledger.containers import build_container

app = create_app(build_container())
