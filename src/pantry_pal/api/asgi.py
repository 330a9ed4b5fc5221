"""ASGI entrypoint for the PantryPal API."""

from pantry_pal.api.app import create_app

app = create_app()
