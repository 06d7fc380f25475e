"""ASGI entry point (``uvicorn vtexalert.api.app:app``)."""

from .factory import create_app

app = create_app()
