"""Router registration.

``/health`` sits at the root; everything else lives under ``/api/v1``.
"""

from fastapi import FastAPI

from scoring_server.routes import chat, health, reference, sessions

API_PREFIX = "/api/v1"


def register_routes(app: FastAPI) -> None:
    app.include_router(health.router)
    for module in (chat, sessions, reference):
        app.include_router(module.router, prefix=API_PREFIX)
