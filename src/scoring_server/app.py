"""FastAPI application for the scoring chat service.

``create_app(settings)`` wires the pieces together: logging, CORS, the error
handlers from :mod:`scoring_server.errors` and the routers from
:mod:`scoring_server.routes`.  The test definitions are loaded in the
lifespan hook, so a broken tests file stops the server from starting.

Run it with ``scoring-server`` (see :func:`cli`) or
``uvicorn scoring_server.app:app``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scoring_rulesets.engine import ScoringEngine
from scoring_rulesets.ruleset import TestStore

from scoring_server.config import ServerSettings, load_settings
from scoring_server.errors import install_error_handlers
from scoring_server.routes import register_routes

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load the tests file and build the shared engine."""
    settings: ServerSettings = app.state.settings
    store = TestStore(tests_file=settings.tests_file)
    store.load()

    engine = ScoringEngine(store)
    app.state.store = store
    app.state.engine = engine
    logger.info("Serving %d tests from %s", len(store.tests), store.path)

    yield

    # sessions are in memory only
    if len(engine.sessions):
        logger.info("Discarding %d active sessions on shutdown", len(engine.sessions))


def create_app(settings: ServerSettings | None = None) -> FastAPI:
    settings = settings or load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
    )

    app = FastAPI(
        title="Scoring API Server",
        description="Chat-style REST API for APACHE severity scoring",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)
    register_routes(app)
    return app


app = create_app()


def cli() -> None:
    """Entry point for the ``scoring-server`` console script."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "scoring_server.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
