"""FastAPI application for NotesVault."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from .database import Database
from .observability import initialize_observability
from .routes import health_router, notes_router

# Initialize logger
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database handle on startup and close it on shutdown."""
    logger.info("api_starting")

    initialize_observability()

    database: Database = app.state.database
    await database.connect()
    logger.info("api_started")

    yield

    logger.info("api_shutting_down")
    await database.disconnect()
    logger.info("api_shutdown_complete")


def create_app(database: Database | None = None) -> FastAPI:
    """Build the API around ``database``, or one configured from the environment."""
    app = FastAPI(
        title="NotesVault API",
        description="Note storage with link tracking for the NotesVault map view",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.database = database or Database()

    FastAPIInstrumentor.instrument_app(app)

    app.include_router(health_router)
    app.include_router(notes_router)
    return app


app = create_app()
