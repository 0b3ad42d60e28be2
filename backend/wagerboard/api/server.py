"""
FastAPI application for the wager ledger.

- Lifespan opens the database at startup and closes it at shutdown
- The ledger service is built once and injected into routes
- Ledger errors map to distinct HTTP status codes
"""

import logging
from contextlib import asynccontextmanager
from typing import Dict, Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wagerboard import __version__
from wagerboard.api.errors import register_error_handlers
from wagerboard.api.routes import bets_router, streams_router, users_router
from wagerboard.config import Settings, get_settings
from wagerboard.database import Database
from wagerboard.database.dependencies import get_database
from wagerboard.observability import initialize_logfire, instrument_database
from wagerboard.services import LedgerService

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """Build the application. Tests pass their own settings and database."""
    settings = settings or get_settings()
    database = database or Database(settings.database_url, echo=settings.database_echo)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting Wagerboard API ({settings.environment})")

        await database.connect()
        if settings.auto_create_tables:
            await database.create_all()

        if await database.check_connection():
            logger.info(f"Database connection successful: {database.sanitized_url}")
        else:
            logger.error(f"Database connection failed: {database.sanitized_url}")

        if app.state.logfire_enabled:
            instrument_database(database.engine.sync_engine)

        app.state.ledger = LedgerService(database)
        logger.info("Wagerboard API startup complete")

        yield

        logger.info("Shutting down Wagerboard API")
        await database.close()

    app = FastAPI(
        title="Wagerboard API",
        description="Wager ledger, user statistics and leaderboard for live streams",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.logfire_enabled = initialize_logfire(settings, app=app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(bets_router)
    app.include_router(streams_router)
    app.include_router(users_router)

    @app.get("/health", tags=["Health"])
    async def health_check(database: Database = Depends(get_database)) -> Dict[str, str]:
        """Health check endpoint for load balancers and monitoring."""
        db_connected = await database.check_connection()

        return {
            "status": "healthy" if db_connected else "degraded",
            "service": "wagerboard-api",
            "version": __version__,
            "database": "connected" if db_connected else "disconnected",
            "environment": settings.environment,
        }

    return app
