"""
FastAPI application entry point.

Sets up the app, lifespan (DB connect/disconnect), CORS, logging,
and includes API routers.
"""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import events, users
from app.config import get_settings
from app.database import close_mongo_connection, connect_to_mongo

# Configure logging - single place for log format and level
logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context: runs on startup and shutdown.
    We use it to connect to MongoDB at start and disconnect at end.
    """
    # Startup
    await connect_to_mongo()
    logger.info("%s started", get_settings().app_name)
    yield
    # Shutdown
    await close_mongo_connection()


def create_application() -> FastAPI:
    """Factory for the FastAPI app. Keeps main.py clean and testable."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Store calendar events and merge a user's overlapping events.",
        version="1.0.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Restrict in production to your frontend origin
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(events.router, prefix="/api/events", tags=["events"])
    app.include_router(users.router, prefix="/api/users", tags=["users"])

    return app


app = create_application()
