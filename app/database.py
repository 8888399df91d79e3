"""
Database connection and Beanie ODM initialization.

Beanie is an async ODM for MongoDB built on Motor and Pydantic.
We initialize it once at startup and close the client at shutdown.
"""

import logging
from typing import List, Optional, Type

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from app.config import get_settings
from app.models.event import EventDocument
from app.models.user import UserDocument

logger = logging.getLogger(__name__)

_client: Optional[AsyncIOMotorClient] = None


async def connect_to_mongo() -> None:
    """
    Create Motor client and initialize Beanie with document models.
    Called once at application startup.
    """
    global _client
    settings = get_settings()
    _client = AsyncIOMotorClient(settings.mongodb_url, tz_aware=True)
    database = _client[settings.mongodb_database]

    # Document models that Beanie will manage (collections + indexes)
    document_models: List[Type] = [UserDocument, EventDocument]

    await init_beanie(
        database=database,
        document_models=document_models,
    )
    logger.info("MongoDB connection established; Beanie initialized.")


async def close_mongo_connection() -> None:
    """Close the Motor client on application shutdown."""
    global _client
    logger.info("Closing MongoDB connection.")
    if _client is not None:
        _client.close()
        _client = None
