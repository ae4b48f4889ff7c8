"""Motor client construction from environment configuration."""

from typing import Optional
import logging

from motor.motor_asyncio import AsyncIOMotorClient

from infrastructure.config import get_mongodb_uri

logger = logging.getLogger(__name__)


def create_mongo_client(uri: Optional[str] = None) -> AsyncIOMotorClient:
    """
    Build a Motor client.

    Raises:
        ValueError: If no URI is given and MONGODB_URI is not configured
    """
    uri = uri or get_mongodb_uri()
    if not uri:
        raise ValueError(
            "MONGODB_URI not configured. "
            "Set MONGODB_URI, MONGODB_USER, "
            "and MONGODB_PASSWORD environment variables."
        )
    client: AsyncIOMotorClient = AsyncIOMotorClient(uri, tz_aware=True)
    logger.info("MongoDB client created")
    return client
