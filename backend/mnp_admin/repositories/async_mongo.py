"""Async MongoDB Client using Motor for the live request feed"""
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase

from ..config.settings import Settings
from ..utils.logger import get_logger

logger = get_logger(__name__)


class AsyncMongoContext:
    """Owns the Motor client used for change streams and snapshot queries"""
    
    def __init__(self, settings: Settings, client: Optional[AsyncIOMotorClient] = None):
        self.settings = settings
        if client is None:
            logger.info(f"Creating async MongoDB client for: {settings.mongo_uri}")
            client = AsyncIOMotorClient(
                settings.mongo_uri,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=5000,
                socketTimeoutMS=30000,
                tz_aware=True,
            )
        self.client = client
        self.db: AsyncIOMotorDatabase = client[settings.mongo_db]
    
    @property
    def requests(self) -> AsyncIOMotorCollection:
        """The portability request collection"""
        return self.db[self.settings.requests_collection]
    
    def close(self) -> None:
        """Close async MongoDB connection"""
        self.client.close()
        logger.info("Async MongoDB connection closed")
