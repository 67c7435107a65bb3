"""MongoDB Client - Explicitly constructed connection context"""
from typing import Any, Dict, Optional
from pymongo import MongoClient as PyMongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from pymongo.errors import ConnectionFailure, PyMongoError

from ..config.settings import Settings
from ..utils.logger import get_logger

logger = get_logger(__name__)


class MongoContext:
    """
    Owns the synchronous MongoDB client for one application instance.
    
    Created in the application lifespan and handed to every repository
    that needs store access.
    """
    
    def __init__(self, settings: Settings, client: Optional[PyMongoClient] = None):
        self.settings = settings
        if client is None:
            logger.info(f"Connecting to MongoDB: {settings.mongo_uri}")
            client = PyMongoClient(
                settings.mongo_uri,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=5000,
                socketTimeoutMS=30000,
                tz_aware=True,
            )
        self.client = client
        self.db: Database = client[settings.mongo_db]
    
    def get_collection(self, name: str) -> Collection:
        """Get a collection from the database"""
        return self.db[name]
    
    def ping(self) -> None:
        """Verify connectivity; raises ConnectionFailure"""
        try:
            self.client.admin.command("ping")
            logger.info("MongoDB connection successful")
        except ConnectionFailure as e:
            logger.error(f"MongoDB connection failed: {e}")
            raise
    
    def create_indexes(self) -> None:
        """Create all required indexes"""
        logger.info("Creating MongoDB indexes...")
        
        requests = self.db[self.settings.requests_collection]
        requests.create_index("id")
        requests.create_index([("targetProvider", 1), ("status", 1)])
        requests.create_index([("sourceProvider", 1), ("status", 1)])
        requests.create_index("submittedAt", background=True)
        
        logger.info("MongoDB indexes created successfully")
    
    def health_check(self) -> Dict[str, Any]:
        """Check MongoDB health"""
        try:
            self.client.admin.command("ping")
            return {
                "status": "healthy",
                "database": self.settings.mongo_db,
                "connection": "ok"
            }
        except PyMongoError as e:
            logger.error(f"MongoDB health check failed: {e}")
            return {
                "status": "unhealthy",
                "database": self.settings.mongo_db,
                "error": str(e)
            }
    
    def close(self) -> None:
        """Close MongoDB connection"""
        self.client.close()
        logger.info("MongoDB connection closed")
