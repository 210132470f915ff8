"""
MongoDB client lifecycle
Explicitly constructed store client handed to the session store
"""
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

logger = logging.getLogger(__name__)

SESSIONS_COLLECTION = "sessions"


class StoreError(Exception):
    """Base exception for session store failures"""
    pass


class StoreNotConnectedError(StoreError):
    """Raised when the store is used before connect() or after close()"""
    pass


class MongoDB:
    """Owns the motor client for the lifetime of the application"""

    def __init__(self, uri: str, database_name: str, timeout_ms: int = 5000):
        self.uri = uri
        self.database_name = database_name
        self.timeout_ms = timeout_ms
        self.client: Optional[AsyncIOMotorClient] = None

    @property
    def is_connected(self) -> bool:
        return self.client is not None

    async def connect(self) -> None:
        """Connect to MongoDB, test the connection and create indexes"""
        try:
            self.client = AsyncIOMotorClient(
                self.uri,
                tz_aware=True,
                serverSelectionTimeoutMS=self.timeout_ms
            )
            await self.client.admin.command("ping")
            await self.get_database()[SESSIONS_COLLECTION].create_index(
                "sessionId", unique=True
            )
            logger.info(f"✓ Connected to MongoDB at {self.uri} (db={self.database_name})")
        except Exception as e:
            logger.error(f"✗ Failed to connect to MongoDB: {e}")
            if self.client:
                self.client.close()
            self.client = None
            raise StoreError(f"Failed to connect to MongoDB: {e}") from e

    async def close(self) -> None:
        """Close MongoDB connection"""
        if self.client:
            self.client.close()
            self.client = None
            logger.info("✓ Closed MongoDB connection")

    async def ping(self) -> bool:
        """Return True when the server answers a ping"""
        if not self.client:
            return False
        try:
            await self.client.admin.command("ping")
            return True
        except Exception as e:
            logger.warning(f"⚠️ MongoDB ping failed: {e}")
            return False

    def get_database(self) -> AsyncIOMotorDatabase:
        """Get the database instance"""
        if not self.client:
            raise StoreNotConnectedError(
                "MongoDB not connected. Call connect() first."
            )
        return self.client[self.database_name]
