"""
FOCUSFLOW Analytics API - Database Module

MongoDB connection management using Motor (async driver).
"""

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING

from focusflow.config import settings

logger = logging.getLogger(__name__)


# Unique natural keys per collection. Upserts rely on these to stay idempotent.
NATURAL_KEYS: dict[str, list[str]] = {
    "analytics_daily": ["owner_id", "date"],
    "analytics_weekly": ["owner_id", "week_start"],
    "analytics_mood": ["owner_id", "mood_name", "date"],
    "analytics_category": ["owner_id", "category", "date"],
    "analytics_coverage": ["owner_id", "family", "time_range"],
    "productivity_insights": ["owner_id", "time_range"],
}


class Database:
    """MongoDB database connection manager."""

    client: AsyncIOMotorClient | None = None
    db: AsyncIOMotorDatabase | None = None

    async def connect(self) -> None:
        """Connect to MongoDB."""
        self.client = AsyncIOMotorClient(settings.MONGODB_URI)
        self.db = self.client[settings.MONGODB_DATABASE]

    async def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self.client:
            self.client.close()
            self.client = None
            self.db = None

    async def ensure_indexes(self) -> None:
        """Create unique indexes for every natural key plus event lookups."""
        db = self.get_database()
        for collection, fields in NATURAL_KEYS.items():
            await db[collection].create_index(
                [(name, ASCENDING) for name in fields],
                unique=True,
            )
        await db["tasks"].create_index([("owner_id", ASCENDING), ("created_at", ASCENDING)])
        await db["moods"].create_index([("owner_id", ASCENDING), ("timestamp", ASCENDING)])
        logger.info("MongoDB indexes ensured")

    def get_database(self) -> AsyncIOMotorDatabase:
        """Get the database instance."""
        if self.db is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self.db


# Singleton database instance
database = Database()


async def get_database() -> AsyncIOMotorDatabase:
    """Dependency to get the database instance."""
    return database.get_database()
