"""
# Database Management Module

MongoDB infrastructure for the Blog Platform, built on the **Motor** async driver.

## Responsibilities

- **Connection lifecycle**: `connect()` with exponential backoff, `disconnect()` on shutdown.
- **Health**: `health_check()` pings the server for the `/health` endpoint.
- **Collections**: `get_collection()` hands out Motor collections to the stores.
- **Indexes**: `create_indexes()` installs the unique indexes that back the consistency model.

## Unique Indexes

Sign-up does not pre-check for an existing email; it relies on the unique index on
`personal_info.email` and turns the duplicate-key error into a conflict. The same holds for
`personal_info.username` (username collisions under concurrent sign-up) and for `blog_id`.
These indexes must exist before the application accepts traffic.

## Usage

```python
manager = DatabaseManager()
await manager.connect()
await manager.create_indexes()

users = manager.get_collection(settings.USERS_COLLECTION)

await manager.disconnect()
```

Attributes:
    db_logger (Logger): Logger for database operations (`[DATABASE]`).
    perf_logger (Logger): Logger for timings (`[DB_PERFORMANCE]`).
    health_logger (Logger): Logger for health checks (`[DB_HEALTH]`).
"""

import asyncio
import time
from typing import Any, Dict, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from blog_platform.config import settings
from blog_platform.managers.logging_manager import get_logger

db_logger = get_logger(prefix="[DATABASE]")
perf_logger = get_logger(prefix="[DB_PERFORMANCE]")
health_logger = get_logger(prefix="[DB_HEALTH]")

MAX_POOL_SIZE: int = 50
MIN_POOL_SIZE: int = 5


class DatabaseManager:
    """
    Manages the MongoDB client, database handle and index setup.

    One instance is created per process in the application lifespan and shared by the stores.

    Attributes:
        client (`Optional[AsyncIOMotorClient]`): `None` until `connect()` succeeds.
        database (`Optional[AsyncIOMotorDatabase]`): `None` until `connect()` succeeds.
    """

    def __init__(self):
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None
        self._connection_retries = 3

    def _connection_string(self) -> str:
        if settings.MONGODB_USERNAME and settings.MONGODB_PASSWORD:
            password = settings.MONGODB_PASSWORD.get_secret_value()
            db_logger.debug("Using authenticated connection to MongoDB")
            return (
                f"mongodb://{settings.MONGODB_USERNAME}:{password}@"
                f"{settings.MONGODB_URL.replace('mongodb://', '')}"
            )
        db_logger.debug("Using unauthenticated connection to MongoDB")
        return settings.MONGODB_URL

    async def connect(self):
        """
        Establish connection to MongoDB with exponential backoff retry logic.

        Up to three attempts are made, waiting 1s then 2s between them. The connection is
        verified with a `ping` before returning.

        Raises:
            `ServerSelectionTimeoutError`: If MongoDB is unreachable after all attempts.
            `ConnectionFailure`: If authentication fails or the connection is refused.
        """
        start_time = time.time()
        db_logger.info("Starting MongoDB connection process")

        for attempt in range(self._connection_retries):
            attempt_start = time.time()
            try:
                db_logger.info("Connection attempt %d/%d to MongoDB", attempt + 1, self._connection_retries)
                db_logger.info(
                    "MongoDB connection config - Database: %s, MaxPool: %d, MinPool: %d, ServerTimeout: %dms, ConnTimeout: %dms",
                    settings.MONGODB_DATABASE,
                    MAX_POOL_SIZE,
                    MIN_POOL_SIZE,
                    settings.MONGODB_SERVER_SELECTION_TIMEOUT,
                    settings.MONGODB_CONNECTION_TIMEOUT,
                )

                self.client = AsyncIOMotorClient(
                    self._connection_string(),
                    serverSelectionTimeoutMS=settings.MONGODB_SERVER_SELECTION_TIMEOUT,
                    connectTimeoutMS=settings.MONGODB_CONNECTION_TIMEOUT,
                    maxPoolSize=MAX_POOL_SIZE,
                    minPoolSize=MIN_POOL_SIZE,
                )
                self.database = self.client[settings.MONGODB_DATABASE]

                ping_start = time.time()
                await self.client.admin.command("ping")
                ping_duration = time.time() - ping_start

                total_duration = time.time() - start_time
                perf_logger.info(
                    "MongoDB connection established successfully in %.3fs (ping: %.3fs)", total_duration, ping_duration
                )
                db_logger.info("Successfully connected to MongoDB database: %s", settings.MONGODB_DATABASE)
                return

            except (ServerSelectionTimeoutError, ConnectionFailure) as e:
                attempt_duration = time.time() - attempt_start
                perf_logger.warning("Connection attempt %d failed after %.3fs", attempt + 1, attempt_duration)
                db_logger.warning(
                    "Failed to connect to MongoDB (attempt %d/%d): %s", attempt + 1, self._connection_retries, e
                )
                if attempt == self._connection_retries - 1:
                    db_logger.error("All connection attempts failed after %.3fs", time.time() - start_time)
                    raise

                backoff_time = 2**attempt
                db_logger.info("Waiting %.1fs before retry (exponential backoff)", backoff_time)
                await asyncio.sleep(backoff_time)

    async def disconnect(self):
        """Close the Motor client and release pooled connections."""
        if self.client:
            start_time = time.time()
            self.client.close()
            self.client = None
            self.database = None
            perf_logger.info("MongoDB disconnection completed in %.3fs", time.time() - start_time)
            db_logger.info("Disconnected from MongoDB")
        else:
            db_logger.warning("Disconnect called but no active MongoDB connection found")

    async def health_check(self) -> bool:
        """
        Ping MongoDB. Returns `False` instead of raising when the server is unreachable.

        Returns:
            `bool`: `True` if database is reachable and responding, `False` otherwise.
        """
        if self.client is None:
            health_logger.warning("Health check failed: No database client available")
            return False

        start_time = time.time()
        try:
            await self.client.admin.command("ping")
            perf_logger.debug("Database health check completed in %.3fs", time.time() - start_time)
            return True
        except (ServerSelectionTimeoutError, ConnectionFailure) as e:
            health_logger.error("Database health check failed: %s", e)
            return False
        except (ConnectionError, TimeoutError) as e:
            health_logger.error("Connection error during health check: %s", e)
            return False

    def get_collection(self, collection_name: str) -> AsyncIOMotorCollection:
        """
        Retrieve a MongoDB collection by name from the connected database.

        Raises:
            `ConnectionError`: If `connect()` has not been called.
        """
        if self.database is None:
            db_logger.error("Attempted to get collection '%s' without database connection", collection_name)
            raise ConnectionError("Database not connected. Call connect() first.")

        return self.database[collection_name]

    async def create_indexes(self):
        """Create the unique and query indexes for `users` and `blogs`."""
        start_time = time.time()
        db_logger.info("Starting database index creation process")

        users = self.get_collection(settings.USERS_COLLECTION)
        await self._create_index(users, "personal_info.email", {"unique": True})
        await self._create_index(users, "personal_info.username", {"unique": True})

        blogs = self.get_collection(settings.BLOGS_COLLECTION)
        await self._create_index(blogs, "blog_id", {"unique": True})
        await self._create_index(blogs, [("draft", ASCENDING), ("publishedAt", DESCENDING)], {})
        await self._create_index(
            blogs,
            [
                ("draft", ASCENDING),
                ("activity.total_reads", DESCENDING),
                ("activity.total_likes", DESCENDING),
                ("publishedAt", DESCENDING),
            ],
            {},
        )
        await self._create_index(blogs, "tags", {})
        await self._create_index(blogs, "author", {})

        perf_logger.info("Database index creation completed successfully in %.3fs", time.time() - start_time)

    async def _create_index(self, collection: AsyncIOMotorCollection, field_spec: Any, options: Dict[str, Any]):
        """Create an index; failures on unique indexes are fatal, others are logged."""
        try:
            await collection.create_index(field_spec, **options)
            db_logger.debug("Successfully created/ensured index: %s", field_spec)
        except Exception as e:
            if options.get("unique"):
                db_logger.error("Could not create unique index '%s': %s", field_spec, e)
                raise
            db_logger.warning("Could not create/ensure index '%s': %s", field_spec, e)
