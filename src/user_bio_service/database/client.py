"""MongoDB client lifecycle."""

from typing import Any, Optional

from pymongo import ASCENDING, DESCENDING, AsyncMongoClient

from user_bio_service.config import Settings
from user_bio_service.exceptions import DatabaseUnavailableException
from user_bio_service.telemetry import get_logger
from user_bio_service.telemetry.logger import PIIRedactor

from .models import ROLES_COLLECTION, USERS_COLLECTION

logger = get_logger(__name__)

_client: Optional[AsyncMongoClient] = None
_database: Optional[Any] = None


async def ensure_indexes(db) -> None:
    """Create the indexes both collections rely on."""
    users = db[USERS_COLLECTION]
    await users.create_index([("email", ASCENDING)], unique=True)
    await users.create_index([("status", ASCENDING)])
    await users.create_index([("createdAt", DESCENDING)])

    roles = db[ROLES_COLLECTION]
    await roles.create_index([("name", ASCENDING)], unique=True)
    await roles.create_index([("isActive", ASCENDING)])


async def init_db(settings: Settings) -> Any:
    """Connect to MongoDB and return the application database."""
    global _client, _database

    if not settings.mongodb_uri:
        raise ValueError("MONGODB_URI environment variable is not defined")

    logger.info(
        "Attempting to connect to MongoDB",
        uri=PIIRedactor.MONGO_CREDENTIALS_PATTERN.sub("//***:***@", settings.mongodb_uri),
    )

    client = AsyncMongoClient(
        settings.mongodb_uri,
        maxPoolSize=settings.mongodb_max_pool_size,
        serverSelectionTimeoutMS=settings.mongodb_server_selection_timeout_ms,
        socketTimeoutMS=45000,
        retryWrites=True,
        w="majority",
        tz_aware=True,
    )
    try:
        await client.admin.command("ping")
        database = client[settings.mongodb_database]
        await ensure_indexes(database)
    except Exception:
        await client.close()
        raise

    _client = client
    _database = database
    logger.info("MongoDB connected", database=settings.mongodb_database)
    return database


async def close_db() -> None:
    """Close the MongoDB client."""
    global _client, _database
    if _client is not None:
        await _client.close()
        logger.info("MongoDB connection closed")
    _client = None
    _database = None


def is_connected() -> bool:
    return _database is not None


def get_database() -> Any:
    """Return the initialised database or fail the request with 503."""
    if _database is None:
        raise DatabaseUnavailableException()
    return _database
