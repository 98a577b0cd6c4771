"""
Database connection and collection setup
Builds the MongoDB client on first use and creates indexes

"""

import logging
from typing import Optional

from pymongo import DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from summarizer.config.settings import settings
from summarizer.core.errors import MisconfigurationError

logger = logging.getLogger(__name__)

_client: Optional[MongoClient] = None


def get_client() -> MongoClient:
    """
    Shared MongoDB client with connection pooling, created lazily.

    """
    global _client
    if _client is None:
        if not settings.MONGO_URI:
            raise MisconfigurationError('Server misconfiguration: MONGO_URI missing')
        _client = MongoClient(
            settings.MONGO_URI,
            serverSelectionTimeoutMS=settings.MONGO_SERVER_SELECTION_TIMEOUT_MS,
            maxPoolSize=settings.MONGO_MAX_POOL_SIZE,
            minPoolSize=settings.MONGO_MIN_POOL_SIZE,
            tz_aware=True,
        )
        logger.info('MongoDB client created for database %s', settings.DB_NAME)
    return _client


def get_database() -> Database:
    return get_client()[settings.DB_NAME]


def get_summaries_collection() -> Collection:
    return get_database()[settings.SUMMARIES_COLLECTION]


def ensure_indexes(collection: Collection) -> None:
    """
    Index Creation

    """
    try:
        collection.create_index([('fetchedAt', DESCENDING)])
        logger.info('Database indexes created successfully')
    except PyMongoError as e:
        logger.warning(f'Index creation warning: {e}')


def close_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None
