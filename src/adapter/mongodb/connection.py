"""Shared MongoDB client for the users and tokens collections.

The client is created lazily and cached. A cached client that stops
answering `ping` is dropped and rebuilt on the next call. A missing
MONGO_URL or a first connection that fails is treated as configuration
and not retried for the life of the process.
"""

import os
import logging
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

logging.getLogger('pymongo').setLevel(logging.WARNING)

MONGO_URL = os.getenv('MONGO_URL')
DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'shopery')
USERS_COLLECTION_NAME = 'users'
TOKENS_COLLECTION_NAME = 'tokens'

CLIENT_OPTIONS = {
    'serverSelectionTimeoutMS': 5000,
    'connectTimeoutMS': 5000,
    'socketTimeoutMS': 30000,
    'maxPoolSize': 10,
    'maxIdleTimeMS': 30000,
    'waitQueueTimeoutMS': 10000,
    # Login token find-then-write is not idempotent under driver retries
    'retryWrites': False,
    'retryReads': False,
}

_client: MongoClient | None = None
_unavailable = False


def _is_alive(client: MongoClient) -> bool:
    try:
        client.admin.command('ping')
        return True
    except PyMongoError as e:
        logger.debug("MongoDB ping failed", extra={"error": str(e)[:200]})
        return False


def get_mongodb_client() -> MongoClient | None:
    """Return the cached client, reconnecting if it went stale. None if unavailable."""
    global _client, _unavailable

    if _client is not None:
        if _is_alive(_client):
            return _client
        _client.close()
        _client = None
        logger.warning("MongoDB client lost, reconnecting")
        client = MongoClient(MONGO_URL, **CLIENT_OPTIONS)
        if _is_alive(client):
            _client = client
        else:
            client.close()
        return _client

    if _unavailable:
        return None

    if not MONGO_URL:
        logger.error("MONGO_URL not configured")
        _unavailable = True
        return None

    try:
        client = MongoClient(MONGO_URL, **CLIENT_OPTIONS)
        client.admin.command('ping')
    except PyMongoError as e:
        logger.error("MongoDB initial connection failed", extra={"error": str(e)[:200]})
        _unavailable = True
        return None

    logger.info("MongoDB connected", extra={"database": DATABASE_NAME})
    _client = client
    return client


def get_database() -> Database | None:
    client = get_mongodb_client()
    return client[DATABASE_NAME] if client is not None else None
