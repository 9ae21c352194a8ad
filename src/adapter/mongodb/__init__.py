from adapter.mongodb.connection import (
    DATABASE_NAME,
    TOKENS_COLLECTION_NAME,
    USERS_COLLECTION_NAME,
    get_database,
    get_mongodb_client,
)

__all__ = [
    'DATABASE_NAME',
    'TOKENS_COLLECTION_NAME',
    'USERS_COLLECTION_NAME',
    'get_database',
    'get_mongodb_client',
]
