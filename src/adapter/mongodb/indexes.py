"""MongoDB index management for the users and tokens collections.

Each MongoXxxRepository declares its indexes through `create_index_safe`;
`ensure_all_indexes` runs them once from the application lifespan hook.
"""

from logging import getLogger

from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

logger = getLogger(__name__)

_CONFLICT_MARKERS = ("already exists", "IndexOptionsConflict", "IndexKeySpecsConflict")


def create_index_safe(collection: Collection, keys: list, name: str, **kwargs) -> bool:
    """Create an index, replacing a stale one that clashes by name or key pattern."""
    try:
        collection.create_index(keys, name=name, **kwargs)
        return True
    except PyMongoError as e:
        if not any(marker in str(e) for marker in _CONFLICT_MARKERS):
            raise
        return _replace_conflicting(collection, keys, name, **kwargs)


def _replace_conflicting(collection: Collection, keys: list, name: str, **kwargs) -> bool:
    wanted = dict(keys)

    for existing_name, info in collection.index_information().items():
        if existing_name == '_id_':
            continue
        existing_keys = dict(info.get('key', []))
        if (existing_name == name) != (existing_keys == wanted):
            logger.warning("Dropping conflicting index", extra={"index": existing_name})
            collection.drop_index(existing_name)
            collection.create_index(keys, name=name, **kwargs)
            logger.info("Recreated index", extra={"index": name})
            return True

    logger.error("Failed to resolve index conflict", extra={"index": name})
    return False


def ensure_all_indexes(db: Database) -> bool:
    """Ensure indexes for all collections. Called at app startup."""
    from adapter.mongodb.token_repository import MongoTokenRepository
    from adapter.mongodb.user_repository import MongoUserRepository

    results = [
        MongoUserRepository(db).ensure_indexes(),
        MongoTokenRepository(db).ensure_indexes(),
    ]
    return all(results)
