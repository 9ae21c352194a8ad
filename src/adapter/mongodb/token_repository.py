"""MongoDB implementation of TokenRepository."""

import uuid
from datetime import datetime, timezone
from logging import getLogger

from pymongo.database import Database
from pymongo.errors import PyMongoError

from adapter.mongodb import TOKENS_COLLECTION_NAME
from domain.model.token import Token

logger = getLogger(__name__)


class MongoTokenRepository:
    def __init__(self, db: Database):
        self.collection = db[TOKENS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for tokens collection.

        No TTL index: expired tokens stay until overwritten.
        """
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('user_id', 1), ('purpose', 1)], 'idx_tokens_user_purpose')
            create_index_safe(self.collection, [('token', 1)], 'idx_tokens_token')
            return True
        except PyMongoError as e:
            logger.error("Failed to create tokens indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> Token:
        return Token(
            id=doc['_id'],
            user_id=doc['user_id'],
            token=doc['token'],
            purpose=doc['purpose'],
            expires_at=doc.get('expires_at'),
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
        )

    def create(
        self,
        user_id: str,
        token: str,
        purpose: str,
        expires_at: datetime | None = None,
    ) -> Token | None:
        token_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        doc = {
            '_id': token_id,
            'user_id': user_id,
            'token': token,
            'purpose': purpose,
            'expires_at': expires_at,
            'created_at': now,
            'updated_at': now,
        }
        try:
            self.collection.insert_one(doc)
        except PyMongoError as e:
            logger.error("Failed to create token", extra={"userId": user_id, "purpose": purpose, "error": str(e)})
            return None

        logger.debug("Token created", extra={"userId": user_id, "purpose": purpose})
        return self._to_domain(doc)

    def update(self, token: Token) -> bool:
        now = datetime.now(timezone.utc)
        try:
            result = self.collection.update_one(
                {'_id': token.id},
                {'$set': {'token': token.token, 'expires_at': token.expires_at, 'updated_at': now}},
            )
        except PyMongoError as e:
            logger.error("Failed to update token", extra={"tokenId": token.id, "error": str(e)})
            return False

        if result.matched_count == 0:
            return False
        token.updated_at = now
        return True

    def find_by_user(self, user_id: str, purpose: str) -> Token | None:
        """Return the user's token for `purpose`, or None if there is none.

        Driver errors propagate so that a failed read is never mistaken for
        an absent token.
        """
        doc = self.collection.find_one({'user_id': user_id, 'purpose': purpose})
        return self._to_domain(doc) if doc else None

    def find_by_id(self, token_id: str) -> Token | None:
        doc = self.collection.find_one({'_id': token_id})
        return self._to_domain(doc) if doc else None
