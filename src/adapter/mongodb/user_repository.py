"""MongoDB implementation of UserRepository."""

import uuid
from datetime import datetime, timezone
from logging import getLogger
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from adapter.mongodb import USERS_COLLECTION_NAME
from domain.model.user import User, UserType

logger = getLogger(__name__)

# Fields written back by update(); id, email and created_at never change
_MUTABLE_FIELDS = (
    'password_hash', 'first_name', 'last_name', 'username', 'user_type', 'role',
    'is_user', 'is_admin', 'is_merchant', 'is_super', 'is_guest',
)


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('email', 1)], 'idx_users_email', unique=True)
            create_index_safe(self.collection, [('username', 1)], 'idx_users_username', unique=True)
            create_index_safe(self.collection, [('created_at', -1)], 'idx_users_created_at')
            return True
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            email=doc['email'],
            first_name=doc.get('first_name', ''),
            last_name=doc.get('last_name', ''),
            username=doc.get('username', ''),
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            password_hash=doc.get('password_hash'),
            user_type=doc.get('user_type', UserType.USER),
            role=doc.get('role', UserType.USER),
            is_user=doc.get('is_user', True),
            is_admin=doc.get('is_admin', False),
            is_merchant=doc.get('is_merchant', False),
            is_super=doc.get('is_super', False),
            is_guest=doc.get('is_guest', False),
        )

    def create(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        username: str,
        user_type: str,
    ) -> User | None:
        """Create a new user and return the User object."""
        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        user_doc = {
            '_id': user_id,
            'email': email,
            'password_hash': password_hash,
            'first_name': first_name,
            'last_name': last_name,
            'username': username,
            'user_type': user_type,
            'role': user_type,
            'is_user': user_type == UserType.USER,
            'is_admin': user_type == UserType.ADMIN,
            'is_merchant': user_type == UserType.MERCHANT,
            'is_super': user_type == UserType.SUPER,
            'is_guest': user_type == UserType.GUEST,
            'created_at': now,
            'updated_at': now,
        }
        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError:
            logger.warning("User creation failed: email already exists", extra={"email": email})
            return None
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"email": email, "error": str(e)})
            return None

        logger.info("User created", extra={"userId": user_id, "email": email})
        return self._to_domain(user_doc)

    def update(self, user: User) -> bool:
        """Persist mutable fields of an existing user. Return True if a document matched."""
        now = datetime.now(timezone.utc)
        fields = {name: getattr(user, name) for name in _MUTABLE_FIELDS}
        fields['updated_at'] = now
        try:
            result = self.collection.update_one({'_id': user.id}, {'$set': fields})
        except PyMongoError as e:
            logger.error("Failed to update user", extra={"userId": user.id, "error": str(e)})
            return False

        if result.matched_count == 0:
            return False
        user.updated_at = now
        return True

    def find_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found.

        Driver errors propagate; a failed read is not a missing user.
        """
        doc = self.collection.find_one({'email': email})
        return self._to_domain(doc) if doc else None

    def find_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        doc = self.collection.find_one({'_id': user_id})
        return self._to_domain(doc) if doc else None
