"""In-memory implementation of UserRepository for testing."""

import uuid
from dataclasses import replace
from datetime import datetime, timezone
from domain.model.user import User


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}
        self.lookups = 0

    # ── write operations ─────────────────────────────────────

    def create(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        username: str,
        user_type: str,
    ) -> User | None:
        if any(u.email == email for u in self.store.values()):
            return None

        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)

        user = User(
            id=user_id,
            email=email,
            first_name=first_name,
            last_name=last_name,
            username=username,
            created_at=now,
            updated_at=now,
            password_hash=password_hash,
            user_type=user_type,
            role=user_type,
        )
        self.store[user_id] = user
        return replace(user)

    def update(self, user: User) -> bool:
        if user.id not in self.store:
            return False

        user.updated_at = datetime.now(timezone.utc)
        self.store[user.id] = replace(user)
        return True

    # ── read operations ──────────────────────────────────────

    def find_by_email(self, email: str) -> User | None:
        self.lookups += 1
        for user in self.store.values():
            if user.email == email:
                return replace(user)
        return None

    def find_by_id(self, user_id: str) -> User | None:
        self.lookups += 1
        user = self.store.get(user_id)
        return replace(user) if user else None
