"""In-memory implementation of TokenRepository for testing."""

import uuid
from dataclasses import replace
from datetime import datetime, timezone

from domain.model.token import Token


class FakeTokenRepository:
    def __init__(self):
        self.store: dict[str, Token] = {}

    def create(
        self,
        user_id: str,
        token: str,
        purpose: str,
        expires_at: datetime | None = None,
    ) -> Token | None:
        now = datetime.now(timezone.utc)
        record = Token(
            id=uuid.uuid4().hex,
            user_id=user_id,
            token=token,
            purpose=purpose,
            expires_at=expires_at,
            created_at=now,
            updated_at=now,
        )
        self.store[record.id] = record
        return replace(record)

    def update(self, token: Token) -> bool:
        if token.id not in self.store:
            return False
        token.updated_at = datetime.now(timezone.utc)
        self.store[token.id] = replace(token)
        return True

    def find_by_user(self, user_id: str, purpose: str) -> Token | None:
        for record in self.store.values():
            if record.user_id == user_id and record.purpose == purpose:
                return replace(record)
        return None

    def find_by_id(self, token_id: str) -> Token | None:
        record = self.store.get(token_id)
        return replace(record) if record else None

    # ── test helpers ─────────────────────────────────────────

    def all_for(self, user_id: str, purpose: str | None = None) -> list[Token]:
        return [
            t for t in self.store.values()
            if t.user_id == user_id and (purpose is None or t.purpose == purpose)
        ]
