from datetime import datetime
from typing import Protocol

from domain.model.token import Token


class TokenRepository(Protocol):
    """Protocol defining the interface for token data access."""

    def create(
        self,
        user_id: str,
        token: str,
        purpose: str,
        expires_at: datetime | None = None,
    ) -> Token | None:
        """Create a token record. Return Token or None on failure."""
        ...

    def find_by_user(self, user_id: str, purpose: str) -> Token | None:
        """Find the token a user holds for a purpose. Return Token or None; read errors propagate."""
        ...

    def find_by_id(self, token_id: str) -> Token | None:
        """Find a token by ID. Return Token or None if not found; read errors propagate."""
        ...

    def update(self, token: Token) -> bool:
        """Overwrite token value and expiry in place. Return True if successful."""
        ...
