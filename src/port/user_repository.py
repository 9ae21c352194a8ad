from typing import Protocol
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access."""
    def create(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        username: str,
        user_type: str,
    ) -> User | None:
        """Create a new user. Return User or None if creation failed."""
        ...

    def find_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found; read errors propagate."""
        ...

    def find_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found; read errors propagate."""
        ...

    def update(self, user: User) -> bool:
        """Persist mutable fields of an existing user. Return True if successful."""
        ...
