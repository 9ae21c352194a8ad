import os
import secrets
import string
from dataclasses import dataclass
from datetime import datetime

import bcrypt

# Using 12 rounds (2^12 = 4096 iterations) for secure password hashing
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

USERNAME_LENGTH = 24
_USERNAME_ALPHABET = string.ascii_letters + string.digits

# bcrypt only reads the first 72 bytes and rejects longer input
MAX_PASSWORD_BYTES = 72


class UserType:
    USER = 'user'
    ADMIN = 'admin'
    MERCHANT = 'merchant'
    SUPER = 'super'
    GUEST = 'guest'


def password_fits(password: str) -> bool:
    return len(password.encode("utf-8")) <= MAX_PASSWORD_BYTES


def hash_password(password: str) -> str:
    if not password_fits(password):
        raise ValueError(f"password longer than {MAX_PASSWORD_BYTES} bytes")
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def generate_username(length: int = USERNAME_LENGTH) -> str:
    """Random alphanumeric handle assigned at registration."""
    return ''.join(secrets.choice(_USERNAME_ALPHABET) for _ in range(length))


@dataclass
class User:
    """Domain model representing a registered account."""
    id: str
    email: str
    first_name: str
    last_name: str
    username: str
    created_at: datetime
    updated_at: datetime
    password_hash: str | None = None
    user_type: str = UserType.USER
    role: str = UserType.USER
    is_user: bool = True
    is_admin: bool = False
    is_merchant: bool = False
    is_super: bool = False
    is_guest: bool = False

    def set_password(self, password: str) -> None:
        self.password_hash = hash_password(password)

    def match_password(self, password: str | None) -> bool:
        """One-way comparison of a plain password against the stored hash."""
        if not password or not self.password_hash or not password_fits(password):
            return False
        return bcrypt.checkpw(password.encode("utf-8"), self.password_hash.encode("utf-8"))
