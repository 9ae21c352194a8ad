"""Token domain models."""

from dataclasses import dataclass
from datetime import datetime

from domain.model.user import User


class TokenPurpose:
    AUTH = 'auth'
    FORGOT_PASSWORD = 'forgot_password'


# Login tokens live for one hour, reset tokens for fifteen minutes
AUTH_TOKEN_TTL_SECONDS = 3600
RESET_TOKEN_TTL_SECONDS = 900


@dataclass
class Token:
    """A persisted credential artifact owned by a user.

    Expiry is advisory: nothing purges expired records.
    """
    id: str
    user_id: str
    token: str
    purpose: str
    expires_at: datetime | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class LoginGrant:
    """Outcome of a successful credential check."""
    user_id: str
    token: str | None
    user: User | None = None
