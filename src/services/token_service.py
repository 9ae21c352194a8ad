"""Token service: signing and verifying time-boxed JWTs.

Login tokens carry the user id in `sub`; password reset tokens carry
`{userId, type: "forgotPassword"}` and are signed with their own secret.
"""

import logging
import os
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from domain.model.token import AUTH_TOKEN_TTL_SECONDS, RESET_TOKEN_TTL_SECONDS

logger = logging.getLogger(__name__)

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not JWT_SECRET_KEY:
    raise ValueError(
        "JWT_SECRET_KEY environment variable is required. "
        "Generate a secure key with: openssl rand -hex 32"
    )
TOKEN_SECRET = os.getenv("TOKEN_SECRET") or JWT_SECRET_KEY
JWT_ALGORITHM = "HS256"

FORGOT_PASSWORD_TYPE = "forgotPassword"


def generate_token(claims: dict, secret: str, expires_in: int) -> str | None:
    """Sign `claims` with an `exp` of `expires_in` seconds from now.

    Returns None if signing fails.
    """
    now = datetime.now(timezone.utc)
    payload = {
        **claims,
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
    }
    try:
        return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)
    except JWTError as e:
        logger.error("Token signing failed", extra={"error": str(e)})
        return None


def decode_token(token: str, secret: str) -> dict | None:
    """Verify signature and expiry. Return claims or None."""
    try:
        return jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.debug(f"JWT verification failed: {e}")
        return None


def create_auth_token(user_id: str) -> str | None:
    return generate_token({"sub": user_id}, JWT_SECRET_KEY, AUTH_TOKEN_TTL_SECONDS)


def create_reset_token(user_id: str) -> str | None:
    return generate_token(
        {"userId": user_id, "type": FORGOT_PASSWORD_TYPE},
        TOKEN_SECRET,
        RESET_TOKEN_TTL_SECONDS,
    )


def verify_auth_token(token: str) -> str | None:
    """Return the user id of a valid login token, else None."""
    claims = decode_token(token, JWT_SECRET_KEY)
    if not claims:
        return None
    return claims.get("sub")
