"""Auth service: registration, login and password lifecycle.

Pure business logic with no HTTP dependencies. Every operation returns a
ServiceResult; route handlers map failures to HTTP status codes once.

Repositories and the email sender are passed in explicitly. The login
token find-or-overwrite sequence is not transactional, so two concurrent
logins for the same user can race.
"""

import logging
import os
import re
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from email_validator import EmailNotValidError, validate_email

from domain.model.errors import ErrorKind, ServiceResult
from domain.model.token import (
    AUTH_TOKEN_TTL_SECONDS,
    RESET_TOKEN_TTL_SECONDS,
    LoginGrant,
    TokenPurpose,
)
from domain.model.user import (
    MAX_PASSWORD_BYTES,
    User,
    UserType,
    generate_username,
    hash_password,
    password_fits,
)
from port.email_sender import EmailSender
from port.token_repository import TokenRepository
from port.user_repository import UserRepository
from services.token_service import create_auth_token, create_reset_token

logger = logging.getLogger(__name__)

CLIENT_URL = os.getenv("CLIENT_URL", "http://localhost:3000")

MIN_PASSWORD_LENGTH = 8

USER_EXISTS = "User already exists, use another email"
EMAIL_PASSWORD_REQUIRED = "Email and password are required"
INVALID_CREDENTIALS = "Invalid email or password"
INVALID_EMAIL = "Invalid email format."
USER_NOT_FOUND = "User not found"
UNKNOWN_EMAIL = "User with this email does not exist"
OLD_PASSWORD_INCORRECT = "Old password is incorrect"
TOKEN_GENERATION_FAILED = "Token generation failed"
PASSWORD_TOO_LONG = f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
PASSWORD_POLICY = (
    "password must contain, 1 uppercase letter, one special character, "
    "one number and must be greater than 8 characters"
)

TokenIssuer = Callable[[str], str | None]


# ── Validation ───────────────────────────────────────────────


def normalize_email(email: str | None) -> str | None:
    return email.strip().lower() if email else email


def is_valid_email(email: str | None) -> bool:
    if not email:
        return False
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def check_password(password: str | None) -> bool:
    """Acceptance policy for new passwords.

    Longer than 8 characters, with an uppercase letter, a digit and a
    special (non-alphanumeric) character, and no longer than bcrypt accepts.
    """
    if not password or len(password) <= MIN_PASSWORD_LENGTH or not password_fits(password):
        return False
    return bool(
        re.search(r"[A-Z]", password)
        and re.search(r"[0-9]", password)
        and re.search(r"[^A-Za-z0-9\s]", password)
    )


def validate_register(
    email: str | None,
    password: str | None,
    first_name: str | None,
    last_name: str | None,
) -> ServiceResult[None]:
    """Reject missing or malformed registration fields."""
    fields = {
        "email": email,
        "password": password,
        "firstName": first_name,
        "lastName": last_name,
    }
    missing = [name for name, value in fields.items() if not value or not value.strip()]
    if missing:
        return ServiceResult.fail(
            ErrorKind.VALIDATION, f"Missing required fields: {', '.join(missing)}"
        )
    if not is_valid_email(email):
        return ServiceResult.fail(ErrorKind.VALIDATION, INVALID_EMAIL)
    if not password_fits(password):
        return ServiceResult.fail(ErrorKind.VALIDATION, PASSWORD_TOO_LONG)
    return ServiceResult.ok()


def validate_login(
    repo: UserRepository,
    email: str | None,
    password: str | None,
    issue_token: TokenIssuer | None = None,
) -> ServiceResult[LoginGrant]:
    """Check credentials and issue a fresh login token.

    The store is not queried unless both email and password are present.
    Unknown emails and wrong passwords fail with the same message.
    """
    if not email or not password:
        return ServiceResult.fail(ErrorKind.VALIDATION, EMAIL_PASSWORD_REQUIRED)
    if not password_fits(password):
        return ServiceResult.fail(ErrorKind.VALIDATION, PASSWORD_TOO_LONG)

    user = repo.find_by_email(normalize_email(email))
    if not user or not user.match_password(password):
        return ServiceResult.fail(ErrorKind.AUTHENTICATION, INVALID_CREDENTIALS)

    issue_token = issue_token or create_auth_token
    return ServiceResult.ok(LoginGrant(user_id=user.id, token=issue_token(user.id), user=user))


# ── Operations ───────────────────────────────────────────────


def register(
    repo: UserRepository,
    email: str | None,
    password: str | None,
    first_name: str | None,
    last_name: str | None,
) -> ServiceResult[User]:
    """Create a user account with a generated username and the `user` role."""
    email = normalize_email(email)
    validation = validate_register(email, password, first_name, last_name)
    if validation.error:
        return validation

    if repo.find_by_email(email):
        return ServiceResult.fail(ErrorKind.CONFLICT, USER_EXISTS)

    user = repo.create(
        email=email,
        password_hash=hash_password(password),
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        username=generate_username(),
        user_type=UserType.USER,
    )
    if not user:
        return ServiceResult.fail(ErrorKind.INTERNAL, "Failed to create user")

    logger.info("User registered", extra={"userId": user.id, "email": email})
    return ServiceResult.ok(user)


def login(
    user_repo: UserRepository,
    token_repo: TokenRepository,
    email: str | None,
    password: str | None,
    issue_token: TokenIssuer | None = None,
) -> ServiceResult[LoginGrant]:
    """Authenticate and persist the login token.

    A user holds at most one auth token record: an existing record is
    overwritten in place, otherwise one is created with a one hour expiry.
    """
    validation = validate_login(user_repo, email, password, issue_token)
    if validation.error:
        return validation

    grant = validation.data
    if not grant.token:
        logger.error("Login token generation failed", extra={"userId": grant.user_id})
        return ServiceResult.fail(ErrorKind.INTERNAL, TOKEN_GENERATION_FAILED)

    expires_at = datetime.now(timezone.utc) + timedelta(seconds=AUTH_TOKEN_TTL_SECONDS)
    existing = token_repo.find_by_user(grant.user_id, TokenPurpose.AUTH)
    if existing:
        existing.token = grant.token
        existing.expires_at = expires_at
        persisted = token_repo.update(existing)
    else:
        persisted = token_repo.create(
            user_id=grant.user_id,
            token=grant.token,
            purpose=TokenPurpose.AUTH,
            expires_at=expires_at,
        ) is not None
    if not persisted:
        return ServiceResult.fail(ErrorKind.INTERNAL, "Failed to persist token")

    user = user_repo.find_by_id(grant.user_id)
    if not user:
        return ServiceResult.fail(ErrorKind.NOT_FOUND, USER_NOT_FOUND)

    logger.info("User logged in", extra={"userId": user.id, "email": user.email})
    return ServiceResult.ok(LoginGrant(user_id=user.id, token=grant.token, user=user))


def build_reset_url(client_url: str, token: str, user_id: str) -> str:
    return f"{client_url.rstrip('/')}/forgot-password?token={token}&id={user_id}"


async def forgot_password(
    user_repo: UserRepository,
    token_repo: TokenRepository,
    email_sender: EmailSender,
    email: str | None,
    client_url: str = CLIENT_URL,
    issue_reset_token: TokenIssuer | None = None,
) -> ServiceResult[dict]:
    """Persist a reset token and email the reset link.

    The token record is kept even when the email cannot be sent; the
    sender's code and message are returned unchanged in that case.
    """
    if not is_valid_email(email):
        return ServiceResult.fail(ErrorKind.VALIDATION, INVALID_EMAIL)

    user = user_repo.find_by_email(normalize_email(email))
    if not user:
        return ServiceResult.fail(ErrorKind.NOT_FOUND, UNKNOWN_EMAIL)

    issue_reset_token = issue_reset_token or create_reset_token
    reset_token = issue_reset_token(user.id)
    if not reset_token:
        return ServiceResult.fail(ErrorKind.INTERNAL, TOKEN_GENERATION_FAILED)

    record = token_repo.create(
        user_id=user.id,
        token=reset_token,
        purpose=TokenPurpose.FORGOT_PASSWORD,
        expires_at=datetime.now(timezone.utc) + timedelta(seconds=RESET_TOKEN_TTL_SECONDS),
    )
    if record is None:
        return ServiceResult.fail(ErrorKind.INTERNAL, "Failed to persist token")

    reset_url = build_reset_url(client_url, reset_token, user.id)
    sent = await email_sender.send_password_reset_email(user.email, reset_url)
    if sent.error:
        logger.warning(
            "Password reset email failed",
            extra={"userId": user.id, "code": sent.code, "error": sent.message},
        )
        return ServiceResult.fail(ErrorKind.INTERNAL, sent.message, status=sent.code)

    logger.info("Password reset requested", extra={"userId": user.id})
    return ServiceResult.ok({})


def change_password(
    repo: UserRepository,
    user_id: str,
    old_password: str | None,
    new_password: str | None,
) -> ServiceResult[None]:
    """Replace the password of an authenticated user.

    Storage is only written after both the old password and the policy check pass.
    """
    user = repo.find_by_id(user_id)
    if not user:
        return ServiceResult.fail(ErrorKind.NOT_FOUND, USER_NOT_FOUND)

    if not user.match_password(old_password):
        return ServiceResult.fail(ErrorKind.AUTHENTICATION, OLD_PASSWORD_INCORRECT)

    if new_password and not password_fits(new_password):
        return ServiceResult.fail(ErrorKind.VALIDATION, PASSWORD_TOO_LONG)

    if not check_password(new_password):
        return ServiceResult.fail(ErrorKind.VALIDATION, PASSWORD_POLICY)

    user.set_password(new_password)
    if not repo.update(user):
        return ServiceResult.fail(ErrorKind.INTERNAL, "Failed to update password")

    logger.info("Password changed", extra={"userId": user.id})
    return ServiceResult.ok()
