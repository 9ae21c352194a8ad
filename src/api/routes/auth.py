"""Authentication routes.

Endpoints:
- POST /auth/register: Create an account
- POST /auth/login: Check credentials and issue a login token
- POST /auth/logout: Acknowledge logout (stateless, nothing is revoked)
- POST /auth/forgot-password: Email a password reset link
- POST /auth/change-password: Replace the password of the signed-in user
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_email_sender, get_token_repo, get_user_repo
from api.errors import envelope, raise_for_result
from api.models import (
    ApiResponse,
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    to_user_projection,
)
from api.security import get_current_user_id
from port.email_sender import EmailSender
from port.token_repository import TokenRepository
from port.user_repository import UserRepository
from services import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=ApiResponse)
async def register(request: RegisterRequest, repo: UserRepository = Depends(get_user_repo)):
    """Register a new user.

    Returns the created user without its password. 403 if the email is
    taken, 400 on missing or malformed fields.
    """
    result = auth_service.register(
        repo,
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
    )
    raise_for_result(result)

    return envelope(to_user_projection(result.data), "User registered successfully.")


@router.post("/login", response_model=ApiResponse)
async def login(
    request: LoginRequest,
    user_repo: UserRepository = Depends(get_user_repo),
    token_repo: TokenRepository = Depends(get_token_repo),
):
    """Login user and return the user projection with `authToken`."""
    result = auth_service.login(user_repo, token_repo, email=request.email, password=request.password)
    raise_for_result(result)

    grant = result.data
    data = {**to_user_projection(grant.user), "authToken": grant.token}
    return envelope(data, "User login successful")


@router.post("/logout", response_model=ApiResponse)
async def logout():
    """Logout is client-side: the stored token is left untouched."""
    return envelope(None, "User logged out successfully.")


@router.post("/forgot-password", response_model=ApiResponse)
async def forgot_password(
    request: ForgotPasswordRequest,
    user_repo: UserRepository = Depends(get_user_repo),
    token_repo: TokenRepository = Depends(get_token_repo),
    email_sender: EmailSender = Depends(get_email_sender),
):
    result = await auth_service.forgot_password(user_repo, token_repo, email_sender, email=request.email)
    raise_for_result(result)

    return envelope({}, "Forgot Password link sent to your email")


@router.post("/change-password", response_model=ApiResponse)
async def change_password(
    request: ChangePasswordRequest,
    user_id: str = Depends(get_current_user_id),
    repo: UserRepository = Depends(get_user_repo),
):
    result = auth_service.change_password(
        repo,
        user_id=user_id,
        old_password=request.old_password,
        new_password=request.new_password,
    )
    raise_for_result(result)

    logger.info("Password change completed", extra={"userId": user_id})
    return envelope({}, "Password changed successfully")
