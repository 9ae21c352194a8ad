"""Bearer token authentication dependency."""

import logging
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from services.token_service import verify_auth_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Return the user id carried by a valid bearer token. Raises 401 otherwise.

    Whether that user still exists is left to the service handling the request.
    """
    if not credentials:
        raise _unauthorized("Not authenticated")

    user_id = verify_auth_token(credentials.credentials)
    if not user_id:
        logger.debug("Rejected bearer token")
        raise _unauthorized("Invalid authentication credentials")

    return user_id
