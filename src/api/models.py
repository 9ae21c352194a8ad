"""Pydantic models for API request/response.

Request fields are optional at the schema level so that missing values reach
the auth service validation and produce its messages. JSON keys are camelCase.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from domain.model.user import User


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(BaseModel):
    """Uniform envelope returned by every endpoint."""
    error: bool = False
    errors: list[str] = Field(default_factory=list)
    data: Any = None
    message: str = ""
    status: int = 200


class RegisterRequest(CamelModel):
    """Request model for user registration."""
    email: Optional[str] = None
    password: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class LoginRequest(CamelModel):
    """Request model for user login."""
    email: Optional[str] = None
    password: Optional[str] = None


class ForgotPasswordRequest(CamelModel):
    email: Optional[str] = None


class ChangePasswordRequest(CamelModel):
    old_password: Optional[str] = None
    new_password: Optional[str] = None


class UserResponse(CamelModel):
    """Public projection of a user. Never carries the password hash."""
    id: str
    email: str
    first_name: str
    last_name: str
    username: str
    user_type: str
    role: str
    is_user: bool
    is_admin: bool
    is_merchant: bool
    is_super: bool
    is_guest: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            username=user.username,
            user_type=user.user_type,
            role=user.role,
            is_user=user.is_user,
            is_admin=user.is_admin,
            is_merchant=user.is_merchant,
            is_super=user.is_super,
            is_guest=user.is_guest,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


def to_user_projection(user: User) -> dict:
    """Serialize a user for the response envelope (camelCase, JSON-safe)."""
    return UserResponse.from_domain(user).model_dump(by_alias=True, mode="json")
