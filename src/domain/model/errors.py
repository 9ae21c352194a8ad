"""Domain-level error kinds and the service result type.

Services return a ServiceResult instead of raising for business rule
violations. Route handlers map the result to an HTTP status exactly once.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    AUTHENTICATION = "authentication"
    INTERNAL = "internal"


STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.CONFLICT: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.AUTHENTICATION: 400,
    ErrorKind.INTERNAL: 500,
}


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """Either data or an error kind with a human-readable message.

    `status` overrides the kind's default code when a collaborator reports
    its own (e.g. the email sender).
    """
    data: T | None = None
    kind: ErrorKind | None = None
    message: str = ""
    status: int | None = None

    @property
    def error(self) -> bool:
        return self.kind is not None

    @property
    def code(self) -> int | None:
        if self.kind is None:
            return None
        return self.status or STATUS_BY_KIND[self.kind]

    @classmethod
    def ok(cls, data: T | None = None) -> "ServiceResult[T]":
        return cls(data=data)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str, status: int | None = None) -> "ServiceResult[T]":
        return cls(kind=kind, message=message, status=status)
