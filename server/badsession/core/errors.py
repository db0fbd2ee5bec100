"""Error taxonomy shared by routers and services.

Every error is an ``HTTPException`` so FastAPI short-circuits the request;
``badsession.main`` renders them all as ``{"error": <message>}``.
"""
from __future__ import annotations

from fastapi import HTTPException, status


class APIError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, headers: dict[str, str] | None = None) -> None:
        super().__init__(status_code=self.status_code, detail=message or self.default_message, headers=headers)

    @property
    def message(self) -> str:
        return str(self.detail)


class ValidationError(APIError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request - invalid input"


class AuthenticationError(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class AuthorizationError(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden - insufficient permissions"


class NotFoundError(APIError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str = "Resource") -> None:
        super().__init__(f"{resource} not found")
        self.resource = resource


class ConflictError(APIError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict - resource already exists"


class DatabaseError(APIError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Database error occurred"
