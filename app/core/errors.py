"""
HTTP-mapped error types raised by the auth workflow and the access guard.

Each error is an HTTPException subclass, so FastAPI renders it as
``{"detail": message}`` with the matching status code. Request body
validation failures come from FastAPI itself (RequestValidationError, 422)
and never reach the workflow.
"""

from fastapi import HTTPException, status

INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"
INACTIVE_USER_MESSAGE = "Inactive user"
EMAIL_TAKEN_MESSAGE = "Email already registered"
NOT_AUTHENTICATED_MESSAGE = "Not authenticated"
INVALID_TOKEN_MESSAGE = "Invalid token"
EXPIRED_TOKEN_MESSAGE = "Token expired"


class ConflictError(HTTPException):
    def __init__(self, detail: str = EMAIL_TAKEN_MESSAGE):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class UnauthorizedError(HTTPException):
    def __init__(self, detail: str = INVALID_CREDENTIALS_MESSAGE):
        # WWW-Authenticate tells clients which scheme to retry with
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidTokenError(UnauthorizedError):
    def __init__(self, detail: str = INVALID_TOKEN_MESSAGE):
        super().__init__(detail)


class ExpiredTokenError(UnauthorizedError):
    def __init__(self, detail: str = EXPIRED_TOKEN_MESSAGE):
        super().__init__(detail)


def user_not_found(user_id: int) -> NotFoundError:
    return NotFoundError(f"User with id {user_id} does not exist")
