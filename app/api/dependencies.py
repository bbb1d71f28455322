from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.errors import NOT_AUTHENTICATED_MESSAGE, UnauthorizedError
from app.core.security import TokenClaims, TokenService
from app.services.auth_service import AuthService
from app.services.user_store import UserStore

# Bearer scheme - extracts token from "Authorization: Bearer <token>"
# auto_error=False so a missing header gets the same 401 body as a bad token
bearer_scheme = HTTPBearer(auto_error=False)


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


async def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """
    Authenticated identity for protected routes.

    HTTPBearer yields None when the header is absent, uses another scheme or
    has no token after "Bearer"; those fail here without touching the token
    validator. A token that fails validation raises InvalidTokenError or
    ExpiredTokenError, so the route handler never runs.
    """
    if credentials is None or not credentials.credentials.strip():
        raise UnauthorizedError(NOT_AUTHENTICATED_MESSAGE)

    return tokens.validate(credentials.credentials)
