from fastapi import APIRouter, Depends

from app.api.dependencies import get_auth_service, get_current_claims, get_user_store
from app.core.security import TokenClaims
from app.models.auth import MessageResponse, UserUpdate
from app.models.user import UserRead
from app.services.auth_service import AuthService
from app.services.user_store import UserStore

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/", response_model=list[UserRead])
async def list_users(
    _claims: TokenClaims = Depends(get_current_claims),
    store: UserStore = Depends(get_user_store),
):
    """List all users, deactivated ones included"""
    return store.find_all()


# /me routes are declared before /{user_id} so "me" is not parsed as an id
@router.get("/me", response_model=UserRead)
async def get_me(
    claims: TokenClaims = Depends(get_current_claims),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Stored profile of the authenticated user"""
    return auth_service.get_profile(claims.user_id)


@router.patch("/me", response_model=UserRead)
async def update_me(
    data: UserUpdate,
    claims: TokenClaims = Depends(get_current_claims),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Update the authenticated user's profile"""
    return await auth_service.update_profile(claims.user_id, data)


@router.delete("/me", response_model=MessageResponse)
async def deactivate_me(
    claims: TokenClaims = Depends(get_current_claims),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Deactivate (logically delete) the authenticated user"""
    return auth_service.deactivate(claims.user_id)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: int,
    _claims: TokenClaims = Depends(get_current_claims),
    store: UserStore = Depends(get_user_store),
):
    return store.find_by_id(user_id)
