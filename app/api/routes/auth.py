from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_auth_service, get_current_claims
from app.core.security import TokenClaims
from app.models.auth import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Register a new user"""
    return await auth_service.register(data)


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Login with email + password and get an access token"""
    return await auth_service.login(data)


@router.get("/profile")
async def profile(claims: TokenClaims = Depends(get_current_claims)):
    """Identity carried by the caller's token"""
    return {
        "message": "Profile retrieved successfully",
        "user": claims.model_dump(mode="json", by_alias=True),
    }


@router.get("/protected")
async def protected_route(claims: TokenClaims = Depends(get_current_claims)):
    return {
        "message": f"Hello {claims.display_name}. This is a protected route.",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "userId": claims.user_id,
    }
