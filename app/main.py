import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import auth, users
from app.core.config import Settings, get_settings
from app.core.logging import configure_logging
from app.core.security import PasswordHasher, TokenService
from app.services.auth_service import AuthService
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage app lifecycle events.

    The user store is in-memory, so its contents are gone after shutdown.
    """
    logger.info(f"{app.title} started")
    yield
    logger.info(f"{app.title} stopped with {len(app.state.user_store)} users in memory")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application and its collaborators.

    One UserStore, PasswordHasher, TokenService and AuthService are created
    per app and kept on app.state; route dependencies read them from there.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description="User registration, login and bearer-token access control",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )

    store = UserStore()
    hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
    tokens = TokenService(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )
    app.state.settings = settings
    app.state.user_store = store
    app.state.token_service = tokens
    app.state.auth_service = AuthService(store, hasher, tokens)

    # CORS middleware - allows frontend to make requests to backend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router)
    app.include_router(users.router)

    @app.get("/")
    async def root():
        """Root endpoint - API information"""
        return {"message": settings.APP_NAME, "version": settings.APP_VERSION}

    @app.get("/health")
    async def health():
        """Health check endpoint - used by monitoring/deployment tools"""
        return {"status": "healthy"}

    return app


app = create_app()
