import logging
from typing import Optional

from app.core.errors import (
    INACTIVE_USER_MESSAGE,
    INVALID_CREDENTIALS_MESSAGE,
    ConflictError,
    UnauthorizedError,
)
from app.core.security import PasswordHasher, TokenService
from app.models.auth import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    UserUpdate,
)
from app.models.user import User, UserRead, normalize_email
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)


class AuthService:
    """Registration, login and profile management on top of a UserStore"""

    def __init__(self, store: UserStore, hasher: PasswordHasher, tokens: TokenService):
        self.store = store
        self.hasher = hasher
        self.tokens = tokens

    async def register(self, data: RegisterRequest) -> RegisterResponse:
        """
        Register a new user.

        1. Normalize the email and reject it if already taken (before hashing,
           so a duplicate costs nothing)
        2. Hash the password
        3. Store the user with the hash in place of the plaintext
        4. Return the sanitized user
        """
        email = normalize_email(data.email)
        self._ensure_email_free(email)

        password_hash = await self.hasher.hash(data.password)
        # Another request may have taken the email while hashing; check again
        # with no await between the check and the create
        self._ensure_email_free(email)
        user = self.store.create(
            first_name=data.first_name,
            last_name=data.last_name,
            username=data.username,
            email=email,
            password_hash=password_hash,
        )
        logger.info(f"Registered user {user.id} ({user.email})")

        return RegisterResponse(message="User registered successfully", user=user)

    async def login(self, data: LoginRequest) -> LoginResponse:
        """
        Check credentials and issue an access token.

        Unknown email and wrong password fail with the same message. The
        inactive-account message is only given to a caller that has just
        proven the password.
        """
        user = self.store.find_by_email(data.email)
        if user is None:
            # Keep response time close to the wrong-password path
            await self.hasher.dummy_verify()
            logger.info("Login rejected: unknown email")
            raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)

        if not await self.hasher.verify(data.password, user.password_hash):
            logger.info(f"Login rejected for user {user.id}: wrong password")
            raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)

        if not user.is_active:
            logger.info(f"Login rejected for user {user.id}: inactive")
            raise UnauthorizedError(INACTIVE_USER_MESSAGE)

        access_token = self.tokens.issue(self.claims_for(user))
        logger.info(f"User {user.id} logged in")

        return LoginResponse(access_token=access_token, user=self.store.sanitize(user))

    def get_profile(self, user_id: int) -> UserRead:
        return self.store.find_by_id(user_id)

    async def update_profile(self, user_id: int, data: UserUpdate) -> UserRead:
        """Apply a partial update; a new email must be free and a new password is hashed"""
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "email" in changes:
            changes["email"] = normalize_email(changes["email"])
            self._ensure_email_free(changes["email"], user_id)

        if "password" in changes:
            changes["password_hash"] = await self.hasher.hash(changes.pop("password"))

        if "email" in changes:
            self._ensure_email_free(changes["email"], user_id)
        user = self.store.update(user_id, changes)
        logger.info(f"Updated user {user_id}: {', '.join(sorted(changes)) or 'no changes'}")
        return user

    def deactivate(self, user_id: int) -> MessageResponse:
        self.store.deactivate(user_id)
        logger.info(f"Deactivated user {user_id}")
        return MessageResponse(message=f"User {user_id} deactivated")

    def _ensure_email_free(self, email: str, user_id: Optional[int] = None) -> None:
        owner = self.store.find_by_email(email)
        if owner is not None and owner.id != user_id:
            logger.info("Rejected email already registered")
            raise ConflictError()

    @staticmethod
    def claims_for(user: User) -> dict:
        return {
            "sub": user.id,
            "email": user.email,
            "name": user.display_name,
            "username": user.username,
        }
