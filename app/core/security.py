import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from starlette.concurrency import run_in_threadpool

from app.core.errors import ExpiredTokenError, InvalidTokenError

logger = logging.getLogger(__name__)


class PasswordHasher:
    """
    Salted, deliberately slow password hashing backed by bcrypt.

    bcrypt embeds the salt and the work factor in the digest it returns, so
    verify() only needs the digest to recompute. Both calls run in a worker
    thread: a single hash at cost 10 takes tens of milliseconds, long enough
    to stall every other request on the event loop.
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    async def hash(self, plaintext: str) -> str:
        return await run_in_threadpool(self._context.hash, plaintext)

    async def verify(self, plaintext: str, digest: str) -> bool:
        # passlib compares in constant time
        try:
            return await run_in_threadpool(self._context.verify, plaintext, digest)
        except (ValueError, TypeError):
            # Digest is not a bcrypt hash
            return False

    async def dummy_verify(self) -> None:
        """Spend one verify's worth of time when there is no digest to check"""
        await run_in_threadpool(self._context.dummy_verify)


class TokenClaims(BaseModel):
    """Identity carried by a validated access token."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    user_id: int = Field(validation_alias="sub", serialization_alias="userId")
    email: str
    display_name: str = Field(validation_alias="name", serialization_alias="displayName")
    username: str
    issued_at: datetime = Field(validation_alias="iat", serialization_alias="issuedAt")
    expires_at: datetime = Field(validation_alias="exp", serialization_alias="expiresAt")


class TokenService:
    """Signs and verifies HS256 access tokens with a single shared secret."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60):
        if not secret_key:
            raise ValueError("A signing secret is required")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = timedelta(minutes=expire_minutes)

    def issue(self, claims: dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        """Create a signed token from claims plus iat/exp"""
        # Copy data to avoid mutating the caller's dict
        to_encode = claims.copy()
        # JWT 'sub' must be a string; TokenClaims turns it back into an int
        to_encode["sub"] = str(to_encode["sub"])

        now = datetime.now(timezone.utc)
        to_encode.update({"iat": now, "exp": now + (expires_delta or self.expires_delta)})

        return jwt.encode(to_encode, self._secret_key, algorithm=self.algorithm)

    def validate(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry and return the token's claims.

        Raises ExpiredTokenError once 'exp' has passed (no leeway) and
        InvalidTokenError for a bad signature, a malformed token, or a payload
        missing any identity claim.
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            logger.info("Rejected expired token")
            raise ExpiredTokenError()
        except JWTError as e:
            logger.info(f"Rejected invalid token: {e}")
            raise InvalidTokenError()

        try:
            return TokenClaims.model_validate(payload)
        except ValidationError:
            logger.info("Rejected token with incomplete claims")
            raise InvalidTokenError()
