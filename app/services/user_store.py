import threading
from datetime import datetime, timezone
from typing import Any, Optional

from app.core.errors import user_not_found
from app.models.user import User, UserRead, normalize_email

# Fields update() is allowed to change; id and timestamps are owned by the store
UPDATABLE_FIELDS = ("first_name", "last_name", "username", "email", "password_hash")


class UserStore:
    """
    In-process user collection with sequential ids.

    Contents live only as long as the process. One instance is created at
    application startup and handed to whoever needs it. Mutations hold a
    lock so id assignment and field updates stay consistent if the store is
    reached from worker threads.
    """

    def __init__(self) -> None:
        self._users: list[User] = []
        self._next_id = 1
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._users)

    def create(
        self,
        *,
        first_name: str,
        last_name: str,
        username: str,
        email: str,
        password_hash: str,
    ) -> UserRead:
        """
        Store a new user and return its sanitized view.

        password_hash must already be hashed. Duplicate emails are not
        checked here; the caller does that before paying for the hash.
        """
        now = datetime.now(timezone.utc)
        with self._lock:
            user = User(
                id=self._next_id,
                first_name=first_name,
                last_name=last_name,
                username=username,
                email=normalize_email(email),
                password_hash=password_hash,
                created_at=now,
                updated_at=now,
                is_active=True,
            )
            self._next_id += 1
            self._users.append(user)
        return self.sanitize(user)

    def find_all(self) -> list[UserRead]:
        return [self.sanitize(user) for user in self._users]

    def find_by_id(self, user_id: int) -> UserRead:
        return self.sanitize(self._get(user_id))

    def find_by_email(self, email: str) -> Optional[User]:
        """Full record (hash included) for the email, or None if nobody has it"""
        email = normalize_email(email)
        for user in self._users:
            if user.email == email:
                return user
        return None

    def update(self, user_id: int, fields: dict[str, Any]) -> UserRead:
        """Apply only the provided fields; None values are ignored"""
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        with self._lock:
            user = self._get(user_id)
            for name, value in fields.items():
                if value is None:
                    continue
                if name == "email":
                    value = normalize_email(value)
                setattr(user, name, value)
            user.updated_at = datetime.now(timezone.utc)
        return self.sanitize(user)

    def deactivate(self, user_id: int) -> UserRead:
        with self._lock:
            user = self._get(user_id)
            user.is_active = False
            user.updated_at = datetime.now(timezone.utc)
        return self.sanitize(user)

    def _get(self, user_id: int) -> User:
        for user in self._users:
            if user.id == user_id:
                return user
        raise user_not_found(user_id)

    @staticmethod
    def sanitize(user: User) -> UserRead:
        return UserRead.model_validate(user)
