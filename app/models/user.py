from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


@dataclass
class User:
    """
    User record held by the in-memory UserStore.

    Stores authentication credentials and user profile information.
    password_hash is the only password representation ever kept and never
    leaves the service; external callers get a UserRead instead.
    """

    id: int
    first_name: str
    last_name: str
    username: str
    # Lower-cased and trimmed by the store, unique across users
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime
    # False means logically deleted
    is_active: bool = True

    @property
    def display_name(self) -> str:
        return self.first_name


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRead(BaseModel):
    """Sanitized view of a user: every field except the password hash."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    first_name: str = Field(serialization_alias="firstName")
    last_name: str = Field(serialization_alias="lastName")
    username: str
    email: str
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")
    is_active: bool = Field(serialization_alias="isActive")
