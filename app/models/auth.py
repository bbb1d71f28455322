from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, EmailStr, Field

from app.models.user import UserRead

EMAIL_MAX_LENGTH = 150


def _strip_and_check_email(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        if len(value) > EMAIL_MAX_LENGTH:
            raise ValueError(f"Email must be at most {EMAIL_MAX_LENGTH} characters")
    return value


# Trimmed before format validation so "  ana@test.com " is accepted
Email = Annotated[EmailStr, BeforeValidator(_strip_and_check_email)]


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(alias="firstName", min_length=2, max_length=80)
    last_name: str = Field(alias="lastName", min_length=2, max_length=80)
    username: str = Field(min_length=3, max_length=40)
    email: Email
    password: str = Field(min_length=6, max_length=50)


class LoginRequest(BaseModel):
    email: Email
    password: str = Field(min_length=1, max_length=50)


class UserUpdate(BaseModel):
    """Partial profile update; omitted fields are left unchanged"""

    model_config = ConfigDict(populate_by_name=True)

    first_name: Optional[str] = Field(default=None, alias="firstName", min_length=2, max_length=80)
    last_name: Optional[str] = Field(default=None, alias="lastName", min_length=2, max_length=80)
    username: Optional[str] = Field(default=None, min_length=3, max_length=40)
    email: Optional[Email] = None
    password: Optional[str] = Field(default=None, min_length=6, max_length=50)


class RegisterResponse(BaseModel):
    message: str
    user: UserRead


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


class MessageResponse(BaseModel):
    message: str
